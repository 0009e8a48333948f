from dataclasses import dataclass
from typing import Any, Dict, List


class DeployAgentError(Exception):
    """Base class for errors surfaced to the HTTP layer."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def extra(self) -> Dict[str, Any]:
        return {}


class NotFoundError(DeployAgentError):
    status_code = 404


class DescriptorParseError(DeployAgentError):
    status_code = 422


class EngineUnavailableError(DeployAgentError):
    status_code = 503


class ContainerOperationError(DeployAgentError):
    """The engine rejected an operation on one container."""

    def __init__(self, container_id: str, reason: str):
        super().__init__(f"container {container_id[:12]}: {reason}")
        self.container_id = container_id
        self.reason = reason

    def extra(self) -> Dict[str, Any]:
        return {"container": self.container_id[:12]}


class ContainerNotFoundError(NotFoundError, ContainerOperationError):
    def __init__(self, container_id: str):
        ContainerOperationError.__init__(self, container_id, "no such container")


@dataclass(frozen=True)
class ContainerFailure:
    container: str
    error: str


class PartialFailureError(DeployAgentError):
    """Some containers of a service could not be started or stopped."""

    def __init__(self, action: str, failures: List[ContainerFailure]):
        listing = "; ".join(f"container {f.container}: {f.error}" for f in failures)
        super().__init__(f"failed to {action} some containers: {listing}")
        self.action = action
        self.failures = failures

    def extra(self) -> Dict[str, Any]:
        return {"failures": [{"container": f.container, "error": f.error} for f in self.failures]}


class ExternalToolError(DeployAgentError):
    status_code = 502

    def __init__(self, message: str, output: str = "", exit_code: int | None = None):
        super().__init__(message)
        self.output = output
        self.exit_code = exit_code

    def extra(self) -> Dict[str, Any]:
        return {"output": self.output, "exit_code": self.exit_code}
