from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Protocol

from deploy_agent.domain.container import ContainerDetail, LiveContainer
from deploy_agent.domain.image import ImageInfo


class ContainerEngine(Protocol):
    # -------------------------------
    # Containers
    # -------------------------------
    async def list_containers(
        self,
        labels: Dict[str, str] | None = None,
        include_stopped: bool = True,
    ) -> List[LiveContainer]:
        """List containers carrying every given label (key=value)."""
        ...

    async def inspect_container(self, container_id: str) -> ContainerDetail:
        """Full engine view of one container."""
        ...

    async def start_container(self, container_id: str) -> None:
        """Start a stopped container."""
        ...

    async def stop_container(self, container_id: str) -> None:
        """Stop a running container."""
        ...

    # -------------------------------
    # Images
    # -------------------------------
    async def list_images(self) -> List[ImageInfo]:
        ...


@dataclass(frozen=True)
class MaterializeRequest:
    project: str
    service: str
    project_path: Path
    compose_filename: str


@dataclass(frozen=True)
class MaterializeOutcome:
    exit_code: int
    output: str  # stdout and stderr, interleaved

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ComposeRunner(Protocol):
    async def materialize(self, request: MaterializeRequest) -> MaterializeOutcome:
        """Create and start the containers of exactly one service, detached."""
        ...
