import logging
from typing import List

from deploy_agent.domain.container import LiveContainer
from deploy_agent.domain.errors import (
    ContainerFailure,
    ContainerOperationError,
    ExternalToolError,
    NotFoundError,
    PartialFailureError,
)
from deploy_agent.domain.ports import ComposeRunner, ContainerEngine, MaterializeRequest
from deploy_agent.services.descriptor import DescriptorStore

logger = logging.getLogger(__name__)


class LifecycleService:
    """Start/stop one service of a compose project."""

    def __init__(
        self,
        store: DescriptorStore,
        engine: ContainerEngine,
        compose_runner: ComposeRunner,
        project_label: str = "com.docker.compose.project",
        service_label: str = "com.docker.compose.service",
    ):
        self.store = store
        self.engine = engine
        self.compose_runner = compose_runner
        self.project_label = project_label
        self.service_label = service_label

    async def start_service(self, project: str, service: str) -> None:
        """
        Start every non-running container of the service.
        When the service has no containers at all, materialize it with compose.
        """
        containers = await self._service_containers(project, service)
        if not containers:
            logger.info("[LIFECYCLE] %s/%s has no containers, running compose up", project, service)
            await self._materialize(project, service)
            return

        pending = [c for c in containers if not c.is_running]
        await self._apply_all("start", pending, self.engine.start_container)
        logger.info("[LIFECYCLE] started %s/%s (%d container(s))", project, service, len(pending))

    async def stop_service(self, project: str, service: str) -> None:
        containers = await self._service_containers(project, service)
        if not containers:
            raise NotFoundError(f"no containers found for service {service} in project {project}")

        running = [c for c in containers if c.is_running]
        await self._apply_all("stop", running, self.engine.stop_container)
        logger.info("[LIFECYCLE] stopped %s/%s (%d container(s))", project, service, len(running))

    # -------------------------------
    # Internal methods
    # -------------------------------
    async def _service_containers(self, project: str, service: str) -> List[LiveContainer]:
        return await self.engine.list_containers(
            labels={self.project_label: project, self.service_label: service},
            include_stopped=True,
        )

    async def _apply_all(self, action: str, containers: List[LiveContainer], operation) -> None:
        """Run `operation` on every container, then raise once for all failures."""
        failures: List[ContainerFailure] = []
        for container in containers:
            try:
                await operation(container.id)
            except ContainerOperationError as exc:
                logger.warning("[LIFECYCLE] %s %s failed: %s", action, container.short_id, exc.reason)
                failures.append(ContainerFailure(container=container.short_id, error=exc.reason))
        if failures:
            raise PartialFailureError(action, failures)

    async def _materialize(self, project: str, service: str) -> None:
        descriptor = await self.store.load(project)
        if service not in descriptor.services:
            raise NotFoundError(f"service {service} not found in project {project}")

        outcome = await self.compose_runner.materialize(
            MaterializeRequest(
                project=project,
                service=service,
                project_path=descriptor.path,
                compose_filename=descriptor.filename,
            )
        )
        if not outcome.ok:
            raise ExternalToolError(
                f"failed to start service {service} with docker compose (exit code {outcome.exit_code})",
                output=outcome.output,
                exit_code=outcome.exit_code,
            )
