import logging
from typing import Dict, List

from deploy_agent.domain.container import LiveContainer
from deploy_agent.domain.errors import DescriptorParseError, EngineUnavailableError
from deploy_agent.domain.ports import ContainerEngine
from deploy_agent.domain.project import (
    NetworkDef,
    ProjectContainer,
    ProjectEnvironment,
    ProjectInfo,
    ProjectVolume,
    ServiceStatus,
    ServiceView,
)
from deploy_agent.services.descriptor import DescriptorStore, locate_descriptor
from deploy_agent.services.reconciler import count_containers, derive_service_statuses

logger = logging.getLogger(__name__)


class ProjectService:
    """Read side of compose projects: catalog, descriptor views and derived status."""

    def __init__(
        self,
        store: DescriptorStore,
        engine: ContainerEngine,
        project_label: str = "com.docker.compose.project",
        service_label: str = "com.docker.compose.service",
    ):
        self.store = store
        self.engine = engine
        self.project_label = project_label
        self.service_label = service_label

    # -------------------------------
    # Catalog
    # -------------------------------
    async def list_projects(self) -> List[ProjectInfo]:
        projects = []
        for path in self.store.list_project_dirs():
            if locate_descriptor(path, self.store.filenames) is None:
                continue
            projects.append(await self.get_project(path.name))
        return projects

    async def get_project(self, name: str) -> ProjectInfo:
        path, _ = self.store.locate(name)
        service_count = await self._service_count(name)
        running, stopped = count_containers(await self._project_containers_or_empty(name))
        return ProjectInfo(
            name=name,
            path=str(path),
            service_count=service_count,
            containers_running=running,
            containers_stopped=stopped,
        )

    # -------------------------------
    # Descriptor views
    # -------------------------------
    async def get_compose(self, name: str) -> str:
        return await self.store.read_text(name)

    async def get_volumes(self, name: str) -> List[ProjectVolume]:
        descriptor = await self.store.load(name)
        return [
            ProjectVolume(service=service.name, volume=volume)
            for service in descriptor.services.values()
            for volume in service.volumes
        ]

    async def get_environment(self, name: str) -> List[ProjectEnvironment]:
        descriptor = await self.store.load(name)
        return [
            ProjectEnvironment(service=service.name, env=dict(service.environment))
            for service in descriptor.services.values()
            if service.environment
        ]

    async def get_networks(self, name: str) -> List[NetworkDef]:
        descriptor = await self.store.load(name)
        return descriptor.networks

    # -------------------------------
    # Live views
    # -------------------------------
    async def get_containers(self, name: str) -> List[ProjectContainer]:
        self.store.project_path(name)
        containers = await self.engine.list_containers(labels={self.project_label: name})
        return [
            ProjectContainer(
                id=c.short_id,
                name=c.name,
                service=c.labels.get(self.service_label, ""),
                state=c.state,
                status=c.status,
            )
            for c in containers
        ]

    async def get_service_statuses(self, name: str) -> Dict[str, ServiceStatus]:
        descriptor = await self.store.load(name)
        containers = await self._project_containers_or_empty(name)
        return derive_service_statuses(descriptor.services.keys(), containers, self.service_label)

    async def get_services(self, name: str) -> List[ServiceView]:
        descriptor = await self.store.load(name)
        containers = await self._project_containers_or_empty(name)
        statuses = derive_service_statuses(descriptor.services.keys(), containers, self.service_label)
        return [
            ServiceView(**vars(service), status=statuses[service_name])
            for service_name, service in descriptor.services.items()
        ]

    # -------------------------------
    # Internal methods
    # -------------------------------
    async def _service_count(self, name: str) -> int:
        try:
            descriptor = await self.store.load(name)
        except DescriptorParseError as exc:
            logger.warning("[PROJECTS] %s; reporting 0 services", exc)
            return 0
        return len(descriptor.services)

    async def _project_containers_or_empty(self, name: str) -> List[LiveContainer]:
        """One label-filtered query for the whole project; empty if the engine is down."""
        try:
            return await self.engine.list_containers(labels={self.project_label: name})
        except EngineUnavailableError as exc:
            logger.warning("[PROJECTS] %s: live state unavailable (%s)", name, exc)
            return []
