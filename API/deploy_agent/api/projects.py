from dataclasses import asdict

from fastapi import APIRouter, Depends

from deploy_agent.api.deps import get_lifecycle_service, get_project_service
from deploy_agent.services.lifecycle_service import LifecycleService
from deploy_agent.services.project_service import ProjectService
from deploy_agent.schemas.project import (
    ComposeContentResponse,
    ProjectContainerListResponse,
    ProjectContainerResponse,
    ProjectEnvironmentListResponse,
    ProjectEnvironmentResponse,
    ProjectListResponse,
    ProjectNetworkListResponse,
    ProjectNetworkResponse,
    ProjectResponse,
    ProjectVolumeListResponse,
    ProjectVolumeResponse,
    ServiceActionResponse,
    ServiceListResponse,
    ServiceResponse,
)

router = APIRouter(prefix="/projects", tags=["projects"])


# ---------------------------
# Catalog
# ---------------------------
@router.get("", response_model=ProjectListResponse)
async def list_projects(service: ProjectService = Depends(get_project_service)):
    projects = await service.list_projects()
    return ProjectListResponse(
        projects=[ProjectResponse(**asdict(p)) for p in projects],
        count=len(projects),
    )


@router.get("/{name}", response_model=ProjectResponse)
async def get_project(name: str, service: ProjectService = Depends(get_project_service)):
    return ProjectResponse(**asdict(await service.get_project(name)))


# ---------------------------
# Descriptor views
# ---------------------------
@router.get("/{name}/compose", response_model=ComposeContentResponse)
async def get_compose(name: str, service: ProjectService = Depends(get_project_service)):
    return ComposeContentResponse(content=await service.get_compose(name))


@router.get("/{name}/volumes", response_model=ProjectVolumeListResponse)
async def get_volumes(name: str, service: ProjectService = Depends(get_project_service)):
    volumes = await service.get_volumes(name)
    return ProjectVolumeListResponse(
        volumes=[ProjectVolumeResponse(**asdict(v)) for v in volumes],
        count=len(volumes),
    )


@router.get("/{name}/environment", response_model=ProjectEnvironmentListResponse)
async def get_environment(name: str, service: ProjectService = Depends(get_project_service)):
    environment = await service.get_environment(name)
    return ProjectEnvironmentListResponse(
        environment=[ProjectEnvironmentResponse(**asdict(e)) for e in environment],
        count=len(environment),
    )


@router.get("/{name}/networks", response_model=ProjectNetworkListResponse)
async def get_networks(name: str, service: ProjectService = Depends(get_project_service)):
    networks = await service.get_networks(name)
    return ProjectNetworkListResponse(
        networks=[ProjectNetworkResponse(**asdict(n)) for n in networks],
        count=len(networks),
    )


# ---------------------------
# Live state
# ---------------------------
@router.get("/{name}/containers", response_model=ProjectContainerListResponse)
async def get_containers(name: str, service: ProjectService = Depends(get_project_service)):
    containers = await service.get_containers(name)
    return ProjectContainerListResponse(
        containers=[ProjectContainerResponse(**asdict(c)) for c in containers],
        count=len(containers),
    )


@router.get("/{name}/services", response_model=ServiceListResponse)
async def get_services(name: str, service: ProjectService = Depends(get_project_service)):
    services = await service.get_services(name)
    return ServiceListResponse(
        services=[ServiceResponse(**{**asdict(s), "status": s.status.value}) for s in services],
        count=len(services),
    )


# ---------------------------
# Lifecycle
# ---------------------------
@router.post("/{name}/services/{service_name}/start", response_model=ServiceActionResponse)
async def start_service(
    name: str,
    service_name: str,
    lifecycle: LifecycleService = Depends(get_lifecycle_service),
):
    await lifecycle.start_service(name, service_name)
    return ServiceActionResponse(message="service started successfully", project=name, service=service_name)


@router.post("/{name}/services/{service_name}/stop", response_model=ServiceActionResponse)
async def stop_service(
    name: str,
    service_name: str,
    lifecycle: LifecycleService = Depends(get_lifecycle_service),
):
    await lifecycle.stop_service(name, service_name)
    return ServiceActionResponse(message="service stopped successfully", project=name, service=service_name)
