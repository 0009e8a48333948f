from dataclasses import asdict

from fastapi import APIRouter, Depends

from deploy_agent.api.deps import get_container_service
from deploy_agent.domain.container import LiveContainer
from deploy_agent.services.container_service import ContainerService
from deploy_agent.schemas.container import (
    ContainerActionResponse,
    ContainerDetailResponse,
    ContainerListResponse,
    ContainerResponse,
)

router = APIRouter(prefix="/containers", tags=["containers"])


def _to_response(container: LiveContainer) -> ContainerResponse:
    return ContainerResponse(
        id=container.short_id,
        name=container.name,
        image=container.image,
        state=container.state,
        status=container.status,
        ports=[asdict(p) for p in container.ports],
        labels=container.labels,
    )


@router.get("", response_model=ContainerListResponse)
async def list_containers(service: ContainerService = Depends(get_container_service)):
    containers = await service.list_containers()
    return ContainerListResponse(
        containers=[_to_response(c) for c in containers],
        count=len(containers),
    )


@router.get("/{container_id}", response_model=ContainerDetailResponse)
async def get_container(container_id: str, service: ContainerService = Depends(get_container_service)):
    detail = await service.get_container(container_id)
    return asdict(detail)


@router.post("/{container_id}/start", response_model=ContainerActionResponse)
async def start_container(container_id: str, service: ContainerService = Depends(get_container_service)):
    await service.start_container(container_id)
    return ContainerActionResponse(message="container started successfully", id=container_id)


@router.post("/{container_id}/stop", response_model=ContainerActionResponse)
async def stop_container(container_id: str, service: ContainerService = Depends(get_container_service)):
    await service.stop_container(container_id)
    return ContainerActionResponse(message="container stopped successfully", id=container_id)
