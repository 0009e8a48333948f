from fastapi import Request

from deploy_agent.services.container_service import ContainerService
from deploy_agent.services.image_service import ImageService
from deploy_agent.services.lifecycle_service import LifecycleService
from deploy_agent.services.project_service import ProjectService


def get_container_service(request: Request) -> ContainerService:
    return request.app.state.container_service


def get_image_service(request: Request) -> ImageService:
    return request.app.state.image_service


def get_project_service(request: Request) -> ProjectService:
    return request.app.state.project_service


def get_lifecycle_service(request: Request) -> LifecycleService:
    return request.app.state.lifecycle_service
