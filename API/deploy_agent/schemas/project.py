from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal


class ProjectResponse(BaseModel):
    name: str
    path: str
    service_count: int
    containers_running: int
    containers_stopped: int

    class Config:
        json_schema_extra = {
            "example": {
                "name": "blog",
                "path": "/srv/projects/blog",
                "service_count": 2,
                "containers_running": 1,
                "containers_stopped": 0,
            }
        }


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    count: int


class ComposeContentResponse(BaseModel):
    content: str


class ProjectContainerResponse(BaseModel):
    id: str
    name: str
    service: str
    state: str
    status: str


class ProjectContainerListResponse(BaseModel):
    containers: List[ProjectContainerResponse]
    count: int


class ProjectVolumeResponse(BaseModel):
    service: str
    volume: str


class ProjectVolumeListResponse(BaseModel):
    volumes: List[ProjectVolumeResponse]
    count: int


class ProjectEnvironmentResponse(BaseModel):
    service: str
    env: Dict[str, str]


class ProjectEnvironmentListResponse(BaseModel):
    environment: List[ProjectEnvironmentResponse]
    count: int


class ProjectNetworkResponse(BaseModel):
    name: str
    driver: str
    config: Dict[str, Any]


class ProjectNetworkListResponse(BaseModel):
    networks: List[ProjectNetworkResponse]
    count: int


class ServiceResponse(BaseModel):
    name: str
    image: str
    build: str
    ports: List[str]
    environment: Dict[str, str]
    volumes: List[str]
    depends_on: List[str]
    networks: List[str]
    restart: str
    command: str
    status: Literal["running", "stopped", "not_created"] = Field(
        ..., description="Derived from live containers carrying the service label"
    )


class ServiceListResponse(BaseModel):
    services: List[ServiceResponse]
    count: int


class ServiceActionResponse(BaseModel):
    message: str
    project: str
    service: str
