from pydantic import BaseModel, Field
from typing import Dict, List


class PortResponse(BaseModel):
    private: int
    public: int
    type: str


class ContainerResponse(BaseModel):
    id: str = Field(..., description="Short (12 char) container id")
    name: str
    image: str
    state: str
    status: str
    ports: List[PortResponse] = []
    labels: Dict[str, str] = {}


class ContainerListResponse(BaseModel):
    containers: List[ContainerResponse]
    count: int


class ContainerStateResponse(BaseModel):
    status: str
    running: bool
    paused: bool
    restarting: bool
    oom_killed: bool
    dead: bool
    pid: int
    exit_code: int
    error: str
    started_at: str
    finished_at: str


class MountResponse(BaseModel):
    type: str
    source: str
    destination: str
    mode: str
    rw: bool


class NetworkAttachmentResponse(BaseModel):
    network_id: str
    ip_address: str
    gateway: str
    mac_address: str


class ContainerDetailResponse(BaseModel):
    id: str
    name: str
    image: str
    image_id: str
    created: str
    state: ContainerStateResponse
    ports: List[PortResponse]
    labels: Dict[str, str]
    mounts: List[MountResponse]
    networks: Dict[str, NetworkAttachmentResponse]
    env: List[str]
    restart_policy: str
    restart_count: int
    platform: str


class ContainerActionResponse(BaseModel):
    message: str
    id: str
