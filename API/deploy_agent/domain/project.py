from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List


class ServiceStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    NOT_CREATED = "not_created"


@dataclass
class ServiceDef:
    name: str
    image: str = ""
    build: str = ""  # build context
    ports: List[str] = field(default_factory=list)
    environment: Dict[str, str] = field(default_factory=dict)
    volumes: List[str] = field(default_factory=list)
    depends_on: List[str] = field(default_factory=list)
    networks: List[str] = field(default_factory=list)
    restart: str = ""
    command: str = ""


@dataclass
class NetworkDef:
    name: str
    driver: str = ""
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProjectDescriptor:
    name: str
    path: Path
    filename: str  # descriptor file inside `path`
    services: Dict[str, ServiceDef] = field(default_factory=dict)
    networks: List[NetworkDef] = field(default_factory=list)

    @property
    def compose_file(self) -> Path:
        return self.path / self.filename


@dataclass
class ProjectInfo:
    name: str
    path: str
    service_count: int = 0
    containers_running: int = 0
    containers_stopped: int = 0


@dataclass
class ProjectContainer:
    id: str
    name: str
    service: str
    state: str
    status: str


@dataclass
class ProjectVolume:
    service: str
    volume: str


@dataclass
class ProjectEnvironment:
    service: str
    env: Dict[str, str]


@dataclass
class ServiceView(ServiceDef):
    status: ServiceStatus = ServiceStatus.NOT_CREATED
