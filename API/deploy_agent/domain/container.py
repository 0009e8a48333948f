from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class PortInfo:
    private: int
    public: int = 0
    type: str = "tcp"


@dataclass
class LiveContainer:
    id: str
    name: str
    state: str  # running / exited / paused / created / restarting / removing / dead
    status: str = ""  # human readable, e.g. "Up 3 minutes"
    image: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    ports: List[PortInfo] = field(default_factory=list)

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def is_running(self) -> bool:
        return self.state == "running"


@dataclass
class ContainerState:
    status: str = ""
    running: bool = False
    paused: bool = False
    restarting: bool = False
    oom_killed: bool = False
    dead: bool = False
    pid: int = 0
    exit_code: int = 0
    error: str = ""
    started_at: str = ""
    finished_at: str = ""


@dataclass
class MountInfo:
    type: str
    source: str
    destination: str
    mode: str = ""
    rw: bool = True


@dataclass
class NetworkAttachment:
    network_id: str = ""
    ip_address: str = ""
    gateway: str = ""
    mac_address: str = ""


@dataclass
class ContainerDetail:
    id: str
    name: str
    image: str
    image_id: str = ""
    created: str = ""
    state: ContainerState = field(default_factory=ContainerState)
    ports: List[PortInfo] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    mounts: List[MountInfo] = field(default_factory=list)
    networks: Dict[str, NetworkAttachment] = field(default_factory=dict)
    env: List[str] = field(default_factory=list)
    restart_policy: str = "no"
    restart_count: int = 0
    platform: str = ""
