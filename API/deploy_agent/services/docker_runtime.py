import asyncio
import logging
from typing import Any, Dict, List, Optional

import docker
from docker.errors import APIError, DockerException, NotFound
from requests.exceptions import ConnectionError as RequestsConnectionError

from deploy_agent.domain.container import (
    ContainerDetail,
    ContainerState,
    LiveContainer,
    MountInfo,
    NetworkAttachment,
    PortInfo,
)
from deploy_agent.domain.errors import (
    ContainerNotFoundError,
    ContainerOperationError,
    EngineUnavailableError,
)
from deploy_agent.domain.image import ImageInfo
from deploy_agent.domain.ports import ContainerEngine

logger = logging.getLogger(__name__)


def _strip_slash(name: str) -> str:
    return name[1:] if name.startswith("/") else name


def _short_image_id(image_id: str) -> str:
    if image_id.startswith("sha256:"):
        image_id = image_id[len("sha256:"):]
    return image_id[:12]


def to_live_container(attrs: Dict[str, Any]) -> LiveContainer:
    """Map one entry of the engine's container list onto a LiveContainer."""
    names = attrs.get("Names") or []
    ports = [
        PortInfo(
            private=int(p.get("PrivatePort") or 0),
            public=int(p.get("PublicPort") or 0),
            type=p.get("Type") or "tcp",
        )
        for p in attrs.get("Ports") or []
    ]
    return LiveContainer(
        id=attrs.get("Id", ""),
        name=_strip_slash(names[0]) if names else "",
        state=attrs.get("State", ""),
        status=attrs.get("Status", ""),
        image=attrs.get("Image", ""),
        labels=dict(attrs.get("Labels") or {}),
        ports=ports,
    )


def to_container_detail(attrs: Dict[str, Any]) -> ContainerDetail:
    """Map an inspect payload onto a ContainerDetail."""
    config = attrs.get("Config") or {}
    host_config = attrs.get("HostConfig") or {}
    network_settings = attrs.get("NetworkSettings") or {}
    state = attrs.get("State") or {}

    ports: List[PortInfo] = []
    for port, bindings in (network_settings.get("Ports") or {}).items():
        private, _, proto = port.partition("/")
        for binding in bindings or []:
            ports.append(
                PortInfo(
                    private=int(private or 0),
                    public=int(binding.get("HostPort") or 0),
                    type=proto or "tcp",
                )
            )

    networks = {
        name: NetworkAttachment(
            network_id=net.get("NetworkID", ""),
            ip_address=net.get("IPAddress", ""),
            gateway=net.get("Gateway", ""),
            mac_address=net.get("MacAddress", ""),
        )
        for name, net in (network_settings.get("Networks") or {}).items()
    }

    return ContainerDetail(
        id=attrs.get("Id", "")[:12],
        name=_strip_slash(attrs.get("Name", "")),
        image=config.get("Image", ""),
        image_id=attrs.get("Image", ""),
        created=attrs.get("Created", ""),
        state=ContainerState(
            status=state.get("Status", ""),
            running=bool(state.get("Running")),
            paused=bool(state.get("Paused")),
            restarting=bool(state.get("Restarting")),
            oom_killed=bool(state.get("OOMKilled")),
            dead=bool(state.get("Dead")),
            pid=int(state.get("Pid") or 0),
            exit_code=int(state.get("ExitCode") or 0),
            error=state.get("Error", ""),
            started_at=state.get("StartedAt", ""),
            finished_at=state.get("FinishedAt", ""),
        ),
        ports=ports,
        labels=dict(config.get("Labels") or {}),
        mounts=[
            MountInfo(
                type=m.get("Type", ""),
                source=m.get("Source", ""),
                destination=m.get("Destination", ""),
                mode=m.get("Mode", ""),
                rw=bool(m.get("RW", True)),
            )
            for m in attrs.get("Mounts") or []
        ],
        networks=networks,
        env=list(config.get("Env") or []),
        restart_policy=(host_config.get("RestartPolicy") or {}).get("Name") or "no",
        restart_count=int(attrs.get("RestartCount") or 0),
        platform=attrs.get("Platform", ""),
    )


def to_image_info(attrs: Dict[str, Any]) -> ImageInfo:
    return ImageInfo(
        id=_short_image_id(attrs.get("Id", "")),
        repo_tags=list(attrs.get("RepoTags") or []),
        repo_digests=list(attrs.get("RepoDigests") or []),
        size=int(attrs.get("Size") or 0),
        created=attrs.get("Created") or 0,
    )


class DockerSDKRuntime(ContainerEngine):
    """ContainerEngine backed by the Docker SDK; blocking calls run in worker threads."""

    def __init__(self, docker_client: Optional[docker.DockerClient] = None):
        self._docker_client = docker_client

    @property
    def docker_client(self) -> docker.DockerClient:
        if self._docker_client is None:
            try:
                self._docker_client = docker.from_env()
            except DockerException as exc:
                logger.warning("[ENGINE] docker client unavailable: %s", exc)
                raise EngineUnavailableError(f"docker engine is not available: {exc}") from exc
        return self._docker_client

    async def _call(self, fn, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except (RequestsConnectionError, ConnectionError) as exc:
            raise EngineUnavailableError(f"docker engine is not reachable: {exc}") from exc

    # -------------------------------
    # Containers
    # -------------------------------
    async def list_containers(
        self,
        labels: Dict[str, str] | None = None,
        include_stopped: bool = True,
    ) -> List[LiveContainer]:
        filters = {"label": [f"{k}={v}" for k, v in (labels or {}).items()]} if labels else None
        try:
            containers = await self._call(
                self.docker_client.containers.list,
                all=include_stopped,
                filters=filters,
                sparse=True,
            )
        except DockerException as exc:
            raise EngineUnavailableError(f"failed to list containers: {exc}") from exc
        return [to_live_container(c.attrs) for c in containers]

    async def inspect_container(self, container_id: str) -> ContainerDetail:
        try:
            container = await self._call(self.docker_client.containers.get, container_id)
        except NotFound as exc:
            raise ContainerNotFoundError(container_id) from exc
        except APIError as exc:
            raise ContainerOperationError(container_id, exc.explanation or str(exc)) from exc
        return to_container_detail(container.attrs)

    async def start_container(self, container_id: str) -> None:
        try:
            container = await self._call(self.docker_client.containers.get, container_id)
            await self._call(container.start)
        except NotFound as exc:
            raise ContainerNotFoundError(container_id) from exc
        except APIError as exc:
            raise ContainerOperationError(container_id, exc.explanation or str(exc)) from exc
        logger.info("[ENGINE] started container %s", container_id[:12])

    async def stop_container(self, container_id: str) -> None:
        try:
            container = await self._call(self.docker_client.containers.get, container_id)
            await self._call(container.stop)
        except NotFound as exc:
            raise ContainerNotFoundError(container_id) from exc
        except APIError as exc:
            raise ContainerOperationError(container_id, exc.explanation or str(exc)) from exc
        logger.info("[ENGINE] stopped container %s", container_id[:12])

    # -------------------------------
    # Images
    # -------------------------------
    async def list_images(self) -> List[ImageInfo]:
        try:
            images = await self._call(self.docker_client.images.list, all=True)
        except DockerException as exc:
            raise EngineUnavailableError(f"failed to list images: {exc}") from exc
        return [to_image_info(img.attrs) for img in images]
