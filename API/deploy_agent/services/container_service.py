from typing import List

from deploy_agent.domain.container import ContainerDetail, LiveContainer
from deploy_agent.domain.ports import ContainerEngine


class ContainerService:
    """Plain container operations, independent of any compose project."""

    def __init__(self, engine: ContainerEngine):
        self.engine = engine

    async def list_containers(self) -> List[LiveContainer]:
        return await self.engine.list_containers(include_stopped=True)

    async def get_container(self, container_id: str) -> ContainerDetail:
        return await self.engine.inspect_container(container_id)

    async def start_container(self, container_id: str) -> None:
        await self.engine.start_container(container_id)

    async def stop_container(self, container_id: str) -> None:
        await self.engine.stop_container(container_id)
