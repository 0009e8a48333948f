from typing import List

from deploy_agent.domain.image import ImageInfo
from deploy_agent.domain.ports import ContainerEngine


class ImageService:
    def __init__(self, engine: ContainerEngine):
        self.engine = engine

    async def list_images(self) -> List[ImageInfo]:
        images = await self.engine.list_images()
        return sorted(images, key=lambda img: img.created, reverse=True)
