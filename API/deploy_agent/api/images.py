from dataclasses import asdict

from fastapi import APIRouter, Depends

from deploy_agent.api.deps import get_image_service
from deploy_agent.services.image_service import ImageService
from deploy_agent.schemas.image import ImageListResponse, ImageResponse

router = APIRouter(prefix="/images", tags=["images"])


# ---------------------------
# List all engine images
# ---------------------------
@router.get("", response_model=ImageListResponse)
async def list_images(service: ImageService = Depends(get_image_service)):
    images = await service.list_images()
    return ImageListResponse(
        images=[ImageResponse(**asdict(img)) for img in images],
        count=len(images),
    )
