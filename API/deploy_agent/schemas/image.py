from pydantic import BaseModel
from typing import List


class ImageResponse(BaseModel):
    id: str
    repo_tags: List[str]
    repo_digests: List[str]
    size: int
    created: int

    class Config:
        json_schema_extra = {
            "example": {
                "id": "9a0b8c7d6e5f",
                "repo_tags": ["nginx:latest"],
                "repo_digests": ["nginx@sha256:..."],
                "size": 187654321,
                "created": 1718000000,
            }
        }


class ImageListResponse(BaseModel):
    images: List[ImageResponse]
    count: int
