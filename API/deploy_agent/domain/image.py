from dataclasses import dataclass, field
from typing import List


@dataclass
class ImageInfo:
    id: str
    repo_tags: List[str] = field(default_factory=list)
    repo_digests: List[str] = field(default_factory=list)
    size: int = 0
    created: int = 0  # unix timestamp
