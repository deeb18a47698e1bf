"""
Pydantic models for the sprite manifest and extracted preload entries.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

IMAGE_SPRITE_TYPE = "image"


class ManifestEntry(BaseModel):
    """One manifest record; only image entries with a source are preloaded."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Sprite kind: image, pixels, etc.")
    src: Optional[str] = Field(default=None, description="Resource path passed verbatim to the fetcher")
    width: Optional[Union[int, float]] = None
    height: Optional[Union[int, float]] = None

    @property
    def is_image(self) -> bool:
        return self.type == IMAGE_SPRITE_TYPE and bool(self.src)


class ExtractedSprite(BaseModel):
    """Manifest entry selected for preloading."""

    key: str
    path: str
    width: Optional[Union[int, float]] = None
    height: Optional[Union[int, float]] = None
