"""
Pydantic models shared across the cache, preloader, and fetch clients.
"""
from sprite_preloader.models.progress import (
    CacheStats,
    ErrorInfo,
    PreloadStats,
    ProgressEvent,
    ProgressSnapshot,
)
from sprite_preloader.models.sprites import IMAGE_SPRITE_TYPE, ExtractedSprite, ManifestEntry

__all__ = [
    "CacheStats",
    "ErrorInfo",
    "ExtractedSprite",
    "IMAGE_SPRITE_TYPE",
    "ManifestEntry",
    "PreloadStats",
    "ProgressEvent",
    "ProgressSnapshot",
]
