"""
Backend-agnostic interface for sprite fetch clients.
"""
from abc import ABC, abstractmethod
from typing import Optional


class SpriteImage:
    """A fetched sprite resource."""

    def __init__(
        self,
        path: str,
        image_bytes: bytes,
        width: int,
        height: int,
        content_type: Optional[str] = None,
    ):
        """
        Initialize sprite image.

        Args:
            path: Sprite path as requested
            image_bytes: Encoded image bytes (PNG/JPG)
            width: Image width in pixels
            height: Image height in pixels
            content_type: MIME type, when known
        """
        self.path = path
        self.image_bytes = image_bytes
        self.width = width
        self.height = height
        self.content_type = content_type

    @property
    def size_bytes(self) -> int:
        return len(self.image_bytes)

    def __repr__(self) -> str:
        return (
            f"SpriteImage(path={self.path!r}, dims={self.width}x{self.height}, "
            f"size_bytes={self.size_bytes})"
        )


class ISpriteFetcher(ABC):
    """Interface for sprite fetch clients."""

    @abstractmethod
    async def fetch(self, path: str) -> SpriteImage:
        """
        Produce the sprite resource for a path.

        Args:
            path: Sprite path from the manifest

        Returns:
            SpriteImage exposing width and height

        Raises:
            Exception: If the sprite cannot be fetched or decoded
        """
        pass
