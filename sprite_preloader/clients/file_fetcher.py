"""
Sprite fetch client reading sprite files from a local directory.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from sprite_preloader.clients.interfaces import ISpriteFetcher, SpriteImage
from sprite_preloader.config import settings
from sprite_preloader.utils.errors import ErrorCodes, FetchError
from sprite_preloader.utils.image_info import describe_image
from sprite_preloader.utils.logging import log_fetch_call, trace_calls

logger = logging.getLogger("sprite_preloader")


class FileSpriteFetcher(ISpriteFetcher):
    """Loads sprites from files below a root directory."""

    def __init__(self, root_dir: Union[str, Path] = ".", max_bytes: Optional[int] = None):
        """
        Initialize file sprite fetcher.

        Args:
            root_dir: Directory relative sprite paths are resolved against
            max_bytes: Maximum accepted file size (default from config)
        """
        self.root_dir = Path(root_dir)
        self.max_bytes = max_bytes or settings.MAX_SPRITE_BYTES

    def resolve(self, path: str) -> Path:
        """Resolve a manifest path ("/sprites/a.png" or "sprites/a.png") below root_dir."""
        return self.root_dir / path.lstrip("/")

    @trace_calls
    async def fetch(self, path: str) -> SpriteImage:
        file_path = self.resolve(path)
        return await log_fetch_call(
            service_name="FILE",
            endpoint=str(file_path),
            path=path,
            call_func=lambda: self._read(path, file_path),
        )

    def _read_bytes(self, path: str, file_path: Path) -> bytes:
        """Blocking existence check, size check and read; runs off the event loop."""
        if not file_path.is_file():
            raise FetchError(ErrorCodes.NOT_FOUND, f"Sprite file not found: {file_path}", path=path)

        size = file_path.stat().st_size
        if size > self.max_bytes:
            raise FetchError(
                ErrorCodes.PAYLOAD_TOO_LARGE,
                f"Sprite file is {size} bytes, limit is {self.max_bytes}",
                path=path,
            )

        return file_path.read_bytes()

    async def _read(self, path: str, file_path: Path) -> SpriteImage:
        image_bytes = await asyncio.to_thread(self._read_bytes, path, file_path)
        try:
            width, height, content_type = describe_image(image_bytes)
        except ValueError as e:
            raise FetchError(ErrorCodes.DECODE_FAILED, str(e), path=path) from e

        return SpriteImage(
            path=path,
            image_bytes=image_bytes,
            width=width,
            height=height,
            content_type=content_type,
        )
