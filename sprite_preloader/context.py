"""
Explicit construction of the shared sprite cache and its preloader.

Whoever owns the process-level context builds one SpriteContext and passes
it down; there is no module-level cache instance.
"""
import logging
from typing import Optional

from sprite_preloader.clients.file_fetcher import FileSpriteFetcher
from sprite_preloader.clients.http_fetcher import HttpSpriteFetcher
from sprite_preloader.clients.interfaces import ISpriteFetcher
from sprite_preloader.config import Settings, settings as default_settings
from sprite_preloader.services.batch_preloader import BatchPreloader
from sprite_preloader.services.sprite_cache import SpriteCache

logger = logging.getLogger("sprite_preloader")

FETCH_MODES = ("file", "http")


class SpriteContext:
    """Owns one shared SpriteCache and the BatchPreloader bound to it."""

    def __init__(self, cache: SpriteCache, preloader: BatchPreloader):
        self.cache = cache
        self.preloader = preloader


def get_fetch_mode(settings: Optional[Settings] = None) -> str:
    """
    Get the normalized sprite fetch mode.

    Returns:
        "file" or "http"; unknown values fall back to "file"
    """
    settings = settings or default_settings
    mode = (settings.SPRITE_FETCH_MODE or "").strip().lower()
    if mode not in FETCH_MODES:
        logger.warning(f"Config SPRITE_FETCH_MODE={settings.SPRITE_FETCH_MODE!r} unknown, using file")
        return "file"
    return mode


def create_sprite_fetcher(settings: Optional[Settings] = None) -> ISpriteFetcher:
    """
    Create the sprite fetcher selected by SPRITE_FETCH_MODE.

    Raises:
        ValueError: If http mode is selected without SPRITE_BASE_URL
    """
    settings = settings or default_settings
    mode = get_fetch_mode(settings)
    if mode == "http":
        logger.info(f"Config Fetcher=HttpSpriteFetcher SPRITE_BASE_URL={settings.SPRITE_BASE_URL}")
        return HttpSpriteFetcher(
            base_url=settings.SPRITE_BASE_URL,
            timeout_seconds=settings.FETCH_TIMEOUT_SECONDS,
            max_bytes=settings.MAX_SPRITE_BYTES,
        )

    logger.info(f"Config Fetcher=FileSpriteFetcher SPRITE_ROOT_DIR={settings.SPRITE_ROOT_DIR}")
    return FileSpriteFetcher(root_dir=settings.SPRITE_ROOT_DIR, max_bytes=settings.MAX_SPRITE_BYTES)


def create_sprite_context(
    settings: Optional[Settings] = None,
    fetcher: Optional[ISpriteFetcher] = None,
) -> SpriteContext:
    """
    Build a cache and preloader sharing it.

    Args:
        settings: Settings to configure the fetcher from (default: module settings)
        fetcher: Fetcher to use instead of the configured one

    Returns:
        SpriteContext holding the shared cache
    """
    cache = SpriteCache(fetcher or create_sprite_fetcher(settings))
    return SpriteContext(cache=cache, preloader=BatchPreloader(cache))
