"""
Sprite cache: single-sprite loading with request coalescing, memoization,
and permanent-failure memory.

All state lives on one event loop. A path is in at most one of the cache or
the failed set; while a fetch is pending it is tracked only in the in-flight
table.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from sprite_preloader.clients.interfaces import ISpriteFetcher
from sprite_preloader.models import CacheStats
from sprite_preloader.utils.errors import LoadFailedError, PreviouslyFailedError

logger = logging.getLogger("sprite_preloader")

BYTES_PER_PIXEL = 4  # RGBA


class SpriteCache:
    """In-memory sprite cache in front of a sprite fetcher."""

    def __init__(self, fetcher: ISpriteFetcher):
        """
        Initialize sprite cache.

        Args:
            fetcher: Client performing the actual sprite I/O
        """
        self.fetcher = fetcher
        self._cache: Dict[str, Any] = {}  # path -> sprite handle
        self._in_flight: Dict[str, asyncio.Task] = {}  # path -> pending fetch
        self._loaded: Set[str] = set()
        self._failed: Set[str] = set()

    async def load(self, path: str) -> Any:
        """
        Load a sprite, reusing a cached or pending result when there is one.

        Args:
            path: Sprite path

        Returns:
            The sprite handle produced by the fetcher

        Raises:
            PreviouslyFailedError: If the path failed before and was not retried
            LoadFailedError: If the fetch fails
        """
        if path in self._cache:
            return self._cache[path]

        pending = self._in_flight.get(path)
        if pending is not None:
            logger.debug(f"SpriteLoadJoined path={path}")
            return await asyncio.shield(pending)

        if path in self._failed:
            raise PreviouslyFailedError(path)

        logger.debug(f"SpriteLoadStart path={path}")
        task = asyncio.ensure_future(self._fetch_and_settle(path))
        self._in_flight[path] = task
        return await asyncio.shield(task)

    async def _fetch_and_settle(self, path: str) -> Any:
        task = asyncio.current_task()
        try:
            sprite = await self.fetcher.fetch(path)
        except Exception as e:
            # A clear during the fetch detaches it; its outcome is not recorded
            if self._in_flight.get(path) is task:
                self._failed.add(path)
            logger.warning(f"SpriteLoadFailed path={path} error={type(e).__name__}: {e}")
            raise LoadFailedError(path, e) from e
        else:
            if self._in_flight.get(path) is task:
                self._cache[path] = sprite
                self._loaded.add(path)
            else:
                logger.info(f"SpriteLoadDiscarded path={path} reason=cleared_while_pending")
            logger.info(
                f"SpriteLoaded path={path} "
                f"dims={getattr(sprite, 'width', 0)}x{getattr(sprite, 'height', 0)}"
            )
            return sprite
        finally:
            if self._in_flight.get(path) is task:
                del self._in_flight[path]

    async def preload_many(self, paths: Iterable[str]) -> List[Any]:
        """
        Load every path concurrently without failing as a whole.

        Args:
            paths: Sprite paths to load

        Returns:
            Handles of the sprites that loaded, in request order
        """
        paths = list(paths)
        results = await asyncio.gather(*(self.load(path) for path in paths), return_exceptions=True)

        loaded = []
        failed_paths = []
        for path, result in zip(paths, results):
            if isinstance(result, BaseException):
                failed_paths.append(path)
                logger.warning(f"SpritePreloadFailed path={path} error={result}")
            else:
                loaded.append(result)

        logger.info(f"SpritePreloadBatch loaded={len(loaded)} total={len(paths)}")
        if failed_paths:
            logger.warning(f"SpritePreloadBatch failed={len(failed_paths)} paths={failed_paths}")
        return loaded

    def get_cached(self, path: str) -> Optional[Any]:
        return self._cache.get(path)

    def is_loaded(self, path: str) -> bool:
        return path in self._loaded

    def is_failed(self, path: str) -> bool:
        return path in self._failed

    def clear_one(self, path: str) -> None:
        """Forget everything about one path. A pending fetch keeps running but is detached."""
        self._cache.pop(path, None)
        self._loaded.discard(path)
        self._failed.discard(path)
        self._in_flight.pop(path, None)
        logger.debug(f"SpriteCacheCleared path={path}")

    def clear_all(self) -> None:
        self._cache.clear()
        self._loaded.clear()
        self._failed.clear()
        self._in_flight.clear()
        logger.debug("SpriteCacheCleared path=*")

    def stats(self) -> CacheStats:
        return CacheStats(
            cachedCount=len(self._cache),
            loadedCount=len(self._loaded),
            failedCount=len(self._failed),
            inFlightCount=len(self._in_flight),
            estimatedMemoryBytes=self.estimate_memory_bytes(),
        )

    def estimate_memory_bytes(self) -> int:
        """Estimate decoded memory use: width * height * 4 bytes per cached sprite."""
        total_bytes = 0
        for sprite in self._cache.values():
            width = getattr(sprite, "width", None) or 0
            height = getattr(sprite, "height", None) or 0
            total_bytes += width * height * BYTES_PER_PIXEL
        return total_bytes

    async def retry_failed(self) -> List[Any]:
        """
        Give every failed path a fresh attempt.

        Returns:
            Handles of the sprites that loaded on retry
        """
        failed_paths = sorted(self._failed)
        for path in failed_paths:
            self._failed.discard(path)

        logger.info(f"SpriteRetry count={len(failed_paths)}")
        return await self.preload_many(failed_paths)
