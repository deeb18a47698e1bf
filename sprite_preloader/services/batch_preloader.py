"""
Batch preloader: whole-manifest preload orchestration on top of SpriteCache.

A run goes Idle -> Preloading -> Complete. Partial failure still ends in
Complete; callers inspect the failed counter to tell the difference.
"""
import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from sprite_preloader.models import (
    ExtractedSprite,
    ManifestEntry,
    PreloadStats,
    ProgressEvent,
    ProgressSnapshot,
)
from sprite_preloader.services.sprite_cache import SpriteCache
from sprite_preloader.utils.errors import SpriteLoadError

logger = logging.getLogger("sprite_preloader")

ProgressCallback = Callable[[ProgressEvent], None]
Manifest = Mapping[str, Union[ManifestEntry, Mapping[str, Any], None]]


def _coerce_entry(key: str, raw: Any) -> Optional[ManifestEntry]:
    if isinstance(raw, ManifestEntry):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        return ManifestEntry.model_validate(raw)
    except ValidationError as e:
        errors = e.error_count()

    # Only type and src decide extraction; unusable dimensions are dropped
    stripped = {k: v for k, v in raw.items() if k not in ("width", "height")}
    try:
        entry = ManifestEntry.model_validate(stripped)
    except ValidationError:
        logger.debug(f"ManifestEntrySkipped key={key} errors={errors}")
        return None
    logger.debug(f"ManifestEntryDimensionsIgnored key={key}")
    return entry


class BatchPreloader:
    """Preloads every image sprite of a manifest through a shared SpriteCache."""

    def __init__(self, cache: SpriteCache):
        """
        Initialize batch preloader.

        Args:
            cache: Shared sprite cache all loads go through
        """
        self.cache = cache
        self._preload_task: Optional[asyncio.Task] = None
        self._is_preloading = False
        self._preload_complete = False
        self._image_sprites: List[ExtractedSprite] = []
        self._stats = PreloadStats()

    @property
    def preload_stats(self) -> PreloadStats:
        """Copy of the current run's counters."""
        return self._stats.model_copy()

    def extract_paths(self, manifest: Manifest) -> List[ExtractedSprite]:
        """
        Select the image sprites of a manifest, in manifest order.

        The selection is also recorded for list_extracted().

        Args:
            manifest: Mapping of sprite key to manifest entry

        Returns:
            Extracted sprites with non-empty paths
        """
        sprites = []
        for key, raw in manifest.items():
            entry = _coerce_entry(key, raw)
            if entry is None or not entry.is_image:
                continue
            sprites.append(
                ExtractedSprite(key=key, path=entry.src, width=entry.width, height=entry.height)
            )

        self._image_sprites = sprites
        return [sprite.model_copy() for sprite in sprites]

    async def preload_all(
        self,
        manifest: Manifest,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Preload every image sprite in the manifest.

        A call during an active run joins that run; a call after completion
        returns immediately until reset() is called. Never raises for
        individual sprite failures.

        Args:
            manifest: Mapping of sprite key to manifest entry
            progress_callback: Called with a ProgressEvent after each sprite settles
        """
        if self._is_preloading and self._preload_task is not None:
            await asyncio.shield(self._preload_task)
            return

        if self._preload_complete:
            return

        self._is_preloading = True
        self._preload_complete = False

        sprites = self.extract_paths(manifest)
        stats = PreloadStats(total=len(sprites))
        self._stats = stats

        logger.info(f"PreloadStart total={stats.total}")

        if not sprites:
            logger.info("PreloadEnd total=0 reason=no_image_sprites")
            self._is_preloading = False
            self._preload_complete = True
            return

        paths = [sprite.path for sprite in sprites]
        self._preload_task = asyncio.ensure_future(self._run(paths, stats, progress_callback))
        await asyncio.shield(self._preload_task)

    async def _run(
        self,
        paths: List[str],
        stats: PreloadStats,
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        task = asyncio.current_task()
        try:
            await asyncio.gather(
                *(self._preload_one(path, stats, progress_callback) for path in paths)
            )
            # reset() during the run detaches it from this preloader
            if self._preload_task is task:
                self._preload_complete = True
            logger.info(
                f"PreloadEnd total={stats.total} loaded={stats.loaded} failed={stats.failed}"
            )
        finally:
            if self._preload_task is task:
                self._is_preloading = False

    async def _preload_one(
        self,
        path: str,
        stats: PreloadStats,
        progress_callback: Optional[ProgressCallback],
    ) -> None:
        error: Optional[Exception] = None
        try:
            await self.cache.load(path)
        except Exception as e:
            error = e
            stats.failed += 1
            logger.warning(
                f"PreloadSpriteFailed path={path} failed={stats.failed}/{stats.total} error={e}"
            )
        else:
            stats.loaded += 1
            logger.info(f"PreloadProgress path={path} loaded={stats.loaded}/{stats.total}")

        if progress_callback is not None:
            self._notify(progress_callback, self._progress_event(stats, path, error))

    @staticmethod
    def _progress_event(
        stats: PreloadStats, path: str, error: Optional[Exception] = None
    ) -> ProgressEvent:
        return ProgressEvent(
            current=stats.settled,
            total=stats.total,
            loaded=stats.loaded,
            failed=stats.failed,
            currentPath=path,
            progress=stats.settled / stats.total,
            error=str(error) if error is not None else None,
            errorCode=error.code if isinstance(error, SpriteLoadError) else None,
        )

    @staticmethod
    def _notify(progress_callback: ProgressCallback, event: ProgressEvent) -> None:
        try:
            progress_callback(event)
        except Exception as e:
            logger.error(
                f"ProgressCallbackError path={event.currentPath} error={type(e).__name__}",
                exc_info=True,
            )

    def progress(self) -> ProgressSnapshot:
        stats = self._stats
        if stats.total == 0:
            return ProgressSnapshot(progress=1.0, loaded=0, failed=0, total=0, complete=True)

        return ProgressSnapshot(
            progress=stats.settled / stats.total,
            loaded=stats.loaded,
            failed=stats.failed,
            total=stats.total,
            complete=self._preload_complete,
        )

    def is_complete(self) -> bool:
        return self._preload_complete

    def is_preloading_active(self) -> bool:
        return self._is_preloading

    def list_extracted(self) -> List[ExtractedSprite]:
        return [sprite.model_copy() for sprite in self._image_sprites]

    async def retry_failed(self) -> List[Any]:
        """
        Retry failed sprites through the cache's own retry path.

        Counters are recomputed from cache state for the extracted sprites
        once the retry settles.

        Returns:
            Handles of the sprites that loaded on retry
        """
        if self._stats.failed == 0:
            logger.info("PreloadRetrySkipped reason=no_failures")
            return []

        if self._is_preloading:
            logger.info("PreloadRetrySkipped reason=preload_active")
            return []

        stats = self._stats
        logger.info(f"PreloadRetryStart failed={stats.failed}")
        self._preload_complete = False
        stats.failed = 0

        retried = await self.cache.retry_failed()

        if self._stats is stats:
            paths = [sprite.path for sprite in self._image_sprites]
            stats.loaded = sum(1 for path in paths if self.cache.is_loaded(path))
            stats.failed = sum(1 for path in paths if self.cache.is_failed(path))
            self._preload_complete = True

        logger.info(f"PreloadRetryEnd loaded={stats.loaded} failed={stats.failed}")
        return retried

    def reset(self) -> None:
        """Return to the initial state. A running fetch is not cancelled, only detached."""
        self._is_preloading = False
        self._preload_complete = False
        self._preload_task = None
        self._image_sprites = []
        self._stats = PreloadStats()
        logger.debug("PreloadReset")
