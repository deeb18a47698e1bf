"""
Pytest configuration and fixtures.
"""
import asyncio
import io
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from PIL import Image

from sprite_preloader.clients.interfaces import ISpriteFetcher, SpriteImage
from sprite_preloader.services.batch_preloader import BatchPreloader
from sprite_preloader.services.sprite_cache import SpriteCache
from sprite_preloader.utils.errors import ErrorCodes, FetchError


class FakeSpriteFetcher(ISpriteFetcher):
    """Deterministic fetcher: per-path dimensions, failures, and gates."""

    def __init__(
        self,
        dims: Optional[Dict[str, Tuple[int, int]]] = None,
        failures: Optional[Iterable[str]] = None,
    ):
        self.dims = dims or {}
        self.failures = set(failures or ())
        self.calls: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {}

    def hold(self, path: str) -> asyncio.Event:
        """Make fetches of path wait until the returned event is set."""
        gate = asyncio.Event()
        self.gates[path] = gate
        return gate

    async def fetch(self, path: str) -> SpriteImage:
        self.calls.append(path)
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)

        if path in self.failures:
            raise FetchError(ErrorCodes.NOT_FOUND, f"fake fetch failed: {path}", path=path)

        width, height = self.dims.get(path, (10, 20))
        return SpriteImage(
            path=path,
            image_bytes=b"fake-image",
            width=width,
            height=height,
            content_type="image/png",
        )


@pytest.fixture
def fetcher():
    """Fake fetcher succeeding for every path."""
    return FakeSpriteFetcher()


@pytest.fixture
def cache(fetcher):
    """Sprite cache backed by the fake fetcher."""
    return SpriteCache(fetcher)


@pytest.fixture
def preloader(cache):
    """Batch preloader bound to the shared cache fixture."""
    return BatchPreloader(cache)


@pytest.fixture
def sample_manifest():
    """Manifest with three image sprites and two entries that are not preloaded."""
    return {
        "player": {"type": "image", "src": "A", "width": 32, "height": 32},
        "enemy": {"type": "image", "src": "B", "width": 24, "height": 24},
        "pixel_bullet": {"type": "pixels", "data": [[1, 0], [0, 1]]},
        "boss": {"type": "image", "src": "C", "width": 96, "height": 64},
        "missing_src": {"type": "image", "src": ""},
    }


@pytest.fixture
def sample_image_png():
    """PNG bytes for a 10x20 RGBA image."""
    buffer = io.BytesIO()
    Image.new("RGBA", (10, 20), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()
