"""
Sprite fetch client downloading sprites over HTTP.
"""
import logging
from typing import Optional

import httpx

from sprite_preloader.clients.interfaces import ISpriteFetcher, SpriteImage
from sprite_preloader.config import settings
from sprite_preloader.utils.errors import ErrorCodes, FetchError
from sprite_preloader.utils.image_info import describe_image
from sprite_preloader.utils.logging import log_fetch_call, trace_calls

logger = logging.getLogger("sprite_preloader")


class HttpSpriteFetcher(ISpriteFetcher):
    """Loads sprites with GET requests against a base URL."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ):
        """
        Initialize HTTP sprite fetcher.

        Args:
            base_url: URL sprite paths are appended to
            timeout_seconds: Per-request timeout (default from config)
            max_bytes: Maximum accepted body size (default from config)
        """
        if not base_url:
            raise ValueError("SPRITE_BASE_URL is required for http fetch mode")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.FETCH_TIMEOUT_SECONDS
        self.max_bytes = max_bytes or settings.MAX_SPRITE_BYTES

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @trace_calls
    async def fetch(self, path: str) -> SpriteImage:
        url = self.url_for(path)
        endpoint_base = url.split("?")[0] if "?" in url else url
        return await log_fetch_call(
            service_name="HTTP",
            endpoint=endpoint_base,
            path=path,
            call_func=lambda: self._download(path, url),
        )

    async def _download(self, path: str, url: str) -> SpriteImage:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(
                ErrorCodes.FETCH_TIMEOUT,
                f"Sprite fetch timeout after {self.timeout_seconds}s: {url}",
                path=path,
                retryable=True,
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            code = ErrorCodes.NOT_FOUND if status_code == 404 else ErrorCodes.FETCH_HTTP_ERROR
            raise FetchError(
                code,
                f"Sprite server returned error {status_code}: {url}",
                path=path,
                retryable=status_code >= 500,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                ErrorCodes.FETCH_HTTP_ERROR,
                f"Sprite request failed: {url} ({type(e).__name__})",
                path=path,
                retryable=True,
            ) from e

        image_bytes = response.content
        if len(image_bytes) > self.max_bytes:
            raise FetchError(
                ErrorCodes.PAYLOAD_TOO_LARGE,
                f"Sprite body is {len(image_bytes)} bytes, limit is {self.max_bytes}",
                path=path,
            )

        try:
            width, height, detected_type = describe_image(image_bytes)
        except ValueError as e:
            raise FetchError(ErrorCodes.DECODE_FAILED, str(e), path=path) from e

        content_type = response.headers.get("content-type") or detected_type
        return SpriteImage(
            path=path,
            image_bytes=image_bytes,
            width=width,
            height=height,
            content_type=content_type,
        )
