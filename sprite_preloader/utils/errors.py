"""
Error types for sprite loading, fetching, and manifest handling.
"""
from typing import Optional

from sprite_preloader.models import ErrorInfo


# Standard error codes
class ErrorCodes:
    """Standard error codes."""

    PREVIOUSLY_FAILED = "PREVIOUSLY_FAILED"
    LOAD_FAILED = "LOAD_FAILED"
    NOT_FOUND = "NOT_FOUND"
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    FETCH_HTTP_ERROR = "FETCH_HTTP_ERROR"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    DECODE_FAILED = "DECODE_FAILED"
    INVALID_MANIFEST = "INVALID_MANIFEST"


class SpriteLoadError(Exception):
    """Base exception for sprite errors."""

    def __init__(
        self,
        code: str,
        message: str,
        path: Optional[str] = None,
        retryable: bool = False,
        details: Optional[dict] = None,
    ):
        self.code = code
        self.message = message
        self.path = path
        self.retryable = retryable
        self.details = details or {}
        super().__init__(self.message)

    def to_error_info(self) -> ErrorInfo:
        """Convert to the serializable error envelope."""
        return ErrorInfo(
            code=self.code,
            message=self.message,
            path=self.path,
            retryable=self.retryable,
            details=self.details if self.details else None,
        )


class PreviouslyFailedError(SpriteLoadError):
    """Raised when a sprite that already failed is requested again without a retry."""

    def __init__(self, path: str):
        super().__init__(
            code=ErrorCodes.PREVIOUSLY_FAILED,
            message=f"Sprite previously failed to load: {path}",
            path=path,
        )


class LoadFailedError(SpriteLoadError):
    """Raised when one fetch attempt for a sprite fails."""

    def __init__(self, path: str, cause: BaseException):
        details = {"causeType": type(cause).__name__}
        if isinstance(cause, SpriteLoadError):
            details["causeCode"] = cause.code
        super().__init__(
            code=ErrorCodes.LOAD_FAILED,
            message=f"Failed to load sprite: {path} ({cause})",
            path=path,
            retryable=True,
            details=details,
        )
        self.cause = cause


class FetchError(SpriteLoadError):
    """Raised by fetch clients when a sprite resource cannot be produced."""

    def __init__(self, code: str, message: str, path: Optional[str] = None, retryable: bool = False):
        super().__init__(code=code, message=message, path=path, retryable=retryable)


class ManifestError(SpriteLoadError):
    """Raised when a sprite manifest cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(
            code=ErrorCodes.INVALID_MANIFEST,
            message=message,
            path=path,
            details=details,
        )
