"""
Pydantic models for preload progress, cache statistics, and error reporting.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ErrorInfo(BaseModel):
    """Error information for a failed sprite load."""

    code: str
    message: str
    path: Optional[str] = None
    retryable: bool = False
    details: Optional[dict] = None


class PreloadStats(BaseModel):
    """Aggregate counters for one preload run."""

    total: int = Field(default=0, ge=0)
    loaded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    @property
    def settled(self) -> int:
        return self.loaded + self.failed


class ProgressEvent(BaseModel):
    """Payload handed to the progress callback after each sprite settles."""

    current: int
    total: int
    loaded: int
    failed: int
    currentPath: str
    progress: float = Field(ge=0.0, le=1.0)
    error: Optional[str] = None
    errorCode: Optional[str] = None


class ProgressSnapshot(BaseModel):
    """Point-in-time view of preload progress."""

    progress: float = Field(ge=0.0, le=1.0)
    loaded: int
    failed: int
    total: int
    complete: bool


class CacheStats(BaseModel):
    """Sprite cache statistics."""

    cachedCount: int
    loadedCount: int
    failedCount: int
    inFlightCount: int
    estimatedMemoryBytes: int = Field(description="Sum of width * height * 4 over cached sprites")
