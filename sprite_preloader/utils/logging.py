"""
Logging utilities for handler setup, fetch call tracking, and method tracing.
"""
import functools
import inspect
import logging
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sprite_preloader.config import settings

logger = logging.getLogger("sprite_preloader")

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_REDACTED_KWARGS = ("api_key", "token", "secret", "password")


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger with a stdout handler and an optional file handler.

    Existing root handlers are removed to avoid duplicate output.

    Args:
        level: Logging level name (defaults to LOG_LEVEL)
        log_file: Optional log file path (defaults to LOG_FILE)
    """
    level_name = level or settings.LOG_LEVEL
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    log_file = log_file if log_file is not None else settings.LOG_FILE

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)


def _summarize_args(args: tuple, kwargs: dict) -> List[str]:
    """Summarize call arguments, excluding secrets and raw image bytes."""
    args_summary = []
    for i, arg in enumerate(args):
        if isinstance(arg, (str, int, float, bool, type(None))):
            args_summary.append(f"arg{i}={arg}")
        elif isinstance(arg, bytes):
            args_summary.append(f"arg{i}=<bytes:{len(arg)}>")
        else:
            args_summary.append(f"arg{i}=<{type(arg).__name__}>")

    for key, value in kwargs.items():
        if key.lower() in _REDACTED_KWARGS:
            args_summary.append(f"{key}=<REDACTED>")
        elif isinstance(value, bytes):
            args_summary.append(f"{key}=<bytes:{len(value)}>")
        elif isinstance(value, (str, int, float, bool, type(None))):
            args_summary.append(f"{key}={value}")
        else:
            args_summary.append(f"{key}=<{type(value).__name__}>")
    return args_summary


def trace_calls(func: F) -> F:
    """
    Decorator to log method entry/exit when TRACE_CALLS is enabled.

    Logs function name, args summary (excluding secrets/images), and duration.
    Only active when TRACE_CALLS=true at decoration time.
    """
    if not settings.TRACE_CALLS:
        return func

    func_name = f"{func.__module__}.{func.__qualname__}"

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger.debug(f"[TRACE] ENTER {func_name}({', '.join(_summarize_args(args, kwargs))})")
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.debug(f"[TRACE] EXIT {func_name} durationMs={duration_ms}")
                return result
            except Exception as e:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.debug(
                    f"[TRACE] EXIT {func_name} durationMs={duration_ms} error={type(e).__name__}"
                )
                raise

        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        logger.debug(f"[TRACE] ENTER {func_name}({', '.join(_summarize_args(args, kwargs))})")
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug(f"[TRACE] EXIT {func_name} durationMs={duration_ms}")
            return result
        except Exception as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug(
                f"[TRACE] EXIT {func_name} durationMs={duration_ms} error={type(e).__name__}"
            )
            raise

    return sync_wrapper  # type: ignore


async def log_fetch_call(
    service_name: str,
    endpoint: str,
    path: str,
    call_func: Callable[[], Awaitable[T]],
) -> T:
    """
    Log a sprite fetch (outbound/inbound) and execute it.

    Args:
        service_name: Name of the fetch backend (e.g., "FILE", "HTTP")
        endpoint: Resolved location of the resource (sanitized, no query string)
        path: Sprite path as requested by the cache
        call_func: Async function performing the actual fetch

    Returns:
        Whatever call_func returns
    """
    outbound_timestamp = time.time()
    logger.info(
        f"FetchCall service={service_name} path={path} endpoint={endpoint} "
        f"outbound_timestamp={outbound_timestamp:.3f}"
    )

    call_start = time.perf_counter()
    try:
        result = await call_func()
    except Exception as e:
        call_duration_ms = int((time.perf_counter() - call_start) * 1000)
        status = getattr(e, "code", None) or type(e).__name__
        logger.error(
            f"FetchResponse service={service_name} path={path} status={status} "
            f"durationMs={call_duration_ms} error={type(e).__name__}",
            exc_info=True,
        )
        raise

    call_duration_ms = int((time.perf_counter() - call_start) * 1000)
    response_size = getattr(result, "size_bytes", 0)
    logger.info(
        f"FetchResponse service={service_name} path={path} status=OK "
        f"response_timestamp={time.time():.3f} durationMs={call_duration_ms} "
        f"responseSizeBytes={response_size}"
    )
    return result
