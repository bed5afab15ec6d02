"""Logging setup and per-store latency logging for the write/read legs."""

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Optional, Union

# Stores reported in the latency line.
MONGODB = "mongodb"
ELASTICSEARCH = "elasticsearch"
BOTH_STORES = "mongodb+elasticsearch"


def setup_logging(level: Union[int, str] = logging.INFO):
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _item_id(arguments: dict) -> Optional[str]:
    if "item" in arguments:
        return str(arguments["item"].id)
    if "item_id" in arguments:
        return str(arguments["item_id"])
    return None


def _outcome(result: Any) -> str:
    # Search legs return a list of hits; everything else is a single write or lookup.
    if isinstance(result, list):
        return f"hits={len(result)}"
    return "status=success"


def log_store_latency(operation: str, store: str, level: int = logging.DEBUG):
    """Time an async store call and log ``operation | store | item_id | latency_ms | outcome``.

    The item id is taken from the call's ``item`` or ``item_id`` argument, so
    the legs of one request can be matched up in the log. Failures are logged
    at ERROR and re-raised.
    """

    def decorator(func: Callable):
        logger = logging.getLogger(func.__module__)
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            item_id = _item_id(signature.bind_partial(*args, **kwargs).arguments) or "-"
            prefix = f"{operation} | store={store} | item_id={item_id}"
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                latency_ms = (time.perf_counter() - start) * 1000
                logger.error(f"{prefix} | latency_ms={latency_ms:.2f} | status=error | error={e!r}")
                raise
            latency_ms = (time.perf_counter() - start) * 1000
            logger.log(level, f"{prefix} | latency_ms={latency_ms:.2f} | {_outcome(result)}")
            return result

        return wrapper

    return decorator
