"""Scoped timing blocks.

Blocks nest: a ``measure("Fills")`` opened inside ``measure("page.hot")``
logs under the label path ``page.hot/Fills``.
"""
from contextlib import contextmanager
from contextvars import ContextVar
import functools
import time

import structlog

logger = structlog.get_logger(__name__)

_path: ContextVar[tuple[str, ...]] = ContextVar("stopwatch_path", default=())

@contextmanager
def measure(label: str, **fields):
    path = _path.get() + (label,)
    token = _path.set(path)
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        _path.reset(token)
        logger.debug("stopwatch", label="/".join(path), elapsed_ms=round(elapsed_ms, 2), **fields)

def timed(label: str):
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            with measure(label):
                return fn(*args, **kwargs)
        return wrapper
    return decorator
