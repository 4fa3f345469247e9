"""Reusable decorators for loader and tokenizer utilities."""

import time
import functools
import logging
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(func: Callable) -> Callable:
    """Log execution time for the wrapped callable at DEBUG level."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        """Call ``func`` and always log elapsed time."""
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        # log elapsed time even if the decorated function throws error
        finally:
            elapsed = time.perf_counter() - start
            log.debug(f"{func.__qualname__} completed in {elapsed * 1000:.2f} ms")

    return wrapper
