"""
Shared utilities

Timing decorator for sync and async callables.
"""

import time
import functools
import inspect
import logging
from typing import Callable, Any, Optional

logger = logging.getLogger(__name__)


def measure_time(func_name: Optional[str] = None, verbose: bool = True):
    """
    Log how long a function takes (sync or async)

    Args:
        func_name: Name shown in the log line (defaults to the function name)
        verbose: Emit the log line when True

    Usage:
        @measure_time()
        def get_all(self):
            ...

        @measure_time("ai_rank")
        async def rank(self, query, cards):
            ...
    """
    def decorator(func: Callable) -> Callable:
        display_name = func_name or func.__name__

        def _report(start_time: float, failed: bool) -> None:
            if not verbose:
                return
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            suffix = " (failed)" if failed else ""
            logger.info("[PERF] %s%s: %.2fms", display_name, suffix, elapsed_ms)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs) -> Any:
                start_time = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    _report(start_time, failed=True)
                    raise
                _report(start_time, failed=False)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                _report(start_time, failed=True)
                raise
            _report(start_time, failed=False)
            return result

        return sync_wrapper

    return decorator
