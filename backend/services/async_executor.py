"""
Thread pool for the blocking calls the storefront makes (smtplib).

Keeps a slow or hanging SMTP relay off the event loop that serves checkout
and ITN requests.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

SMTP_WORKERS = 2

_pool: ThreadPoolExecutor | None = None

T = TypeVar("T")


def get_executor() -> ThreadPoolExecutor:
    global _pool
    if _pool is None:
        _pool = ThreadPoolExecutor(max_workers=SMTP_WORKERS, thread_name_prefix="smtp_")
        logger.info(f"SMTP worker pool started ({SMTP_WORKERS} threads)")
    return _pool


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Await ``func(*args, **kwargs)`` running on the worker pool."""
    call = functools.partial(func, *args, **kwargs)
    return await asyncio.get_running_loop().run_in_executor(get_executor(), call)


def shutdown_executor() -> None:
    """Wait for queued mail to finish, then drop the pool. Called on app shutdown."""
    global _pool
    if _pool is not None:
        _pool.shutdown(wait=True)
        _pool = None
        logger.info("SMTP worker pool stopped")
