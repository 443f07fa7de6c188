# release_tool/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import concurrent.futures
from typing import Any, Coroutine, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion from synchronous code

    When called while an event loop is already running (a notebook, an
    async host application) the coroutine gets its own loop on a worker
    thread.

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(asyncio.run, coro).result()
