# asset_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
from typing import Any, Callable, Coroutine, List, Optional, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    return asyncio.run(coro)


async def gather_with_progress(tasks: List[Coroutine],
                               callback: Optional[Callable[[int, int], None]] = None,
                               return_exceptions: bool = False) -> List[Any]:
    """
    Gather tasks with progress callback

    Every task is scheduled up front. With ``return_exceptions`` set, a
    failing task never interrupts its siblings and its exception is
    returned in its result slot.

    Args:
        tasks: List of coroutines
        callback: Progress callback(completed, total)
        return_exceptions: Whether to return exceptions instead of raising

    Returns:
        List of results, in task order
    """
    total = len(tasks)
    completed = 0

    async def wrapped_task(task):
        nonlocal completed
        try:
            return await task
        finally:
            completed += 1
            if callback:
                callback(completed, total)

    wrapped_tasks = [asyncio.ensure_future(wrapped_task(task)) for task in tasks]
    return await asyncio.gather(*wrapped_tasks, return_exceptions=return_exceptions)
