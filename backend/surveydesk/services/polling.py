"""Cancellable fixed-interval polling.

Stops on the first of: the awaited condition holds, the caller asks to stop,
or the attempt budget is spent.
"""
import asyncio
import enum
import inspect
from typing import Awaitable, Callable, Union

Check = Callable[[], Union[bool, Awaitable[bool]]]

class PollOutcome(str, enum.Enum):
    satisfied = "satisfied"
    stopped = "stopped"
    exhausted = "exhausted"

async def _call(fn: Check) -> bool:
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return bool(result)

async def poll_until(
    condition: Check,
    interval: float,
    max_attempts: int | None = None,
    should_stop: Check | None = None,
) -> PollOutcome:
    attempts = 0
    while True:
        if should_stop is not None and await _call(should_stop):
            return PollOutcome.stopped
        if await _call(condition):
            return PollOutcome.satisfied
        attempts += 1
        if max_attempts is not None and attempts >= max_attempts:
            return PollOutcome.exhausted
        await asyncio.sleep(interval)
