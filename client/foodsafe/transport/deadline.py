"""
Race a request against a timer. Whichever finishes first decides the outcome;
the other one is cancelled and awaited so neither the timer nor the request
outlives the call.
"""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_deadline(issue: Callable[[], Awaitable[T]], deadline: float) -> T:
    """
    Start issue() and return its result if it finishes within `deadline` seconds.
    Raises TimeoutError (after cancelling the request) if the timer wins.
    Exceptions from the request propagate unchanged, and so does cancellation
    of the caller.
    """
    request = asyncio.ensure_future(issue())
    timer = asyncio.ensure_future(asyncio.sleep(deadline))
    try:
        done, _ = await asyncio.wait({request, timer}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        # Runs on success, failure and caller cancellation alike
        await _dispose(timer, request)

    if request in done:
        return request.result()
    logger.info("DEADLINE expired after %.1fs; request cancelled", deadline)
    raise TimeoutError(f"request exceeded deadline of {deadline:g}s")


async def _dispose(*tasks: "asyncio.Future") -> None:
    """
    Cancel every unfinished task, then wait for them to finish.
    asyncio.wait never raises a loser's own CancelledError, so a
    CancelledError out of here is always the caller's and propagates.
    """
    pending = {t for t in tasks if not t.done()}
    if not pending:
        return
    for t in pending:
        t.cancel()
    await asyncio.wait(pending)
    for t in pending:
        if not t.cancelled() and t.exception() is not None:
            # Loser's outcome is irrelevant once the race is decided
            e = t.exception()
            logger.debug("DEADLINE loser raised during cancel: %s: %s", type(e).__name__, e)
