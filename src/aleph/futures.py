"""Bridge pending computations into Either/Result values.

The helpers here await an inner computation and report its outcome in-band:
a fault in the inner computation (including its cancellation) becomes the
error side of the returned Either/Result instead of propagating. Cancellation
of the *calling* task is never swallowed.

Inner computations may be coroutines, asyncio futures/tasks, or
``concurrent.futures.Future`` objects from an executor owned by the caller.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from aleph.either import Either, Left, Right
from aleph.failure import Failure, LeafFailure
from aleph.result import Err, Result

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AsyncFailure(LeafFailure):
    """An inner asynchronous computation raised or was cancelled."""

    description: str
    error: BaseException

    @property
    def throwable(self) -> BaseException | None:
        return self.error


def to_async_failure(exc: BaseException) -> AsyncFailure:
    """Default translator: the exception's message, keeping the exception itself."""
    return AsyncFailure(str(exc) or type(exc).__name__, exc)


def _as_future(awaitable: Awaitable[Any]) -> asyncio.Future[Any]:
    if isinstance(awaitable, concurrent.futures.Future):
        return asyncio.wrap_future(awaitable)
    return asyncio.ensure_future(awaitable)


async def _settle[T, F](
    awaitable: Awaitable[T], translate: Callable[[BaseException], F]
) -> Either[T, F]:
    """Await *awaitable*: Left of its value, or Right of the translated fault."""
    fut = _as_future(awaitable)
    try:
        value = await fut
    except asyncio.CancelledError as exc:
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            # The caller is being cancelled, not just the inner computation.
            raise
        log.debug("Inner computation cancelled; reporting as failure")
        return Right(translate(exc))
    except Exception as exc:
        log.debug("Inner computation failed: %s", exc)
        return Right(translate(exc))
    return Left(value)


async def unwrap_future[L, R](
    either: Either[Awaitable[L], R],
    exception_to_failure: Callable[[BaseException], R],
) -> Either[L, R]:
    """Await the left-held computation of *either*.

    A right input is returned as-is. Otherwise the result is ``Left`` of the
    computed value, or ``Right`` of *exception_to_failure* applied to whatever
    the computation raised.
    """
    if either.is_right():
        return Right(either.right())
    return await _settle(either.left(), exception_to_failure)


async def unwrap_failable[L](
    either: Either[Awaitable[L], Failure],
) -> Either[L, Failure]:
    """:func:`unwrap_future` with faults reported as :class:`AsyncFailure`."""
    return await unwrap_future(either, to_async_failure)


async def unwrap_result[E](
    result: Result[Awaitable[E]],
    exception_to_failure: Callable[[BaseException], Failure] = to_async_failure,
) -> Result[E]:
    """:func:`unwrap_future` for a Result holding a pending computation."""
    if result.is_err():
        return Err(result.err)
    settled = await _settle(result.value, exception_to_failure)
    return Result.from_either(settled)


async def flat_map_left_async[L, L1](
    either: Awaitable[Either[L, Failure]],
    fn: Callable[[L], Awaitable[Either[L1, Failure]]],
) -> Either[L1, Failure]:
    """Async ``flat_map_left``: *fn* returns an awaitable of the next Either.

    Faults raised while awaiting *fn*'s computation become an
    :class:`AsyncFailure` on the right.
    """
    current = await either
    if current.is_right():
        return Right(current.right())
    settled = await _settle(fn(current.left()), to_async_failure)
    return settled.flat_map_left(lambda inner: inner)


async def then_async[E, E1](
    result: Awaitable[Result[E]],
    fn: Callable[[E], Awaitable[Result[E1]]],
) -> Result[E1]:
    """Async ``then``: short-circuits on Err, otherwise awaits *fn*'s next Result."""
    current = await result
    if current.is_err():
        return Err(current.err)
    settled = await _settle(fn(current.value), to_async_failure)
    return settled.map(lambda inner: inner, Err)
