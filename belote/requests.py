"""Single-shot answer slots used by the engines to ask a seat for a bid or a card."""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, Optional, Sequence, Tuple, TypeVar

from .seats import Seat

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestCancelled(RuntimeError):
    """Raised to the waiting engine when its outstanding request is cancelled."""


class AnswerTimeout(RuntimeError):
    """Raised when a request is not answered within the configured timeout."""


class PendingRequest(Generic[T]):
    """A question put to one seat that can be answered at most once.

    The slot is bound to the running event loop, so it must be created from inside a
    coroutine. ``resolve`` and ``cancel`` return False once the slot is settled and the
    late call is ignored.
    """

    def __init__(self, seat: Seat, kind: str, options: Sequence[T] = ()) -> None:
        self.seat = seat
        self.kind = kind
        self.options: Tuple[T, ...] = tuple(options)
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    def __repr__(self) -> str:
        state = "done" if self.done else "open"
        return f"PendingRequest({self.kind} for {self.seat}, {state})"

    @property
    def done(self) -> bool:
        return self._future.done()

    @property
    def cancelled(self) -> bool:
        if self._future.cancelled():
            return True
        return self.done and isinstance(self._future.exception(), RequestCancelled)

    def resolve(self, answer: T) -> bool:
        if self._future.done():
            logger.debug("Discarding late %s answer from %s: %r", self.kind, self.seat, answer)
            return False
        self._future.set_result(answer)
        return True

    def cancel(self) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(RequestCancelled(f"{self.kind} request for {self.seat} cancelled"))
        return True

    async def wait(self, timeout: Optional[float] = None) -> T:
        """Wait for the answer; ``timeout`` of ``None`` or 0 waits forever."""
        if not timeout:
            return await self._future
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except asyncio.TimeoutError:
            if self.cancel():
                self._future.exception()  # mark retrieved
                raise AnswerTimeout(f"{self.seat} did not answer the {self.kind} request in {timeout}s") from None
            # Answered in the same tick the timer fired.
            return self._future.result()


def answered(seat: Seat, kind: str, answer: T) -> PendingRequest[T]:
    """Return a request that is already resolved, for sources that answer synchronously."""
    request: PendingRequest[T] = PendingRequest(seat, kind)
    request.resolve(answer)
    return request
