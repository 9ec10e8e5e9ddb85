"""Bid source and card chooser contracts, per-seat registries and the external seat."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Generic, Iterator, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .cards import Card
from .requests import PendingRequest
from .seats import Seat

if TYPE_CHECKING:
    from .bidding import Bid
    from .context import RoundView

logger = logging.getLogger(__name__)


class BidSource(ABC):
    """Answers bid requests for one or more seats."""

    is_human: bool = False

    @abstractmethod
    def begin_bid(self, seat: Seat, current_high: "Bid", allowed: Sequence["Bid"]) -> PendingRequest["Bid"]:
        ...

    def cancel(self) -> None:
        """Abandon any outstanding request."""
        return None

    def on_round_start(self, seat: Seat, hand: Sequence[Card]) -> None:
        """Optional hook invoked with the freshly dealt hand."""
        return None


class Chooser(ABC):
    """Answers card requests for one or more seats."""

    is_human: bool = False

    @abstractmethod
    def begin_choose(self, view: "RoundView", legal: Sequence[Card], seat: Seat) -> PendingRequest[Card]:
        ...

    def cancel(self) -> None:
        return None

    def on_round_start(self, seat: Seat, hand: Sequence[Card]) -> None:
        return None


S = TypeVar("S", BidSource, Chooser)


class _SeatRegistry(Generic[S]):
    def __init__(self, entries: Optional[Mapping[Seat, S]] = None) -> None:
        self._entries: Dict[Seat, S] = dict(entries or {})

    def register(self, seat: Seat, source: S) -> None:
        self._entries[seat] = source

    def get(self, seat: Seat) -> Optional[S]:
        return self._entries.get(seat)

    def items(self) -> Iterator[Tuple[Seat, S]]:
        return iter(list(self._entries.items()))

    def __contains__(self, seat: object) -> bool:
        return seat in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def cancel_all(self) -> None:
        """Cancel every registered source once, even when it serves several seats."""
        seen: List[int] = []
        for _, source in self.items():
            if id(source) in seen:
                continue
            seen.append(id(source))
            source.cancel()


class BidderRegistry(_SeatRegistry[BidSource]):
    pass


class ChooserRegistry(_SeatRegistry[Chooser]):
    pass


class ExternalSeat(BidSource, Chooser):
    """A seat whose answers arrive from outside the engine loop (UI, network).

    The engine opens a request through ``begin_bid`` or ``begin_choose``; the outside
    world learns about it through ``wait_for_turn`` or ``pending`` and answers with
    ``submit_bid`` or ``submit_card``.
    """

    is_human = True

    def __init__(self, seat: Seat) -> None:
        self.seat = seat
        self.hand: List[Card] = []
        self.pending: Optional[PendingRequest] = None
        self.current_high: Optional["Bid"] = None
        self.view: Optional["RoundView"] = None
        self._turn: Optional[asyncio.Event] = None

    def _turn_event(self) -> asyncio.Event:
        if self._turn is None:
            self._turn = asyncio.Event()
        return self._turn

    def _open(self, request: PendingRequest) -> PendingRequest:
        self.pending = request
        self._turn_event().set()
        logger.debug("Seat %s awaiting %s", self.seat, request.kind)
        return request

    def on_round_start(self, seat: Seat, hand: Sequence[Card]) -> None:
        if seat is self.seat:
            self.hand = list(hand)

    def begin_bid(self, seat: Seat, current_high: "Bid", allowed: Sequence["Bid"]) -> PendingRequest["Bid"]:
        self.current_high = current_high
        return self._open(PendingRequest(seat, "bid", allowed))

    def begin_choose(self, view: "RoundView", legal: Sequence[Card], seat: Seat) -> PendingRequest[Card]:
        self.view = view
        self.hand = list(view.hand)
        return self._open(PendingRequest(seat, "card", legal))

    def awaiting(self, kind: str) -> bool:
        return self.pending is not None and not self.pending.done and self.pending.kind == kind

    def _submit(self, kind: str, answer) -> bool:
        request = self.pending
        if request is None or request.done or request.kind != kind:
            logger.debug("Seat %s has no open %s request; ignoring %r", self.seat, kind, answer)
            return False
        accepted = request.resolve(answer)
        if accepted:
            self.pending = None
            self._turn_event().clear()
        return accepted

    def submit_bid(self, bid: "Bid") -> bool:
        return self._submit("bid", bid)

    def submit_card(self, card: Card) -> bool:
        accepted = self._submit("card", card)
        if accepted and card in self.hand:
            self.hand.remove(card)
        return accepted

    async def wait_for_turn(self) -> PendingRequest:
        """Suspend until a request is open for this seat and return it."""
        while not self.awaiting("bid") and not self.awaiting("card"):
            event = self._turn_event()
            event.clear()
            await event.wait()
        assert self.pending is not None
        return self.pending

    def cancel(self) -> None:
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None
