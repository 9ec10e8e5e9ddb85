"""Common bot strategy interfaces and the seat adapter that plugs them into the engines."""

from __future__ import annotations

from typing import Dict, List, Sequence

from belote.bidding import PASS, Bid
from belote.cards import Card
from belote.context import RoundView
from belote.requests import PendingRequest, answered
from belote.seats import Seat
from belote.sources import BidSource, Chooser


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def on_round_start(self, seat: Seat, hand: Sequence[Card]) -> None:
        """Optional hook invoked with the freshly dealt hand."""
        return None

    def offer_bid(self, seat: Seat, current_high: Bid, allowed: Sequence[Bid], hand: Sequence[Card]) -> Bid:
        """Return one of ``allowed``; anything else is treated as a pass."""
        return PASS

    def play_card(self, view: RoundView, legal: Sequence[Card], seat: Seat) -> Card:
        """Return one of ``legal``."""
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return legal[0]


class BotSeat(BidSource, Chooser):
    """Serves bids and cards from a strategy, answering every request immediately."""

    is_human = False

    def __init__(self, strategy: BotStrategy) -> None:
        self.strategy = strategy
        self.hands: Dict[Seat, List[Card]] = {}

    @property
    def name(self) -> str:
        return self.strategy.name

    def on_round_start(self, seat: Seat, hand: Sequence[Card]) -> None:
        self.hands[seat] = list(hand)
        self.strategy.on_round_start(seat, hand)

    def begin_bid(self, seat: Seat, current_high: Bid, allowed: Sequence[Bid]) -> PendingRequest[Bid]:
        bid = self.strategy.offer_bid(seat, current_high, allowed, tuple(self.hands.get(seat, ())))
        return answered(seat, "bid", bid)

    def begin_choose(self, view: RoundView, legal: Sequence[Card], seat: Seat) -> PendingRequest[Card]:
        self.hands[seat] = list(view.hand)
        return answered(seat, "card", self.strategy.play_card(view, legal, seat))
