"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from belote.bidding import PASS, Bid
from belote.cards import Card
from belote.context import RoundView
from belote.seats import Seat

from .base import BotStrategy


class RandomBot(BotStrategy):
    """Takes with probability ``take_chance`` using the first allowed take; plays any legal card."""

    name = "Random"

    def __init__(self, seed: Optional[int] = None, take_chance: float = 0.4) -> None:
        if not 0.0 <= take_chance <= 1.0:
            raise ValueError("take_chance must lie in [0, 1].")
        self._rng = random.Random(seed)
        self.take_chance = take_chance

    def offer_bid(self, seat: Seat, current_high: Bid, allowed: Sequence[Bid], hand: Sequence[Card]) -> Bid:
        if self._rng.random() >= self.take_chance:
            return PASS
        for bid in allowed:
            if not bid.is_pass:
                return bid
        return PASS

    def play_card(self, view: RoundView, legal: Sequence[Card], seat: Seat) -> Card:
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return self._rng.choice(list(legal))
