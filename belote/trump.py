"""Round trump state and simple trump sources that bypass bidding."""

from __future__ import annotations

import logging
from random import Random
from typing import Optional

from .cards import Suit
from .policies import TrumpPolicy

logger = logging.getLogger(__name__)


class TrumpAlreadySet(RuntimeError):
    """Raised when a round's trump is set a second time before a reset."""


class ClassicTrumpPolicy(TrumpPolicy):
    def __init__(self) -> None:
        self._trump: Optional[Suit] = None
        self._locked = False

    @property
    def current_trump(self) -> Optional[Suit]:
        return self._trump

    def set_trump(self, suit: Optional[Suit]) -> None:
        if self._locked:
            raise TrumpAlreadySet(f"Trump already set to {self._trump} for this round.")
        self._trump = suit
        self._locked = True
        logger.debug("Trump set to %s", suit)

    def reset(self) -> None:
        self._trump = None
        self._locked = False


class BalootTrumpPolicy(ClassicTrumpPolicy):
    """Trump state for Baloot, where a ``None`` trump means a Sun contract."""

    @property
    def is_sun(self) -> bool:
        return self._locked and self._trump is None


class PresetTrumpSource:
    """Always names the same trump."""

    def __init__(self, suit: Suit) -> None:
        self.suit = suit

    def choose_trump(self) -> Suit:
        return self.suit


class RandomTrumpSource:
    """Names a trump drawn from a seeded generator."""

    def __init__(self, rng: Optional[Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng if rng is not None else Random(seed)

    def choose_trump(self) -> Suit:
        return self.rng.choice(list(Suit))
