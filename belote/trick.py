"""Trick representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .cards import Card, Suit
from .seats import Seat, next_seat

TRICK_SIZE = 4


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


@dataclass
class Trick:
    leader: Seat
    plays: List[Tuple[Seat, Card]] = field(default_factory=list)
    clockwise: bool = True

    def is_empty(self) -> bool:
        return not self.plays

    def is_full(self) -> bool:
        return len(self.plays) == TRICK_SIZE

    @property
    def lead_suit(self) -> Optional[Suit]:
        return self.plays[0][1].suit if self.plays else None

    def expected_seat(self) -> Seat:
        if self.is_full():
            raise TrickError("Trick already complete.")
        if not self.plays:
            return self.leader
        return next_seat(self.plays[-1][0], clockwise=self.clockwise)

    def add_play(self, seat: Seat, card: Card) -> None:
        expected = self.expected_seat()
        if seat is not expected:
            raise TrickError(f"Seat {seat} played out of turn; expected {expected}.")
        if any(played == card for _, played in self.plays):
            raise TrickError(f"Card {card} already in this trick.")
        self.plays.append((seat, card))

    def cards(self) -> List[Card]:
        return [card for _, card in self.plays]

    def copy(self) -> "Trick":
        return Trick(leader=self.leader, plays=list(self.plays), clockwise=self.clockwise)


@dataclass(frozen=True)
class TrickOutcome:
    index: int
    leader: Seat
    plays: Tuple[Tuple[Seat, Card], ...]
    winner: Seat
    points: int
