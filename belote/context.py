"""Round context owned by the trick-play engine and the read-only view it hands out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .bidding import Contract
from .cards import Card, Suit
from .policies import RulesProfile
from .seats import Seat
from .trick import Trick


@dataclass(frozen=True)
class RoundView:
    """Snapshot given to choosers and policies; mutating it never affects the engine."""

    trump: Optional[Suit]
    trick: Trick
    trick_index: int
    current_seat: Optional[Seat]
    contract: Optional[Contract]
    profile: RulesProfile
    hand: Tuple[Card, ...] = ()


@dataclass
class RoundContext:
    profile: RulesProfile
    dealer: Seat
    contract: Contract
    hands: Dict[Seat, List[Card]]
    trick: Trick
    trick_index: int = 0
    seat_index: int = 0

    @property
    def trump(self) -> Optional[Suit]:
        assert self.profile.trump_policy is not None
        return self.profile.trump_policy.current_trump

    def view(self, seat: Optional[Seat] = None) -> RoundView:
        hand = tuple(self.hands[seat]) if seat is not None else ()
        return RoundView(
            trump=self.trump,
            trick=self.trick.copy(),
            trick_index=self.trick_index,
            current_seat=seat,
            contract=self.contract,
            profile=self.profile,
            hand=hand,
        )
