"""Saudi Baloot policies.

Hokom (trump) contracts play exactly like classic Belote. A Sun contract has no trump
at all: the must-trump branch of the legal move rule is skipped and only the lead suit
can win a trick. Card points are scaled by ``sun_multiplier`` or ``hokom_multiplier``;
the last-trick bonus is not.
"""

from __future__ import annotations

from typing import Optional

from .cards import Rank, Suit
from .classic import ClassicLegalMovePolicy, ClassicScoringPolicy, ClassicTrickResolver
from .policies import OrderingPolicy
from .rules_schema import LegalMoveConfig, ScoringConfig


class BalootScoringPolicy(ClassicScoringPolicy):
    def __init__(self, config: Optional[ScoringConfig] = None) -> None:
        config = config or ScoringConfig()
        super().__init__(config)
        self.hokom_multiplier = config.hokom_multiplier
        self.sun_multiplier = config.sun_multiplier

    def points_for(self, suit: Suit, rank: Rank, trump: Optional[Suit]) -> int:
        multiplier = self.sun_multiplier if trump is None else self.hokom_multiplier
        return multiplier * super().points_for(suit, rank, trump)


class BalootLegalMovePolicy(ClassicLegalMovePolicy):
    def __init__(self, ordering: OrderingPolicy, config: Optional[LegalMoveConfig] = None) -> None:
        super().__init__(ordering, config or LegalMoveConfig(allow_discard_if_partner_winning=False))


class BalootTrickResolver(ClassicTrickResolver):
    """Sun tricks carry no trump, so the shared resolver only compares lead-suit cards."""
