"""Classic Belote policies: rank ordering, card points, legal moves and trick resolution."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .cards import Card, Rank, Suit, cards_of_suit, parse_rank
from .mechanics import current_winner, overtrumps, strongest_trump, trick_points
from .policies import LegalMovePolicy, OrderingPolicy, ScoringPolicy, TrickResolver
from .rules_schema import LegalMoveConfig, OrderingConfig, ScoringConfig
from .seats import Seat
from .trick import Trick, TrickError

CLASSIC_TRUMP_ORDER = ("J", "9", "A", "10", "K", "Q", "8", "7")
CLASSIC_OFF_ORDER = ("A", "10", "K", "Q", "J", "9", "8", "7")


def _order_table(labels: Sequence[str]) -> Dict[Rank, int]:
    size = len(labels)
    return {parse_rank(label): size - index for index, label in enumerate(labels)}


def _points_table(points: Mapping[str, int]) -> Dict[Rank, int]:
    return {parse_rank(label): value for label, value in points.items()}


class RankOrdering(OrderingPolicy):
    """Strength is ``8 - index`` in the configured strongest-first rank list."""

    def __init__(
        self,
        trump_order: Sequence[str] = CLASSIC_TRUMP_ORDER,
        off_order: Sequence[str] = CLASSIC_OFF_ORDER,
    ) -> None:
        self._trump = _order_table(trump_order)
        self._off = _order_table(off_order)

    @classmethod
    def from_config(cls, config: OrderingConfig) -> "RankOrdering":
        return cls(config.trump_order, config.off_order)

    def order_value(self, rank: Rank, is_trump: bool) -> int:
        table = self._trump if is_trump else self._off
        return table.get(rank, 0)


class ClassicScoringPolicy(ScoringPolicy):
    def __init__(self, config: Optional[ScoringConfig] = None) -> None:
        config = config or ScoringConfig()
        self._trump_points = _points_table(config.trump_points)
        self._off_points = _points_table(config.off_points)
        self._last_trick_bonus = config.last_trick_bonus

    @property
    def last_trick_bonus(self) -> int:
        return self._last_trick_bonus

    def points_for(self, suit: Suit, rank: Rank, trump: Optional[Suit]) -> int:
        table = self._trump_points if trump is not None and suit is trump else self._off_points
        return table.get(rank, 0)


class ClassicLegalMovePolicy(LegalMovePolicy):
    def __init__(self, ordering: OrderingPolicy, config: Optional[LegalMoveConfig] = None) -> None:
        self.ordering = ordering
        self.config = config or LegalMoveConfig()

    def legal_moves(self, view, hand: Sequence[Card], seat: Seat) -> List[Card]:
        cards = list(hand)
        trick = view.trick
        if trick.is_empty():
            return cards

        lead = trick.lead_suit
        if self.config.must_follow_suit:
            following = cards_of_suit(cards, lead)
            if following:
                return following

        trump = view.trump
        trumps = cards_of_suit(cards, trump)
        if self.config.must_trump_if_void and trumps:
            highest = strongest_trump(trick, trump, self.ordering)
            if highest is None:
                return trumps
            if self.config.must_overtrump:
                higher = overtrumps(trumps, highest, self.ordering)
                if higher:
                    return higher
            # TODO: let allow_discard_if_partner_winning open the whole hand once the
            # partner-winning discard rule is settled; it currently leaves the trumps.
            return trumps

        return cards


class ClassicTrickResolver(TrickResolver):
    def __init__(self, ordering: OrderingPolicy, scoring: ScoringPolicy) -> None:
        self.ordering = ordering
        self.scoring = scoring

    def resolve(self, trick: Trick, trump: Optional[Suit]) -> Tuple[Seat, int]:
        if trick.is_empty():
            raise TrickError("Cannot resolve an empty trick.")
        winner, _ = current_winner(trick, trump, self.ordering)
        return winner, trick_points(trick.cards(), trump, self.scoring)
