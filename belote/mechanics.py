"""Rule-agnostic legal move and trick winner helpers shared by the variants."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .cards import Card, Suit, cards_of_suit
from .policies import OrderingPolicy, ScoringPolicy
from .seats import Seat
from .trick import Trick, TrickError


def strongest_trump(trick: Trick, trump: Optional[Suit], ordering: OrderingPolicy) -> Optional[Card]:
    """Return the highest trump already played into ``trick``, if any."""
    trumps = cards_of_suit(trick.cards(), trump)
    if not trumps:
        return None
    return max(trumps, key=lambda card: ordering.order_value(card.rank, True))


def beats(challenger: Card, winner: Card, lead: Suit, trump: Optional[Suit], ordering: OrderingPolicy) -> bool:
    """Return True when ``challenger`` takes the trick away from ``winner``."""
    if trump is not None:
        if challenger.suit is trump and winner.suit is not trump:
            return True
        if challenger.suit is trump and winner.suit is trump:
            return ordering.order_value(challenger.rank, True) > ordering.order_value(winner.rank, True)
        if winner.suit is trump:
            return False
    if challenger.suit is not lead or winner.suit is not lead:
        return False
    return ordering.order_value(challenger.rank, False) > ordering.order_value(winner.rank, False)


def current_winner(trick: Trick, trump: Optional[Suit], ordering: OrderingPolicy) -> Tuple[Seat, Card]:
    if trick.is_empty():
        raise TrickError("Cannot determine winner on empty trick.")
    lead = trick.lead_suit
    assert lead is not None
    winning_seat, winning_card = trick.plays[0]
    for seat, card in trick.plays[1:]:
        if beats(card, winning_card, lead, trump, ordering):
            winning_seat, winning_card = seat, card
    return winning_seat, winning_card


def trick_points(cards: Iterable[Card], trump: Optional[Suit], scoring: ScoringPolicy) -> int:
    return sum(scoring.points_for(card.suit, card.rank, trump) for card in cards)


def overtrumps(trumps: Iterable[Card], highest: Card, ordering: OrderingPolicy) -> List[Card]:
    floor = ordering.order_value(highest.rank, True)
    return [card for card in trumps if ordering.order_value(card.rank, True) > floor]
