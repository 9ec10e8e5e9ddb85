"""Deck creation and dealing utilities for the 32-card game."""

from __future__ import annotations

from random import Random
from typing import Dict, List, Optional, Sequence

from .cards import Card, Rank, Suit
from .seats import Seat, order_after

DECK_SIZE = 32
HAND_SIZE = 8
DEFAULT_PACKETS = (3, 2, 3)


class DealError(ValueError):
    """Raised when a deck or packet pattern cannot produce four full hands."""


def build_deck() -> List[Card]:
    """Return the ordered 32-card deck."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def deal_hands(
    dealer: Seat,
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
    packets: Sequence[int] = DEFAULT_PACKETS,
    clockwise: bool = True,
) -> Dict[Seat, List[Card]]:
    """Deal eight cards to each seat in packets, starting at the dealer's left."""
    if deck is not None:
        cards = list(deck)
    else:
        cards = build_deck()
        if rng is None:
            rng = Random()
        rng.shuffle(cards)
    if len(cards) != DECK_SIZE or len(set(cards)) != DECK_SIZE:
        raise DealError("Deck must contain the 32 distinct cards.")
    if sum(packets) != HAND_SIZE or any(size <= 0 for size in packets):
        raise DealError(f"Packet pattern {tuple(packets)} must deal {HAND_SIZE} cards per seat.")

    hands: Dict[Seat, List[Card]] = {seat: [] for seat in Seat}
    position = 0
    for size in packets:
        for seat in order_after(dealer, clockwise=clockwise):
            hands[seat].extend(cards[position : position + size])
            position += size
    return hands
