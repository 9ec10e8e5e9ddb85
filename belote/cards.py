"""Card-related data structures and helpers for Belote and Baloot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Optional


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


RANK_LABELS: list[str] = [rank.label for rank in Rank]

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


@dataclass(frozen=True)
class Card:
    """Immutable card identity; rendering belongs to the caller."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank.label}{SUIT_SYMBOLS[self.suit]}"


def parse_suit(value: str) -> Optional[Suit]:
    """Parse a suit name; "none" and "sun" map to ``None`` (no trump)."""
    normalized = value.strip().lower()
    if normalized in ("none", "sun", ""):
        return None
    try:
        return Suit(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown suit: {value!r}") from exc


def parse_rank(value: str) -> Rank:
    normalized = value.strip().upper()
    for rank in Rank:
        if rank.label == normalized or rank.name == normalized:
            return rank
    raise ValueError(f"Unknown rank: {value!r}")


def cards_of_suit(cards: Iterable[Card], suit: Optional[Suit]) -> List[Card]:
    """Return the cards of ``suit`` in their original order (none for ``None``)."""
    if suit is None:
        return []
    return [card for card in cards if card.suit is suit]


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": card.rank.label, "suit": card.suit.value}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    return Card(parse_rank(payload["rank"]), Suit(payload["suit"].lower()))


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
