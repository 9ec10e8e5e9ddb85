"""Baseline greedy bot: trump-strength bidding and cheapest-winning-card play."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from belote.bidding import PASS, Bid, BidKind
from belote.cards import Card, Rank, Suit, cards_of_suit
from belote.classic import ClassicScoringPolicy
from belote.context import RoundView
from belote.mechanics import beats, current_winner
from belote.policies import OrderingPolicy, ScoringPolicy
from belote.seats import Seat, are_partners

from .base import BotStrategy

PROTECTED_RANKS = (Rank.TEN, Rank.ACE)
PROTECT_PENALTY = 50


class GreedyBot(BotStrategy):
    """Bids the suit where its hand is strongest and plays to win tricks cheaply.

    Play follows a simple table routine: lead low from the longest side suit, dump
    the cheapest card when partner already holds the trick, otherwise win with the
    weakest card that still beats the table.
    """

    name = "Greedy"

    def __init__(self, take_threshold: int = 45, sun_threshold: int = 60, protect_high_cards: bool = True) -> None:
        self.take_threshold = take_threshold
        self.sun_threshold = sun_threshold
        self.protect_high_cards = protect_high_cards
        self.scoring = ClassicScoringPolicy()

    # Bidding -----------------------------------------------------------------

    def suit_strength(self, hand: Sequence[Card], suit: Suit) -> int:
        trumps = cards_of_suit(hand, suit)
        return sum(self.scoring.points_for(card.suit, card.rank, suit) for card in trumps) + 5 * len(trumps)

    def sun_strength(self, hand: Sequence[Card]) -> int:
        return sum(11 if card.rank is Rank.ACE else 10 if card.rank is Rank.TEN else 0 for card in hand)

    def offer_bid(self, seat: Seat, current_high: Bid, allowed: Sequence[Bid], hand: Sequence[Card]) -> Bid:
        if not hand:
            return PASS
        takes = {bid.suit: bid for bid in allowed if bid.kind is BidKind.TAKE}
        suns = [bid for bid in allowed if bid.kind is BidKind.SUN]

        if suns and self.sun_strength(hand) >= self.sun_threshold:
            return suns[0]
        best_suit = max(Suit, key=lambda suit: self.suit_strength(hand, suit))
        if best_suit in takes and self.suit_strength(hand, best_suit) >= self.take_threshold:
            return takes[best_suit]
        return PASS

    # Play --------------------------------------------------------------------

    def play_card(self, view: RoundView, legal: Sequence[Card], seat: Seat) -> Card:
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        ordering = view.profile.ordering_policy
        scoring = view.profile.scoring_policy
        assert ordering is not None and scoring is not None
        cards = list(legal)

        if view.trick.is_empty():
            return self._lead(cards, view.trump, ordering)

        winner_seat, _ = current_winner(view.trick, view.trump, ordering)
        if are_partners(seat, winner_seat):
            return self._discard(cards, view.trump, scoring)
        winning = self._cheapest_winner(cards, view, ordering)
        if winning is not None:
            return winning
        return self._discard(cards, view.trump, scoring)

    def _lead(self, cards: List[Card], trump: Optional[Suit], ordering: OrderingPolicy) -> Card:
        by_suit: Dict[Suit, List[Card]] = defaultdict(list)
        for card in cards:
            if card.suit is not trump:
                by_suit[card.suit].append(card)
        if by_suit:
            longest = max(by_suit.values(), key=len)
            return min(longest, key=lambda card: ordering.order_value(card.rank, False))
        return min(cards, key=lambda card: ordering.order_value(card.rank, True))

    def _cheapest_winner(self, cards: List[Card], view: RoundView, ordering: OrderingPolicy) -> Optional[Card]:
        _, winning_card = current_winner(view.trick, view.trump, ordering)
        lead = view.trick.lead_suit
        assert lead is not None
        winners = [card for card in cards if beats(card, winning_card, lead, view.trump, ordering)]
        if not winners:
            return None
        return min(winners, key=lambda card: ordering.order_value(card.rank, card.suit is view.trump))

    def _discard(self, cards: List[Card], trump: Optional[Suit], scoring: ScoringPolicy) -> Card:
        def cost(card: Card) -> int:
            points = scoring.points_for(card.suit, card.rank, trump)
            if self.protect_high_cards and card.rank in PROTECTED_RANKS:
                points += PROTECT_PENALTY
            if card.suit is not trump:
                points -= 1
            return points

        return min(cards, key=cost)
