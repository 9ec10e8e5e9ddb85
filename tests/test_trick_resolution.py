import pytest

from belote.cards import Card, Rank, Suit
from belote.classic import RankOrdering
from belote.profiles import build_profile
from belote.rules_schema import RuleSet, ScoringConfig
from belote.seats import Seat
from belote.trick import Trick, TrickError


def build_trick(leader, *cards):
    trick = Trick(leader)
    for card in cards:
        trick.add_play(trick.expected_seat(), card)
    return trick


def resolve(trick, trump, variant="classic", **overrides):
    profile = build_profile(RuleSet.for_variant(variant, **overrides))
    return profile.trick_resolver.resolve(trick, trump)


def test_single_trump_wins_off_suit_trick():
    trick = build_trick(
        Seat.SOUTH,
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.SPADES),
        Card(Rank.QUEEN, Suit.HEARTS),
    )
    assert resolve(trick, Suit.SPADES) == (Seat.NORTH, 18)


def test_highest_lead_card_wins_without_trump():
    trick = build_trick(
        Seat.WEST,
        Card(Rank.TEN, Suit.CLUBS),
        Card(Rank.ACE, Suit.CLUBS),
        Card(Rank.ACE, Suit.DIAMONDS),
        Card(Rank.KING, Suit.CLUBS),
    )
    # The off-suit ace never wins.
    assert resolve(trick, Suit.HEARTS) == (Seat.NORTH, 36)


def test_higher_trump_overtakes_and_jack_beats_ace():
    trick = build_trick(
        Seat.SOUTH,
        Card(Rank.SEVEN, Suit.DIAMONDS),
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.NINE, Suit.SPADES),
    )
    winner, points = resolve(trick, Suit.SPADES)
    assert winner is Seat.NORTH
    assert points == 0 + 11 + 20 + 14


def test_trump_lead_counts_as_trump_seen():
    trick = build_trick(
        Seat.EAST,
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.ACE, Suit.CLUBS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.ACE, Suit.SPADES),
    )
    assert resolve(trick, Suit.HEARTS) == (Seat.EAST, 22)


def test_sun_ignores_trump_and_applies_multiplier():
    trick = build_trick(
        Seat.SOUTH,
        Card(Rank.KING, Suit.HEARTS),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.NINE, Suit.HEARTS),
    )
    scoring = ScoringConfig(sun_multiplier=2, hokom_multiplier=3)
    winner, points = resolve(trick, None, variant="baloot", scoring=scoring)
    assert winner is Seat.NORTH
    assert points == 2 * (4 + 2 + 11 + 0)


def test_hokom_multiplier_scales_card_points():
    trick = build_trick(
        Seat.SOUTH,
        Card(Rank.JACK, Suit.CLUBS),
        Card(Rank.SEVEN, Suit.CLUBS),
        Card(Rank.EIGHT, Suit.CLUBS),
        Card(Rank.ACE, Suit.HEARTS),
    )
    scoring = ScoringConfig(hokom_multiplier=2)
    assert resolve(trick, Suit.CLUBS, variant="baloot", scoring=scoring) == (Seat.SOUTH, 2 * (20 + 11))


def test_full_deck_is_worth_152_card_points_with_trump():
    profile = build_profile(RuleSet())
    scoring = profile.scoring_policy
    total = sum(scoring.points_for(suit, rank, Suit.HEARTS) for suit in Suit for rank in Rank)
    assert total == 152


def test_order_values_follow_configured_lists():
    ordering = RankOrdering()
    assert ordering.order_value(Rank.JACK, True) == 8
    assert ordering.order_value(Rank.SEVEN, True) == 1
    assert ordering.order_value(Rank.ACE, False) == 8
    assert ordering.order_value(Rank.JACK, False) == 4


def test_resolving_an_empty_trick_fails():
    with pytest.raises(TrickError):
        resolve(Trick(Seat.SOUTH), Suit.HEARTS)


def test_trick_enforces_seat_order():
    trick = Trick(Seat.SOUTH)
    with pytest.raises(TrickError):
        trick.add_play(Seat.WEST, Card(Rank.ACE, Suit.HEARTS))
