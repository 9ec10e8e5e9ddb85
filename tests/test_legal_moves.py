from belote.cards import Card, Rank, Suit
from belote.context import RoundView
from belote.profiles import build_profile
from belote.rules_schema import LegalMoveConfig, RuleSet
from belote.seats import Seat
from belote.trick import Trick


def make_view(trick, trump, variant="classic", **overrides):
    profile = build_profile(RuleSet.for_variant(variant, **overrides))
    return RoundView(
        trump=trump,
        trick=trick,
        trick_index=0,
        current_seat=trick.expected_seat(),
        contract=None,
        profile=profile,
    )


def legal(view, hand):
    return view.profile.legal_move_policy.legal_moves(view, hand, view.current_seat)


def test_leader_may_play_any_card():
    hand = [Card(Rank.SEVEN, Suit.HEARTS), Card(Rank.JACK, Suit.SPADES)]
    view = make_view(Trick(Seat.SOUTH), Suit.SPADES)
    assert legal(view, hand) == hand


def test_must_follow_lead_suit():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.HEARTS), Card(Rank.ACE, Suit.HEARTS), Card(Rank.JACK, Suit.SPADES)]

    moves = legal(make_view(trick, Suit.SPADES), hand)
    assert moves == [Card(Rank.SEVEN, Suit.HEARTS), Card(Rank.ACE, Suit.HEARTS)]


def test_must_trump_when_void_and_no_trump_played():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS), Card(Rank.QUEEN, Suit.SPADES)]

    moves = legal(make_view(trick, Suit.SPADES), hand)
    assert moves == [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.QUEEN, Suit.SPADES)]


def test_must_overtrump_opponent_nine_with_jack():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    trick.add_play(Seat.WEST, Card(Rank.NINE, Suit.SPADES))
    hand = [Card(Rank.EIGHT, Suit.SPADES), Card(Rank.JACK, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS)]

    assert legal(make_view(trick, Suit.SPADES), hand) == [Card(Rank.JACK, Suit.SPADES)]


def test_overtrump_needs_strictly_higher_trump():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    trick.add_play(Seat.WEST, Card(Rank.NINE, Suit.SPADES))
    hand = [Card(Rank.NINE, Suit.SPADES), Card(Rank.JACK, Suit.SPADES)]

    assert legal(make_view(trick, Suit.SPADES), hand) == [Card(Rank.JACK, Suit.SPADES)]


def test_all_trumps_when_unable_to_overtrump():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    trick.add_play(Seat.WEST, Card(Rank.JACK, Suit.SPADES))
    hand = [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS)]

    assert legal(make_view(trick, Suit.SPADES), hand) == [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.SPADES)]


def test_partner_winning_flag_keeps_trump_obligation():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    trick.add_play(Seat.WEST, Card(Rank.JACK, Suit.SPADES))
    trick.add_play(Seat.NORTH, Card(Rank.SEVEN, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS)]
    config = LegalMoveConfig(allow_discard_if_partner_winning=True)

    assert legal(make_view(trick, Suit.SPADES, legal_moves=config), hand) == [Card(Rank.SEVEN, Suit.SPADES)]


def test_free_discard_when_void_in_lead_and_trump():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.CLUBS), Card(Rank.ACE, Suit.DIAMONDS)]

    assert legal(make_view(trick, Suit.SPADES), hand) == hand


def test_trump_obligation_can_be_disabled():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS)]
    config = LegalMoveConfig(must_trump_if_void=False)

    assert legal(make_view(trick, Suit.SPADES, legal_moves=config), hand) == hand


def test_sun_skips_trump_branch():
    trick = Trick(Seat.SOUTH)
    trick.add_play(Seat.SOUTH, Card(Rank.KING, Suit.HEARTS))
    hand = [Card(Rank.SEVEN, Suit.SPADES), Card(Rank.ACE, Suit.CLUBS)]

    assert legal(make_view(trick, None, variant="baloot"), hand) == hand


def test_legal_moves_are_a_non_empty_subset_of_the_hand():
    trick = Trick(Seat.WEST)
    trick.add_play(Seat.WEST, Card(Rank.ACE, Suit.DIAMONDS))
    trick.add_play(Seat.NORTH, Card(Rank.EIGHT, Suit.CLUBS))
    hands = [
        [Card(Rank.SEVEN, Suit.DIAMONDS)],
        [Card(Rank.NINE, Suit.CLUBS), Card(Rank.TEN, Suit.HEARTS)],
        [Card(Rank.QUEEN, Suit.SPADES), Card(Rank.KING, Suit.SPADES)],
    ]
    for trump in (Suit.CLUBS, Suit.HEARTS, None):
        view = make_view(trick, trump)
        for hand in hands:
            moves = legal(view, hand)
            assert moves
            assert set(moves) <= set(hand)
