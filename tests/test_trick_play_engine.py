import asyncio
import logging
from random import Random

import pytest

from belote.bidding import Contract, RoundAborted
from belote.cards import Card, Rank, Suit
from belote.deck import build_deck, deal_hands
from belote.play import EngineInvariantError, PlayError, RoundPhase, TrickPlayEngine
from belote.policies import ConfigurationError, LegalMovePolicy
from belote.profiles import build_profile
from belote.requests import answered
from belote.rules_schema import RuleSet, TurnFlowConfig
from belote.scoring import CLASSIC_ROUND_TOTAL, RoundScorer
from belote.seats import Seat, Team
from belote.sources import Chooser, ChooserRegistry, ExternalSeat

FULL_DECK = build_deck()


class LastLegalChooser(Chooser):
    def __init__(self):
        self.views = []

    def begin_choose(self, view, legal, seat):
        self.views.append(view)
        return answered(seat, "card", legal[-1])


class FixedAnswerChooser(Chooser):
    def __init__(self, answer):
        self.answer = answer

    def begin_choose(self, view, legal, seat):
        return answered(seat, "card", self.answer)


def play(hands, contract, chooser=None, variant="classic", profile=None):
    profile = profile or build_profile(RuleSet.for_variant(variant))
    choosers = ChooserRegistry({seat: chooser for seat in Seat} if chooser else {})
    engine = TrickPlayEngine(profile, choosers)
    engine.start_round(Seat.EAST, contract, hands)
    scorer = RoundScorer(profile.scoring_policy.last_trick_bonus)
    score = asyncio.run(engine.play_round(scorer))
    return score, engine


def test_trump_round_always_totals_162():
    for seed in range(20):
        hands = deal_hands(Seat.EAST, rng=Random(seed))
        trump = list(Suit)[seed % 4]
        score, engine = play(hands, Contract(Seat.SOUTH, trump, 1), LastLegalChooser())

        assert score.us + score.them == CLASSIC_ROUND_TOTAL
        assert len(engine.outcomes) == 8
        assert engine.phase is RoundPhase.ROUND_COMPLETE
        assert score.last_trick_winner is not None


def test_sun_round_totals_130():
    hands = deal_hands(Seat.EAST, rng=Random(3))
    score, engine = play(hands, Contract(Seat.NORTH, None, 1), LastLegalChooser(), variant="baloot")

    assert score.us + score.them == 130
    assert engine.current_trump is None


def test_every_played_card_was_legal_and_leader_follows_winner():
    hands = deal_hands(Seat.EAST, rng=Random(11))
    _, engine = play(hands, Contract(Seat.WEST, Suit.HEARTS, 1), LastLegalChooser())

    outcomes = engine.outcomes
    assert outcomes[0].leader is Seat.SOUTH
    for previous, current in zip(outcomes, outcomes[1:]):
        assert current.leader is previous.winner
    played = [card for outcome in outcomes for _, card in outcome.plays]
    assert len(set(played)) == 32


def test_views_are_snapshots():
    hands = deal_hands(Seat.EAST, rng=Random(5))
    chooser = LastLegalChooser()
    play(hands, Contract(Seat.WEST, Suit.CLUBS, 1), chooser)

    first = chooser.views[0]
    assert first.trick.is_empty()
    assert first.trick_index == 0
    assert first.trump is Suit.CLUBS
    assert len(first.hand) == 8


def test_missing_chooser_plays_first_legal_card(caplog):
    hands = deal_hands(Seat.EAST, rng=Random(2))
    with caplog.at_level(logging.WARNING):
        score, engine = play(hands, Contract(Seat.SOUTH, Suit.SPADES, 1))

    assert score.total == 162
    assert "No chooser for seat" in caplog.text
    assert engine.outcomes[0].plays[0][1] == hands[Seat.SOUTH][0]


def test_illegal_answer_falls_back_to_first_legal(caplog):
    hands = deal_hands(Seat.EAST, rng=Random(4))
    with caplog.at_level(logging.WARNING):
        score, _ = play(hands, Contract(Seat.SOUTH, Suit.SPADES, 1), FixedAnswerChooser("not a card"))

    assert score.total == 162
    assert "illegal card" in caplog.text


def test_empty_legal_set_raises_invariant_error():
    class NothingLegal(LegalMovePolicy):
        def legal_moves(self, view, hand, seat):
            return []

    profile = build_profile(RuleSet())
    profile.legal_move_policy = NothingLegal()
    hands = deal_hands(Seat.EAST, rng=Random(1))

    with pytest.raises(EngineInvariantError, match="No legal card"):
        play(hands, Contract(Seat.SOUTH, Suit.SPADES, 1), profile=profile)


def test_legal_card_outside_hand_raises_invariant_error():
    class OffersForeignCard(LegalMovePolicy):
        def legal_moves(self, view, hand, seat):
            return [card for card in FULL_DECK if card not in hand][:1]

    profile = build_profile(RuleSet())
    profile.legal_move_policy = OffersForeignCard()
    hands = deal_hands(Seat.EAST, rng=Random(1))

    with pytest.raises(EngineInvariantError, match="not in hand"):
        play(hands, Contract(Seat.SOUTH, Suit.SPADES, 1), profile=profile)


def test_start_round_validates_hands():
    profile = build_profile(RuleSet())
    engine = TrickPlayEngine(profile, ChooserRegistry())
    contract = Contract(Seat.SOUTH, Suit.HEARTS, 1)
    hands = deal_hands(Seat.EAST, rng=Random(0))

    with pytest.raises(ConfigurationError):
        engine.start_round(Seat.EAST, contract, None)
    short = dict(hands)
    short[Seat.NORTH] = short[Seat.NORTH][:-1]
    with pytest.raises(ConfigurationError):
        engine.start_round(Seat.EAST, contract, short)
    duplicated = dict(hands)
    duplicated[Seat.NORTH] = list(hands[Seat.SOUTH])
    with pytest.raises(ConfigurationError):
        engine.start_round(Seat.EAST, contract, duplicated)
    missing = {seat: cards for seat, cards in hands.items() if seat is not Seat.WEST}
    with pytest.raises(ConfigurationError):
        engine.start_round(Seat.EAST, contract, missing)


def test_play_round_requires_start_round():
    engine = TrickPlayEngine(build_profile(RuleSet()), ChooserRegistry())
    with pytest.raises(PlayError):
        asyncio.run(engine.play_round(RoundScorer()))


def test_short_hands_play_fewer_tricks():
    hands = {
        Seat.SOUTH: [Card(Rank.ACE, Suit.HEARTS)],
        Seat.WEST: [Card(Rank.KING, Suit.HEARTS)],
        Seat.NORTH: [Card(Rank.SEVEN, Suit.SPADES)],
        Seat.EAST: [Card(Rank.QUEEN, Suit.HEARTS)],
    }
    score, engine = play(hands, Contract(Seat.SOUTH, Suit.SPADES, 1), LastLegalChooser())

    assert engine.outcomes[0].winner is Seat.NORTH
    assert score.us == 18 + 10
    assert score.them == 0
    assert score.last_trick_winner is Team.US


def test_cancel_aborts_round():
    async def scenario():
        seat = ExternalSeat(Seat.SOUTH)
        profile = build_profile(RuleSet())
        engine = TrickPlayEngine(profile, ChooserRegistry({s: seat for s in Seat}))
        engine.start_round(Seat.EAST, Contract(Seat.SOUTH, Suit.HEARTS, 1), deal_hands(Seat.EAST, rng=Random(8)))
        task = asyncio.create_task(engine.play_round(RoundScorer()))
        request = await seat.wait_for_turn()
        assert request.kind == "card"
        assert engine.current_seat is Seat.SOUTH
        assert engine.phase is RoundPhase.TRICK_IN_PROGRESS
        engine.cancel()
        with pytest.raises(RoundAborted):
            await task
        assert engine.phase is RoundPhase.ABORTED

    asyncio.run(scenario())


def test_external_seat_plays_a_whole_round():
    async def scenario():
        seat = ExternalSeat(Seat.SOUTH)
        profile = build_profile(RuleSet())
        engine = TrickPlayEngine(profile, ChooserRegistry({s: seat for s in Seat}))
        engine.start_round(Seat.EAST, Contract(Seat.SOUTH, Suit.HEARTS, 1), deal_hands(Seat.EAST, rng=Random(9)))
        task = asyncio.create_task(engine.play_round(RoundScorer()))
        for _ in range(32):
            request = await seat.wait_for_turn()
            assert seat.submit_card(request.options[0])
        return await task

    score = asyncio.run(scenario())
    assert score.total == 162


def test_human_card_timeout_plays_first_legal(caplog):
    async def scenario():
        south = ExternalSeat(Seat.SOUTH)
        others = LastLegalChooser()
        choosers = ChooserRegistry({seat: others for seat in Seat})
        choosers.register(Seat.SOUTH, south)
        profile = build_profile(RuleSet())
        engine = TrickPlayEngine(profile, choosers, TurnFlowConfig(human_turn_timeout=0.01))
        engine.start_round(Seat.EAST, Contract(Seat.SOUTH, Suit.HEARTS, 1), deal_hands(Seat.EAST, rng=Random(12)))
        score = await engine.play_round(RoundScorer())
        return score, engine, south

    with caplog.at_level(logging.WARNING):
        score, engine, south = asyncio.run(scenario())

    assert score.total == CLASSIC_ROUND_TOTAL
    assert engine.phase is RoundPhase.ROUND_COMPLETE
    assert "did not play in time" in caplog.text
    assert south.pending is not None and south.pending.cancelled
    assert not south.awaiting("card")


def run_and_cancel(turn_flow, ready):
    async def scenario():
        profile = build_profile(RuleSet())
        engine = TrickPlayEngine(profile, ChooserRegistry({seat: LastLegalChooser() for seat in Seat}), turn_flow)
        engine.start_round(Seat.EAST, Contract(Seat.SOUTH, Suit.CLUBS, 1), deal_hands(Seat.EAST, rng=Random(13)))
        task = asyncio.create_task(engine.play_round(RoundScorer()))
        while not ready(engine):
            await asyncio.sleep(0.001)
        engine.cancel()
        with pytest.raises(RoundAborted):
            await task
        return engine

    return asyncio.run(scenario())


def test_cancel_during_play_delay_aborts_round():
    engine = run_and_cancel(TurnFlowConfig(after_play_delay=0.02), lambda engine: len(engine.outcomes) >= 1)
    assert engine.phase is RoundPhase.ABORTED
    assert len(engine.outcomes) < 8


def test_cancel_during_last_trick_delay_aborts_round():
    engine = run_and_cancel(TurnFlowConfig(after_trick_delay=0.05), lambda engine: len(engine.outcomes) == 8)
    assert engine.phase is RoundPhase.ABORTED
