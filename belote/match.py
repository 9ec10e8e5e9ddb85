"""Match orchestration: deal, bid, play and score rounds until a team reaches the target."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, List, Mapping, Optional, Protocol, Sequence, Set, Tuple

from .bidding import BiddingEngine, Contract, RoundAborted
from .cards import Card, Suit
from .deck import deal_hands
from .events import MatchListener
from .play import PlayError, TrickPlayEngine
from .policies import RulesProfile
from .profiles import build_bidding_rules, build_profile
from .rules_schema import RuleSet
from .scoring import MatchScore, RoundScore, RoundScorer, is_match_over
from .seats import Seat, Team, next_seat, parse_seat
from .sources import BidderRegistry, ChooserRegistry

logger = logging.getLogger(__name__)

DealFunction = Callable[[Seat, Random], Mapping[Seat, Sequence[Card]]]


class TrumpSource(Protocol):
    def choose_trump(self) -> Suit:
        ...


class RotatingDealerPolicy:
    def __init__(self, clockwise: bool = True) -> None:
        self.clockwise = clockwise

    def next_dealer(self, dealer: Seat) -> Seat:
        return next_seat(dealer, clockwise=self.clockwise)


@dataclass(frozen=True)
class MatchResult:
    score: MatchScore
    winner: Optional[Team]
    rounds: Tuple[RoundScore, ...]
    deals: int
    stopped: bool = False


class MatchOrchestrator:
    """Runs a full match.

    Every deal goes through bidding (or the configured trump source), the trick-play
    engine and the round scorer. A deal everyone passed is thrown in and redealt by the
    next dealer when ``redeal_on_all_pass`` is set.
    """

    def __init__(
        self,
        rules: RuleSet,
        bidders: BidderRegistry,
        choosers: ChooserRegistry,
        *,
        profile: Optional[RulesProfile] = None,
        rng: Optional[Random] = None,
        deal: Optional[DealFunction] = None,
        listener: Optional[MatchListener] = None,
        trump_source: Optional[TrumpSource] = None,
    ) -> None:
        self.rules = rules
        self.bidders = bidders
        self.choosers = choosers
        self.profile = profile or build_profile(rules)
        self.bidding_rules = build_bidding_rules(rules)
        self.rng = rng or Random()
        self.deal = deal or self._deal
        self.listener = listener or MatchListener()
        self.trump_source = trump_source
        self.dealer_policy = RotatingDealerPolicy(rules.match.clockwise)
        self.bidding = BiddingEngine(
            self.bidding_rules,
            bidders,
            rules.bidding,
            human_turn_timeout=rules.turn_flow.human_turn_timeout,
        )
        self.play_engine = TrickPlayEngine(
            self.profile,
            choosers,
            rules.turn_flow,
            clockwise=rules.match.clockwise,
            on_trick=self.listener.on_trick,
        )
        self._score = MatchScore(target=rules.match.target_points)
        self._dealer = parse_seat(rules.match.starting_dealer)
        self._deals = 0
        self._rounds: List[RoundScore] = []
        self._running = False
        self._stopped = False

    @property
    def match_score(self) -> MatchScore:
        return self._score

    @property
    def dealer(self) -> Seat:
        return self._dealer

    @property
    def deals_played(self) -> int:
        return self._deals

    @property
    def rounds(self) -> Tuple[RoundScore, ...]:
        return tuple(self._rounds)

    @property
    def running(self) -> bool:
        return self._running

    def _deal(self, dealer: Seat, rng: Random):
        return deal_hands(dealer, rng=rng, clockwise=self.rules.match.clockwise)

    def stop(self) -> None:
        """Stop the match; the running :meth:`play` returns a stopped result."""
        self._stopped = True
        self.bidding.cancel()
        self.play_engine.cancel()

    def _check_stopped(self) -> None:
        if self._stopped:
            raise RoundAborted("Match stopped.")

    async def play(self, starting_dealer: Optional[Seat] = None) -> MatchResult:
        if self._running:
            raise PlayError("Match already in progress.")
        self.profile.validate()
        self.bidding_rules.validate()

        self._score = MatchScore(target=self.rules.match.target_points)
        if starting_dealer is not None:
            self._dealer = starting_dealer
        self._deals = 0
        self._rounds = []
        self._stopped = False
        self._running = True
        self.listener.on_match_start(self._dealer, self._score.target)
        try:
            return await self._play_deals()
        except RoundAborted:
            logger.info("Match stopped at %d/%d", self._score.us, self._score.them)
            self.listener.on_match_stop(self._score)
            return self._result(None, stopped=True)
        finally:
            self._running = False

    async def _play_deals(self) -> MatchResult:
        match_config = self.rules.match
        while True:
            if self._deals >= match_config.max_deals:
                logger.warning("Reached %d deals without a winner; stopping match", match_config.max_deals)
                self.listener.on_match_stop(self._score)
                return self._result(None, stopped=True)

            self._check_stopped()
            dealer = self._dealer
            self._deals += 1
            hands = self.deal(dealer, self.rng)
            self._notify_round_start(hands)

            contract = await self._contract(dealer)
            self._check_stopped()
            self.listener.on_contract(dealer, contract)
            if contract.all_passed and match_config.redeal_on_all_pass:
                logger.info("Everyone passed; deal %d thrown in", self._deals)
                self._dealer = self.dealer_policy.next_dealer(dealer)
                continue

            self.play_engine.start_round(dealer, contract, hands)
            scorer = RoundScorer(self.profile.scoring_policy.last_trick_bonus)
            round_score = await self.play_engine.play_round(scorer)
            self._check_stopped()
            self._rounds.append(round_score)
            self._score = self._score.add(round_score)
            self.listener.on_round_end(round_score)
            logger.info("Round %d: %d/%d, match %d/%d", len(self._rounds), round_score.us,
                        round_score.them, self._score.us, self._score.them)

            if is_match_over(self._score, match_config.win_by_two):
                result = self._result(self._score.leader())
                self.listener.on_match_end(result)
                return result

            self._dealer = self.dealer_policy.next_dealer(dealer)
            self.listener.on_next_round(self._dealer, self._score)

    async def _contract(self, dealer: Seat) -> Contract:
        if self.trump_source is not None:
            return Contract(next_seat(dealer, clockwise=self.rules.match.clockwise), self.trump_source.choose_trump(), 1)
        return await self.bidding.run(dealer)

    def _notify_round_start(self, hands: Mapping[Seat, Sequence[Card]]) -> None:
        for seat in Seat:
            notified: Set[int] = set()
            for source in (self.bidders.get(seat), self.choosers.get(seat)):
                if source is None or id(source) in notified:
                    continue
                notified.add(id(source))
                source.on_round_start(seat, tuple(hands[seat]))

    def _result(self, winner: Optional[Team], stopped: bool = False) -> MatchResult:
        return MatchResult(self._score, winner, tuple(self._rounds), self._deals, stopped)
