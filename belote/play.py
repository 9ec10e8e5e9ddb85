"""Trick-play engine: one round of eight tricks for a fixed contract."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .bidding import Contract, RoundAborted
from .cards import Card, Suit
from .context import RoundContext, RoundView
from .policies import ConfigurationError, RulesProfile
from .requests import AnswerTimeout, PendingRequest, RequestCancelled
from .rules_schema import TurnFlowConfig
from .scoring import RoundScore, RoundScorer
from .seats import Seat, next_seat, order_from
from .sources import ChooserRegistry
from .trick import Trick, TrickOutcome

logger = logging.getLogger(__name__)


class PlayError(RuntimeError):
    """Raised when the trick-play engine is driven out of order."""


class EngineInvariantError(PlayError):
    """Raised when the rules produce an impossible position, e.g. no legal card."""


class RoundPhase(Enum):
    ROUND_START = auto()
    TRICK_IN_PROGRESS = auto()
    TRICK_RESOLVED = auto()
    ROUND_COMPLETE = auto()
    ABORTED = auto()


def _validate_hands(hands: Optional[Mapping[Seat, Sequence[Card]]]) -> Dict[Seat, List[Card]]:
    if hands is None:
        raise ConfigurationError("No hands were dealt for this round.")
    if set(hands) != set(Seat):
        raise ConfigurationError(f"Hands must be dealt to every seat, got {sorted(hands)}.")
    sizes = {len(cards) for cards in hands.values()}
    if len(sizes) != 1 or 0 in sizes:
        raise ConfigurationError("Every seat must hold the same non-zero number of cards.")
    every_card = [card for cards in hands.values() for card in cards]
    if len(set(every_card)) != len(every_card):
        raise ConfigurationError("A card was dealt twice.")
    return {seat: list(cards) for seat, cards in hands.items()}


class TrickPlayEngine:
    """Plays every trick of a round through the profile's policies.

    Each seat is asked for a card through its registered chooser. Missing choosers,
    illegal answers and human timeouts fall back to the first legal card.
    """

    def __init__(
        self,
        profile: RulesProfile,
        choosers: ChooserRegistry,
        config: Optional[TurnFlowConfig] = None,
        *,
        clockwise: bool = True,
        on_trick: Optional[Callable[[TrickOutcome], None]] = None,
    ) -> None:
        self.profile = profile
        self.choosers = choosers
        self.config = config or TurnFlowConfig()
        self.clockwise = clockwise
        self.on_trick = on_trick
        self._ctx: Optional[RoundContext] = None
        self._phase = RoundPhase.ROUND_START
        self._current_seat: Optional[Seat] = None
        self._outcomes: List[TrickOutcome] = []
        self._request: Optional[PendingRequest] = None
        self._cancelled = False
        self._playing = False

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def trick_index(self) -> int:
        return self._ctx.trick_index if self._ctx else 0

    @property
    def seat_index(self) -> int:
        return self._ctx.seat_index if self._ctx else 0

    @property
    def current_trump(self) -> Optional[Suit]:
        return self._ctx.trump if self._ctx else None

    @property
    def current_seat(self) -> Optional[Seat]:
        return self._current_seat

    @property
    def current_trick(self) -> Optional[Trick]:
        return self._ctx.trick.copy() if self._ctx else None

    @property
    def outcomes(self) -> Tuple[TrickOutcome, ...]:
        return tuple(self._outcomes)

    def view(self) -> Optional[RoundView]:
        if self._ctx is None:
            return None
        return self._ctx.view(self._current_seat)

    def start_round(self, dealer: Seat, contract: Contract, hands: Optional[Mapping[Seat, Sequence[Card]]]) -> None:
        if self._playing:
            raise PlayError("A round is already being played.")
        self.profile.validate()
        try:
            dealt = _validate_hands(hands)
        except ConfigurationError as exc:
            logger.error("Cannot start round: %s", exc)
            raise

        trump_policy = self.profile.trump_policy
        assert trump_policy is not None
        trump_policy.reset()
        trump_policy.set_trump(contract.trump)

        leader = next_seat(dealer, clockwise=self.clockwise)
        self._ctx = RoundContext(
            profile=self.profile,
            dealer=dealer,
            contract=contract,
            hands=dealt,
            trick=Trick(leader, clockwise=self.clockwise),
        )
        self._phase = RoundPhase.ROUND_START
        self._current_seat = leader
        self._outcomes = []
        self._cancelled = False
        logger.debug("Round started: dealer=%s contract=%s", dealer, contract)

    def cancel(self) -> None:
        self._cancelled = True
        if self._request is not None:
            self._request.cancel()
        self.choosers.cancel_all()

    def _check_cancelled(self) -> None:
        if self._cancelled:
            raise RoundAborted("Trick play cancelled.")

    async def play_round(self, scorer: RoundScorer) -> RoundScore:
        ctx = self._ctx
        if ctx is None or self._phase is not RoundPhase.ROUND_START:
            raise PlayError("start_round must be called before play_round.")

        scorer.reset()
        tricks = len(ctx.hands[ctx.trick.leader])
        leader = ctx.trick.leader
        self._playing = True
        try:
            for index in range(tricks):
                ctx.trick_index = index
                outcome = await self._play_trick(ctx, index, leader)
                scorer.record(outcome, is_last=index == tricks - 1)
                self._outcomes.append(outcome)
                if self.on_trick is not None:
                    self.on_trick(outcome)
                leader = outcome.winner
                if self.config.after_trick_delay > 0:
                    await asyncio.sleep(self.config.after_trick_delay)
            self._check_cancelled()
        except RoundAborted:
            self._phase = RoundPhase.ABORTED
            raise
        finally:
            self._playing = False
            self._request = None

        self._phase = RoundPhase.ROUND_COMPLETE
        self._current_seat = None
        return scorer.finalize()

    async def _play_trick(self, ctx: RoundContext, index: int, leader: Seat) -> TrickOutcome:
        ctx.trick = Trick(leader, clockwise=self.clockwise)
        self._phase = RoundPhase.TRICK_IN_PROGRESS
        legal_policy = self.profile.legal_move_policy
        resolver = self.profile.trick_resolver
        assert legal_policy is not None and resolver is not None

        for seat_index, seat in enumerate(order_from(leader, clockwise=self.clockwise)):
            self._check_cancelled()
            ctx.seat_index = seat_index
            self._current_seat = seat
            hand = ctx.hands[seat]
            view = ctx.view(seat)
            legal = legal_policy.legal_moves(view, tuple(hand), seat)
            if not legal:
                logger.error("Legal move policy returned no card for %s holding %s", seat, hand)
                raise EngineInvariantError(f"No legal card for {seat} holding {len(hand)} cards.")
            foreign = [card for card in legal if card not in hand]
            if foreign:
                logger.error("Legal move policy offered %s to %s, who does not hold them", foreign, seat)
                raise EngineInvariantError(f"Legal moves for {seat} include cards not in hand: {foreign}.")

            card = await self._choose(seat, view, legal)
            ctx.trick.add_play(seat, card)
            hand.remove(card)
            if self.config.after_play_delay > 0:
                await asyncio.sleep(self.config.after_play_delay)
                self._check_cancelled()

        winner, points = resolver.resolve(ctx.trick, ctx.trump)
        self._phase = RoundPhase.TRICK_RESOLVED
        self._current_seat = winner
        logger.info("Trick %d won by %s for %d points", index + 1, winner, points)
        return TrickOutcome(index, leader, tuple(ctx.trick.plays), winner, points)

    async def _choose(self, seat: Seat, view: RoundView, legal: List[Card]) -> Card:
        chooser = self.choosers.get(seat)
        if chooser is None:
            logger.warning("No chooser for seat %s; playing %s", seat, legal[0])
            return legal[0]

        request = chooser.begin_choose(view, tuple(legal), seat)
        self._request = request
        try:
            timeout = self.config.human_turn_timeout if chooser.is_human else None
            answer = await request.wait(timeout)
        except AnswerTimeout:
            logger.warning("Seat %s did not play in time; playing %s", seat, legal[0])
            return legal[0]
        except RequestCancelled:
            self._check_cancelled()
            logger.warning("Card request for seat %s was withdrawn; playing %s", seat, legal[0])
            return legal[0]
        finally:
            self._request = None

        if answer not in legal:
            logger.warning("Seat %s chose illegal card %r; playing %s", seat, answer, legal[0])
            return legal[0]
        return answer
