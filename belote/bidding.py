"""Bid model and the bidding negotiation engine."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .cards import Suit
from .policies import BiddingRules, ConfigurationError
from .requests import AnswerTimeout, PendingRequest, RequestCancelled
from .rules_schema import SUN, BiddingConfig
from .seats import SEAT_COUNT, Seat
from .sources import BidderRegistry

logger = logging.getLogger(__name__)

PASSES_TO_CLOSE = SEAT_COUNT - 1


class BiddingError(ValueError):
    """Raised for malformed bids or misuse of the bidding engine."""


class RoundAborted(RuntimeError):
    """Raised by a running engine after it has been cancelled."""


class BidKind(Enum):
    PASS = "pass"
    TAKE = "take"
    SUN = "sun"
    DOUBLE = "double"
    REDOUBLE = "redouble"


@dataclass(frozen=True)
class Bid:
    kind: BidKind
    suit: Optional[Suit] = None
    level: int = 0

    def __post_init__(self) -> None:
        if self.kind is BidKind.TAKE:
            if self.suit is None:
                raise BiddingError("A take must name a suit.")
        elif self.suit is not None:
            raise BiddingError(f"A {self.kind.value} bid carries no suit.")
        if self.kind in (BidKind.TAKE, BidKind.SUN) and self.level < 1:
            raise BiddingError(f"A {self.kind.value} bid needs a level of at least 1.")
        if self.kind is BidKind.PASS and self.level != 0:
            raise BiddingError("A pass has level 0.")

    @classmethod
    def pass_bid(cls) -> "Bid":
        return cls(BidKind.PASS)

    @classmethod
    def take(cls, suit: Suit, level: int = 1) -> "Bid":
        return cls(BidKind.TAKE, suit, level)

    @classmethod
    def sun(cls, level: int = 1) -> "Bid":
        return cls(BidKind.SUN, None, level)

    @classmethod
    def double(cls) -> "Bid":
        return cls(BidKind.DOUBLE)

    @classmethod
    def redouble(cls) -> "Bid":
        return cls(BidKind.REDOUBLE)

    @property
    def is_pass(self) -> bool:
        return self.kind is BidKind.PASS

    @property
    def strain(self) -> Optional[str]:
        """Suit name of a take, ``"sun"`` for a Sun bid, ``None`` otherwise."""
        if self.kind is BidKind.TAKE:
            assert self.suit is not None
            return self.suit.value
        if self.kind is BidKind.SUN:
            return SUN
        return None

    def __str__(self) -> str:
        if self.kind is BidKind.TAKE:
            return f"Take {self.suit} (L{self.level})"
        if self.kind is BidKind.SUN:
            return f"Sun (L{self.level})"
        return self.kind.value.title()


PASS = Bid.pass_bid()


@dataclass(frozen=True)
class Contract:
    declarer: Seat
    trump: Optional[Suit]
    level: int

    @property
    def all_passed(self) -> bool:
        return self.level == 0

    def __str__(self) -> str:
        trump = self.trump if self.trump is not None else "none"
        return f"declarer={self.declarer}, trump={trump}, L{self.level}"


@dataclass(frozen=True)
class BidRecord:
    """One turn of the auction; ``accepted`` is False when the answer was turned into a pass."""

    seat: Seat
    bid: object
    accepted: bool


class BiddingEngine:
    """Runs one auction to a :class:`Contract`.

    Seats are asked in the order policy's sequence, one request at a time. Answers that
    fail validation or do not beat the current high bid count as passes.
    """

    def __init__(
        self,
        rules: BiddingRules,
        registry: BidderRegistry,
        config: Optional[BiddingConfig] = None,
        *,
        human_turn_timeout: float = 0.0,
    ) -> None:
        self.rules = rules
        self.registry = registry
        self.config = config or BiddingConfig()
        self.human_turn_timeout = human_turn_timeout
        self._reset()
        self._running = False

    def _reset(self) -> None:
        self._current_high = PASS
        self._last_bidder: Optional[Seat] = None
        self._consecutive_passes = 0
        self._seat_to_act: Optional[Seat] = None
        self._history: List[BidRecord] = []
        self._request: Optional[PendingRequest] = None
        self._cancelled = False

    @property
    def current_high(self) -> Bid:
        return self._current_high

    @property
    def last_bidder(self) -> Optional[Seat]:
        return self._last_bidder

    @property
    def consecutive_passes(self) -> int:
        return self._consecutive_passes

    @property
    def seat_to_act(self) -> Optional[Seat]:
        return self._seat_to_act

    @property
    def history(self) -> Tuple[BidRecord, ...]:
        return tuple(self._history)

    @property
    def running(self) -> bool:
        return self._running

    def cancel(self) -> None:
        """Abort the auction; the running :meth:`run` raises :class:`RoundAborted`."""
        self._cancelled = True
        if self._request is not None:
            self._request.cancel()
        self.registry.cancel_all()

    async def run(self, dealer: Seat) -> Contract:
        if self._running:
            raise BiddingError("Bidding is already in progress.")
        self.rules.validate()
        order = self.rules.order_policy.enumerate_order(dealer)
        if sorted(order) != list(Seat):
            logger.error("Bid order %s does not visit every seat once", order)
            raise ConfigurationError("Bid order must list each seat exactly once.")

        self._reset()
        self._running = True
        try:
            turn = 0
            while True:
                self._check_cancelled()
                seat = order[turn % len(order)]
                turn += 1
                self._seat_to_act = seat
                self._apply(seat, await self._ask(seat))

                contract = self._closing_contract(dealer)
                if contract is not None:
                    logger.info("Bidding finished: %s", contract)
                    return contract
                if self.config.between_turns_delay > 0:
                    await asyncio.sleep(self.config.between_turns_delay)
        finally:
            self._running = False
            self._seat_to_act = None
            self._request = None

    def _check_cancelled(self) -> None:
        if self._cancelled:
            raise RoundAborted("Bidding cancelled.")

    async def _ask(self, seat: Seat) -> object:
        source = self.registry.get(seat)
        if source is None:
            logger.warning("No bid source for seat %s; forcing pass", seat)
            return PASS

        allowed = self.rules.evaluator.build_allowed(self._current_high)
        request = source.begin_bid(seat, self._current_high, allowed)
        self._request = request
        try:
            if not source.is_human and self.config.ai_think_delay > 0:
                await asyncio.sleep(self.config.ai_think_delay)
                self._check_cancelled()
            timeout = self.human_turn_timeout if source.is_human else None
            return await request.wait(timeout)
        except AnswerTimeout:
            logger.warning("Seat %s did not bid in time; treating as pass", seat)
            return PASS
        except RequestCancelled:
            self._check_cancelled()
            logger.warning("Bid request for seat %s was withdrawn; treating as pass", seat)
            return PASS
        finally:
            self._request = None

    def _apply(self, seat: Seat, answer: object) -> None:
        current = self._current_high
        if not isinstance(answer, Bid) or not self.rules.validator.is_valid(answer, current):
            logger.debug("Seat %s made an invalid bid %r over %s; counted as pass", seat, answer, current)
            accepted, effective = False, PASS
        elif answer.is_pass or current.is_pass or self.rules.comparator.is_better(answer, current):
            accepted, effective = True, answer
        else:
            logger.debug("Seat %s bid %s does not beat %s; counted as pass", seat, answer, current)
            accepted, effective = False, PASS

        self._history.append(BidRecord(seat, answer, accepted))
        if effective.is_pass:
            self._consecutive_passes += 1
        else:
            self._current_high = effective
            self._last_bidder = seat
            self._consecutive_passes = 0

    def _closing_contract(self, dealer: Seat) -> Optional[Contract]:
        high = self._current_high
        if high.is_pass:
            if self._consecutive_passes >= SEAT_COUNT:
                return Contract(dealer, None, 0)
            return None
        if self._consecutive_passes >= PASSES_TO_CLOSE:
            assert self._last_bidder is not None
            return Contract(self._last_bidder, high.suit, high.level)
        return None
