"""Abstract rule-policy contracts and the profiles that bundle them.

Engines are written against these contracts only. Concrete classic and Baloot
implementations live in :mod:`belote.classic`, :mod:`belote.baloot`,
:mod:`belote.trump` and :mod:`belote.bid_rules`; :mod:`belote.profiles` picks one set
at configuration time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .cards import Card, Rank, Suit
from .seats import Seat
from .trick import Trick

if TYPE_CHECKING:
    from .bidding import Bid
    from .context import RoundView

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when an engine is wired without a required policy, seat or hand."""


class TrumpPolicy(ABC):
    """Holds the round's trump; set once per round from the contract."""

    @property
    @abstractmethod
    def current_trump(self) -> Optional[Suit]:
        ...

    @abstractmethod
    def set_trump(self, suit: Optional[Suit]) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...


class OrderingPolicy(ABC):
    @abstractmethod
    def order_value(self, rank: Rank, is_trump: bool) -> int:
        """Return the rank strength; higher wins."""


class ScoringPolicy(ABC):
    @abstractmethod
    def points_for(self, suit: Suit, rank: Rank, trump: Optional[Suit]) -> int:
        ...

    @property
    @abstractmethod
    def last_trick_bonus(self) -> int:
        ...


class LegalMovePolicy(ABC):
    @abstractmethod
    def legal_moves(self, view: "RoundView", hand: Sequence[Card], seat: Seat) -> List[Card]:
        """Return the subset of ``hand`` that ``seat`` may play into ``view.trick``."""


class TrickResolver(ABC):
    @abstractmethod
    def resolve(self, trick: Trick, trump: Optional[Suit]) -> Tuple[Seat, int]:
        """Return ``(winning seat, total points)`` for a trick."""


class BidOrderPolicy(ABC):
    @abstractmethod
    def enumerate_order(self, dealer: Seat) -> List[Seat]:
        """Speaking order for one lap, starting at the dealer's left."""


class BidComparator(ABC):
    @abstractmethod
    def is_better(self, candidate: "Bid", current: "Bid") -> bool:
        ...


class BidValidator(ABC):
    @abstractmethod
    def is_valid(self, candidate: "Bid", current: "Bid") -> bool:
        ...


class BidEvaluator(ABC):
    @abstractmethod
    def build_allowed(self, current: "Bid") -> List["Bid"]:
        ...


def _missing(bundle: object) -> List[str]:
    return [field.name for field in fields(bundle) if getattr(bundle, field.name) is None]


@dataclass
class RulesProfile:
    """Card-play policies for one rule variant."""

    trump_policy: Optional[TrumpPolicy]
    ordering_policy: Optional[OrderingPolicy]
    scoring_policy: Optional[ScoringPolicy]
    legal_move_policy: Optional[LegalMovePolicy]
    trick_resolver: Optional[TrickResolver]
    name: str = "custom"

    def validate(self) -> None:
        missing = [name for name in _missing(self) if name != "name"]
        if missing:
            logger.error("Rules profile %r is missing policies: %s", self.name, ", ".join(missing))
            raise ConfigurationError(f"Rules profile {self.name!r} is missing: {', '.join(missing)}")


@dataclass
class BiddingRules:
    """Bidding policies for one rule variant."""

    order_policy: Optional[BidOrderPolicy]
    comparator: Optional[BidComparator]
    validator: Optional[BidValidator]
    evaluator: Optional[BidEvaluator]

    def validate(self) -> None:
        missing = _missing(self)
        if missing:
            logger.error("Bidding rules are missing policies: %s", ", ".join(missing))
            raise ConfigurationError(f"Bidding rules are missing: {', '.join(missing)}")
