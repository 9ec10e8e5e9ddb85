"""Bidding policies: speaking order, bid comparison, validation and allowed-bid lists."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .bidding import PASS, Bid, BidKind
from .cards import Suit
from .policies import BidComparator, BidEvaluator, BidOrderPolicy, BidValidator
from .rules_schema import SUIT_NAMES
from .seats import Seat, order_after

CLASSIC_KINDS = (BidKind.TAKE,)
BALOOT_KINDS = (BidKind.TAKE, BidKind.SUN)


class ClockwiseBidOrder(BidOrderPolicy):
    def __init__(self, clockwise: bool = True) -> None:
        self.clockwise = clockwise

    def enumerate_order(self, dealer: Seat) -> List[Seat]:
        return order_after(dealer, clockwise=self.clockwise)


class StrainPriorityComparator(BidComparator):
    """Higher level wins; equal levels are decided by strain priority, strongest first.

    Only takes and Sun bids compare; a strain missing from the priority list ranks
    below every listed one.
    """

    def __init__(self, priority: Sequence[str] = SUIT_NAMES) -> None:
        size = len(priority)
        self._rank: Dict[str, int] = {name: size - index for index, name in enumerate(priority)}

    def strain_rank(self, bid: Bid) -> int:
        return self._rank.get(bid.strain or "", 0)

    def is_better(self, candidate: Bid, current: Bid) -> bool:
        if candidate.kind not in BALOOT_KINDS:
            return False
        if current.is_pass:
            return True
        if current.kind not in BALOOT_KINDS:
            return False
        if candidate.level != current.level:
            return candidate.level > current.level
        return self.strain_rank(candidate) > self.strain_rank(current)


class LevelBidValidator(BidValidator):
    """Pass is always valid; other bids must be a supported kind within ``1..max_level``.

    Over a live bid a higher level is valid, a lower one is not, and an equal level is
    valid only with a different strain. Double and redouble are not supported.
    """

    def __init__(self, max_level: int = 1, kinds: Iterable[BidKind] = CLASSIC_KINDS) -> None:
        self.max_level = max_level
        self.kinds = frozenset(kinds)

    def is_valid(self, candidate: Bid, current: Bid) -> bool:
        if not isinstance(candidate, Bid):
            return False
        if candidate.is_pass:
            return True
        if candidate.kind not in self.kinds or not 1 <= candidate.level <= self.max_level:
            return False
        if current.is_pass:
            return True
        if candidate.level != current.level:
            return candidate.level > current.level
        return candidate.strain != current.strain


class ClassicBidEvaluator(BidEvaluator):
    """Pass plus a take in every suit, at each level from the current one up to ``max_level``."""

    def __init__(self, max_level: int = 1) -> None:
        self.max_level = max_level

    def levels(self, current: Bid) -> range:
        return range(max(1, current.level), self.max_level + 1)

    def build_allowed(self, current: Bid) -> List[Bid]:
        allowed = [PASS]
        for level in self.levels(current):
            allowed.extend(Bid.take(suit, level) for suit in Suit)
        return allowed


class BalootBidEvaluator(ClassicBidEvaluator):
    def build_allowed(self, current: Bid) -> List[Bid]:
        allowed = [PASS]
        for level in self.levels(current):
            allowed.append(Bid.sun(level))
            allowed.extend(Bid.take(suit, level) for suit in Suit)
        return allowed

