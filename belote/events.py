"""Match lifecycle hooks for telemetry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .bidding import Contract
from .scoring import MatchScore, RoundScore
from .seats import Seat
from .trick import TrickOutcome

if TYPE_CHECKING:
    from .match import MatchResult

logger = logging.getLogger(__name__)


class MatchListener:
    """No-op base; override the hooks you care about."""

    def on_match_start(self, dealer: Seat, target: int) -> None:
        return None

    def on_contract(self, dealer: Seat, contract: Contract) -> None:
        return None

    def on_trick(self, outcome: TrickOutcome) -> None:
        return None

    def on_round_end(self, round_score: RoundScore) -> None:
        return None

    def on_next_round(self, dealer: Seat, score: MatchScore) -> None:
        return None

    def on_match_end(self, result: "MatchResult") -> None:
        return None

    def on_match_stop(self, score: MatchScore) -> None:
        return None


class LoggingListener(MatchListener):
    def __init__(self, log: logging.Logger = logger) -> None:
        self.log = log

    def on_match_start(self, dealer: Seat, target: int) -> None:
        self.log.info("Match start: dealer=%s target=%d", dealer, target)

    def on_contract(self, dealer: Seat, contract: Contract) -> None:
        self.log.info("Contract (dealer %s): %s", dealer, contract)

    def on_trick(self, outcome: TrickOutcome) -> None:
        self.log.debug("Trick %d: winner=%s points=%d", outcome.index + 1, outcome.winner, outcome.points)

    def on_round_end(self, round_score: RoundScore) -> None:
        last = round_score.last_trick_winner.value if round_score.last_trick_winner else "none"
        self.log.info("Round end: us=%d them=%d last_trick=%s", round_score.us, round_score.them, last)

    def on_next_round(self, dealer: Seat, score: MatchScore) -> None:
        self.log.info("Next round: dealer=%s score=%d/%d", dealer, score.us, score.them)

    def on_match_end(self, result: "MatchResult") -> None:
        winner = result.winner.value if result.winner else "none"
        self.log.info("Match end: us=%d them=%d winner=%s", result.score.us, result.score.them, winner)

    def on_match_stop(self, score: MatchScore) -> None:
        self.log.info("Match stopped: us=%d them=%d", score.us, score.them)
