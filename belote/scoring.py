"""Round and match scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .seats import Seat, Team, team_of as default_team_of
from .trick import TrickOutcome

logger = logging.getLogger(__name__)

CLASSIC_ROUND_TOTAL = 162


class ScoringError(ValueError):
    """Raised when scores are combined inconsistently."""


@dataclass(frozen=True)
class RoundScore:
    us: int
    them: int
    last_trick_winner: Optional[Team] = None

    @property
    def total(self) -> int:
        return self.us + self.them

    def points_for(self, team: Team) -> int:
        return self.us if team is Team.US else self.them


class RoundScorer:
    """Accumulates trick points for one round; the last-trick bonus is added on finalize."""

    def __init__(self, last_trick_bonus: int = 10, team_of: Callable[[Seat], Team] = default_team_of) -> None:
        if last_trick_bonus < 0:
            raise ScoringError("Last-trick bonus must not be negative.")
        self.last_trick_bonus = last_trick_bonus
        self.team_of = team_of
        self.reset()

    def reset(self) -> None:
        self._us = 0
        self._them = 0
        self._last_trick_winner: Optional[Team] = None
        self.tricks_recorded = 0

    def add_trick(self, team: Team, points: int) -> None:
        if points < 0:
            raise ScoringError(f"Trick points must not be negative, got {points}.")
        if team is Team.US:
            self._us += points
        else:
            self._them += points

    def set_last_trick_winner(self, team: Team) -> None:
        self._last_trick_winner = team

    def record(self, outcome: TrickOutcome, is_last: bool) -> None:
        team = self.team_of(outcome.winner)
        self.add_trick(team, outcome.points)
        self.tricks_recorded += 1
        if is_last:
            self.set_last_trick_winner(team)

    def finalize(self) -> RoundScore:
        us, them = self._us, self._them
        if self._last_trick_winner is Team.US:
            us += self.last_trick_bonus
        elif self._last_trick_winner is Team.THEM:
            them += self.last_trick_bonus
        return RoundScore(us, them, self._last_trick_winner)


@dataclass(frozen=True)
class MatchScore:
    us: int = 0
    them: int = 0
    target: int = 1000

    def add(self, round_score: RoundScore) -> "MatchScore":
        if round_score.us < 0 or round_score.them < 0:
            raise ScoringError("Round scores must not be negative.")
        return MatchScore(self.us + round_score.us, self.them + round_score.them, self.target)

    def leader(self) -> Optional[Team]:
        if self.us == self.them:
            return None
        return Team.US if self.us > self.them else Team.THEM


def is_match_over(score: MatchScore, win_by_two: bool = False) -> bool:
    us_reached = score.us >= score.target
    them_reached = score.them >= score.target
    if not win_by_two:
        return us_reached or them_reached
    if us_reached and score.us - score.them >= 2:
        return True
    return them_reached and score.them - score.us >= 2
