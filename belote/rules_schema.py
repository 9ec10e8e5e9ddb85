"""Validation schema for rule-variant and flow configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .cards import RANK_LABELS

SUIT_NAMES = ("hearts", "diamonds", "clubs", "spades")
SUN = "sun"

Variant = Literal["classic", "baloot"]


def _validate_order(value: list[str]) -> list[str]:
    normalized = [rank.upper() for rank in value]
    if sorted(normalized) != sorted(RANK_LABELS):
        raise ValueError(f"Order must list each of {RANK_LABELS} exactly once.")
    return normalized


def _validate_points(value: dict[str, int]) -> dict[str, int]:
    normalized = {rank.upper(): points for rank, points in value.items()}
    missing = set(RANK_LABELS) - set(normalized)
    if missing:
        raise ValueError(f"Point table is missing ranks {sorted(missing)}.")
    unknown = set(normalized) - set(RANK_LABELS)
    if unknown:
        raise ValueError(f"Point table has unknown ranks {sorted(unknown)}.")
    for rank, points in normalized.items():
        if points < 0:
            raise ValueError(f"Card {rank} has negative points.")
    return normalized


class OrderingConfig(BaseModel):
    trump_order: list[str] = Field(
        default_factory=lambda: ["J", "9", "A", "10", "K", "Q", "8", "7"],
        description="Trump ranks, strongest first.",
    )
    off_order: list[str] = Field(
        default_factory=lambda: ["A", "10", "K", "Q", "J", "9", "8", "7"],
        description="Non-trump ranks, strongest first.",
    )

    @field_validator("trump_order", "off_order")
    @classmethod
    def validate_order(cls, value: list[str]) -> list[str]:
        return _validate_order(value)


class ScoringConfig(BaseModel):
    trump_points: dict[str, int] = Field(
        default_factory=lambda: {"J": 20, "9": 14, "A": 11, "10": 10, "K": 4, "Q": 3, "8": 0, "7": 0}
    )
    off_points: dict[str, int] = Field(
        default_factory=lambda: {"A": 11, "10": 10, "K": 4, "Q": 3, "J": 2, "9": 0, "8": 0, "7": 0}
    )
    last_trick_bonus: int = Field(10, ge=0, description="Bonus points awarded to the last trick winner.")
    hokom_multiplier: int = Field(1, ge=1, description="Baloot only: multiplier for trump contracts.")
    sun_multiplier: int = Field(1, ge=1, description="Baloot only: multiplier for no-trump contracts.")

    @field_validator("trump_points", "off_points")
    @classmethod
    def validate_points(cls, value: dict[str, int]) -> dict[str, int]:
        return _validate_points(value)


class LegalMoveConfig(BaseModel):
    must_follow_suit: bool = True
    must_trump_if_void: bool = True
    must_overtrump: bool = True
    allow_discard_if_partner_winning: bool = Field(
        True,
        description="Kept for parity with table rules; currently yields the same trump set.",
    )


class BiddingConfig(BaseModel):
    suit_priority: list[str] = Field(
        default_factory=lambda: list(SUIT_NAMES),
        description="Tie-break between equal-level bids, strongest first. 'sun' is Baloot only.",
    )
    max_level: int = Field(1, ge=1, description="Highest level a take may announce.")
    ai_think_delay: float = Field(0.0, ge=0.0)
    between_turns_delay: float = Field(0.0, ge=0.0)

    @field_validator("suit_priority")
    @classmethod
    def validate_priority(cls, value: list[str]) -> list[str]:
        normalized = [name.lower() for name in value]
        for name in normalized:
            if name not in SUIT_NAMES and name != SUN:
                raise ValueError(f"Unknown suit: {name!r}")
        if len(set(normalized)) != len(normalized):
            raise ValueError("Suit priority must not repeat a suit.")
        return normalized


class TurnFlowConfig(BaseModel):
    after_play_delay: float = Field(0.0, ge=0.0)
    after_trick_delay: float = Field(0.0, ge=0.0)
    human_turn_timeout: float = Field(0.0, ge=0.0, description="0 disables the human turn timeout.")


class MatchConfig(BaseModel):
    target_points: int = Field(1000, ge=1)
    win_by_two: bool = False
    starting_dealer: Literal["south", "west", "north", "east"] = "east"
    clockwise: bool = True
    redeal_on_all_pass: bool = Field(True, description="Throw the deal in when every seat passes.")
    max_deals: int = Field(200, ge=1, description="Safety cap on deals per match.")


class RuleSet(BaseModel):
    variant: Variant = "classic"
    ordering: OrderingConfig = Field(default_factory=OrderingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    legal_moves: LegalMoveConfig = Field(default_factory=LegalMoveConfig)
    bidding: BiddingConfig = Field(default_factory=BiddingConfig)
    turn_flow: TurnFlowConfig = Field(default_factory=TurnFlowConfig)
    match: MatchConfig = Field(default_factory=MatchConfig)

    @model_validator(mode="after")
    def check_variant(self) -> "RuleSet":
        if self.variant == "classic" and SUN in self.bidding.suit_priority:
            raise ValueError("Sun bids only exist in the baloot variant.")
        return self

    @classmethod
    def for_variant(cls, variant: Variant, **overrides) -> "RuleSet":
        """Return the default rules of ``variant`` with top-level sections overridden."""
        if variant == "baloot":
            defaults: dict = {
                "variant": "baloot",
                "legal_moves": LegalMoveConfig(allow_discard_if_partner_winning=False),
                "bidding": BiddingConfig(suit_priority=[SUN, *SUIT_NAMES]),
            }
        else:
            defaults = {"variant": "classic"}
        defaults.update(overrides)
        return cls(**defaults)


def load_rules(path: Union[str, Path]) -> RuleSet:
    """Load and validate a JSON rules file."""
    return RuleSet.model_validate_json(Path(path).read_text(encoding="utf-8"))
