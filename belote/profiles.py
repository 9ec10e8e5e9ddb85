"""Wire concrete policy objects for the configured rule variant."""

from __future__ import annotations

import logging

from .baloot import BalootLegalMovePolicy, BalootScoringPolicy, BalootTrickResolver
from .bid_rules import (
    BALOOT_KINDS,
    CLASSIC_KINDS,
    BalootBidEvaluator,
    ClassicBidEvaluator,
    ClockwiseBidOrder,
    LevelBidValidator,
    StrainPriorityComparator,
)
from .classic import ClassicLegalMovePolicy, ClassicScoringPolicy, ClassicTrickResolver, RankOrdering
from .policies import BiddingRules, RulesProfile
from .rules_schema import RuleSet
from .trump import BalootTrumpPolicy, ClassicTrumpPolicy

logger = logging.getLogger(__name__)


def build_profile(rules: RuleSet) -> RulesProfile:
    ordering = RankOrdering.from_config(rules.ordering)
    if rules.variant == "baloot":
        scoring = BalootScoringPolicy(rules.scoring)
        profile = RulesProfile(
            trump_policy=BalootTrumpPolicy(),
            ordering_policy=ordering,
            scoring_policy=scoring,
            legal_move_policy=BalootLegalMovePolicy(ordering, rules.legal_moves),
            trick_resolver=BalootTrickResolver(ordering, scoring),
            name="baloot",
        )
    else:
        scoring = ClassicScoringPolicy(rules.scoring)
        profile = RulesProfile(
            trump_policy=ClassicTrumpPolicy(),
            ordering_policy=ordering,
            scoring_policy=scoring,
            legal_move_policy=ClassicLegalMovePolicy(ordering, rules.legal_moves),
            trick_resolver=ClassicTrickResolver(ordering, scoring),
            name="classic",
        )
    logger.debug("Built %s rules profile", profile.name)
    return profile


def build_bidding_rules(rules: RuleSet) -> BiddingRules:
    config = rules.bidding
    if rules.variant == "baloot":
        kinds, evaluator = BALOOT_KINDS, BalootBidEvaluator(config.max_level)
    else:
        kinds, evaluator = CLASSIC_KINDS, ClassicBidEvaluator(config.max_level)
    return BiddingRules(
        order_policy=ClockwiseBidOrder(rules.match.clockwise),
        comparator=StrainPriorityComparator(config.suit_priority),
        validator=LevelBidValidator(config.max_level, kinds),
        evaluator=evaluator,
    )
