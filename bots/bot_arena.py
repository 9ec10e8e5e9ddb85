"""Simple bot arena: two bot partnerships play a full match."""

from __future__ import annotations

import argparse
import asyncio
import logging
from random import Random
from typing import Dict, Iterable, Optional

from belote.events import LoggingListener
from belote.match import MatchOrchestrator
from belote.rules_schema import MatchConfig, RuleSet, Variant
from belote.seats import Seat, Team, team_of
from belote.sources import BidderRegistry, ChooserRegistry

from .base import BotSeat, BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}


def build_registries(bot_us: BotStrategy, bot_them: BotStrategy) -> tuple[BidderRegistry, ChooserRegistry]:
    seats = {Team.US: BotSeat(bot_us), Team.THEM: BotSeat(bot_them)}
    bidders = BidderRegistry()
    choosers = ChooserRegistry()
    for seat in Seat:
        adapter = seats[team_of(seat)]
        bidders.register(seat, adapter)
        choosers.register(seat, adapter)
    return bidders, choosers


def run_match(
    bot_us: BotStrategy,
    bot_them: BotStrategy,
    *,
    variant: Variant = "classic",
    target: int = 1000,
    seed: Optional[int] = None,
    rules: Optional[RuleSet] = None,
    verbose: bool = False,
) -> dict:
    """Play one match; South/North use ``bot_us`` and West/East use ``bot_them``."""
    if rules is None:
        rules = RuleSet.for_variant(variant, match=MatchConfig(target_points=target))
    bidders, choosers = build_registries(bot_us, bot_them)
    orchestrator = MatchOrchestrator(
        rules,
        bidders,
        choosers,
        rng=Random(seed),
        listener=LoggingListener() if verbose else None,
    )
    result = asyncio.run(orchestrator.play())
    return {
        "scores": (result.score.us, result.score.them),
        "winner": result.winner.value if result.winner else None,
        "deals": result.deals,
        "history": [
            {"us": round_score.us, "them": round_score.them, "last_trick": round_score.last_trick_winner.value}
            for round_score in result.rounds
        ],
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bot-us", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-them", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--variant", default="classic", choices=["classic", "baloot"])
    parser.add_argument("--target", type=int, default=1000, help="Points needed to win the match.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--verbose", action="store_true", help="Log every contract and round.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    bot_us = BOT_REGISTRY[args.bot_us]()
    bot_them = BOT_REGISTRY[args.bot_them]()
    results = run_match(bot_us, bot_them, variant=args.variant, target=args.target, seed=args.seed, verbose=args.verbose)

    print(f"Scores after {len(results['history'])} rounds ({results['deals']} deals): {results['scores']}")
    print(f"Winner: {results['winner'] or 'none'}")


if __name__ == "__main__":
    main()
