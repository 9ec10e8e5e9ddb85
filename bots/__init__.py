"""Illustrative bot strategies for Belote and Baloot."""

from .base import BotSeat, BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

__all__ = ["BotSeat", "BotStrategy", "GreedyBot", "RandomBot"]
