"""Rules and negotiation engine for Belote and Saudi Baloot."""

__all__ = [
    "seats",
    "cards",
    "deck",
    "trick",
    "rules_schema",
    "policies",
    "mechanics",
    "trump",
    "classic",
    "baloot",
    "bid_rules",
    "profiles",
    "requests",
    "sources",
    "bidding",
    "context",
    "play",
    "scoring",
    "events",
    "match",
]
