from bots.baseline_greedy import GreedyBot
from bots.bot_arena import run_match
from bots.random_bot import RandomBot


def test_run_match_executes():
    results = run_match(GreedyBot(), RandomBot(seed=3), target=300, seed=7)
    assert "scores" in results
    assert len(results["scores"]) == 2
    assert max(results["scores"]) >= 300
    assert results["history"]
    assert all(entry["us"] + entry["them"] == 162 for entry in results["history"])


def test_run_match_is_deterministic_with_seed():
    first = run_match(GreedyBot(), GreedyBot(), target=200, seed=11)
    second = run_match(GreedyBot(), GreedyBot(), target=200, seed=11)
    assert first == second


def test_baloot_match_executes():
    results = run_match(GreedyBot(), RandomBot(seed=1), variant="baloot", target=200, seed=5)
    assert results["deals"] >= len(results["history"]) >= 1
    assert results["winner"] in ("us", "them", None)
