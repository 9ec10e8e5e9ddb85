"""REST service to play Belote or Baloot from the South seat against bots."""

from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from random import Random
from typing import AsyncIterator, Dict, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from belote.bidding import Bid, BiddingError
from belote.cards import Card, deserialize_card, parse_suit, serialize_card
from belote.match import MatchOrchestrator
from belote.rules_schema import MatchConfig, RuleSet
from belote.seats import Seat, partner_of
from belote.sources import BidderRegistry, ChooserRegistry, ExternalSeat
from bots.base import BotSeat
from bots.bot_arena import BOT_REGISTRY

logger = logging.getLogger(__name__)

HUMAN_SEAT = Seat.SOUTH


class StartRequest(BaseModel):
    variant: Literal["classic", "baloot"] = "classic"
    target_points: int = Field(1000, ge=1)
    seed: Optional[int] = None
    partner: str = "greedy"
    opponents: str = "greedy"


class BidRequest(BaseModel):
    kind: Literal["pass", "take", "sun"]
    suit: Optional[str] = None
    level: int = 1


class PlayRequest(BaseModel):
    rank: str
    suit: str


class PlaySession:
    def __init__(self, orchestrator: MatchOrchestrator, seat: ExternalSeat) -> None:
        self.orchestrator = orchestrator
        self.seat = seat
        self.task: Optional[asyncio.Task] = None


sessions: Dict[str, PlaySession] = {}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    yield


app = FastAPI(title="Belote Play Service", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_bot(name: str) -> BotSeat:
    bot_cls = BOT_REGISTRY.get(name)
    if bot_cls is None:
        raise HTTPException(status_code=400, detail=f"Unknown bot {name!r}")
    return BotSeat(bot_cls())


def serialize_bid(bid: object) -> Optional[Dict[str, object]]:
    if not isinstance(bid, Bid):
        return None
    return {
        "kind": bid.kind.value,
        "suit": bid.suit.value if bid.suit else None,
        "level": bid.level,
        "label": str(bid),
    }


def parse_bid(request: BidRequest) -> Bid:
    try:
        if request.kind == "pass":
            return Bid.pass_bid()
        if request.kind == "sun":
            return Bid.sun(request.level)
        suit = parse_suit(request.suit or "")
        if suit is None:
            raise BiddingError("A take must name a suit.")
        return Bid.take(suit, request.level)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def serialize_state(session: PlaySession) -> Dict[str, object]:
    orchestrator = session.orchestrator
    seat = session.seat
    engine = orchestrator.play_engine
    bidding = orchestrator.bidding
    task = session.task
    match_complete = task is not None and task.done()

    if seat.awaiting("bid"):
        phase = "bidding"
    elif seat.awaiting("card"):
        phase = "play"
    elif match_complete:
        phase = "complete"
    else:
        phase = "waiting"

    pending = seat.pending if phase in ("bidding", "play") else None
    trick = engine.current_trick
    winner = None
    if match_complete and not task.cancelled() and task.exception() is None:
        result = task.result()
        winner = result.winner.value if result.winner else None

    return {
        "seat": str(seat.seat),
        "phase": phase,
        "dealer": str(orchestrator.dealer),
        "hand": [serialize_card(card) for card in seat.hand],
        "allowedBids": [serialize_bid(bid) for bid in pending.options] if phase == "bidding" else [],
        "legalCards": [serialize_card(card) for card in pending.options] if phase == "play" else [],
        "currentHigh": serialize_bid(bidding.current_high),
        "bidHistory": [
            {"seat": str(record.seat), "bid": serialize_bid(record.bid), "accepted": record.accepted}
            for record in bidding.history
        ],
        "trump": engine.current_trump.value if engine.current_trump else None,
        "currentTrick": [
            {"seat": str(played_by), "card": serialize_card(card)}
            for played_by, card in (trick.plays if trick else [])
        ],
        "scores": {
            "us": orchestrator.match_score.us,
            "them": orchestrator.match_score.them,
            "target": orchestrator.match_score.target,
        },
        "rounds": [{"us": score.us, "them": score.them} for score in orchestrator.rounds],
        "matchComplete": match_complete,
        "winner": winner,
    }


def ensure_session(session_id: str) -> PlaySession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def settle(session: PlaySession) -> None:
    """Let the match run until the human seat is asked again or the match ends."""
    task = session.task
    if task is None or task.done():
        return
    waiter = asyncio.ensure_future(session.seat.wait_for_turn())
    try:
        await asyncio.wait({waiter, task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not waiter.done():
            waiter.cancel()
    if task.done() and not task.cancelled() and task.exception() is not None:
        exc = task.exception()
        logger.error("Match task failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}")


@app.post("/session/start")
async def start_session(request: StartRequest) -> Dict[str, object]:
    rules = RuleSet.for_variant(request.variant, match=MatchConfig(target_points=request.target_points))
    human = ExternalSeat(HUMAN_SEAT)
    partner = build_bot(request.partner)
    opponents = build_bot(request.opponents)

    bidders = BidderRegistry()
    choosers = ChooserRegistry()
    for seat in Seat:
        if seat is HUMAN_SEAT:
            source = human
        elif seat is partner_of(HUMAN_SEAT):
            source = partner
        else:
            source = opponents
        bidders.register(seat, source)
        choosers.register(seat, source)

    orchestrator = MatchOrchestrator(rules, bidders, choosers, rng=Random(request.seed))
    session = PlaySession(orchestrator, human)
    session.task = asyncio.create_task(orchestrator.play())
    session_id = uuid.uuid4().hex
    sessions[session_id] = session
    logger.info("Session %s started (%s, target %d)", session_id, request.variant, request.target_points)

    await settle(session)
    return {"session_id": session_id, "state": serialize_state(session)}


@app.get("/session/{session_id}")
async def get_state(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    return {"state": serialize_state(session)}


@app.post("/session/{session_id}/bid")
async def submit_bid(session_id: str, request: BidRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    if not session.seat.awaiting("bid"):
        raise HTTPException(status_code=409, detail="Not your turn to bid")
    bid = parse_bid(request)
    pending = session.seat.pending
    assert pending is not None
    if bid not in pending.options:
        raise HTTPException(status_code=400, detail=f"Bid {bid} is not allowed")
    session.seat.submit_bid(bid)
    await settle(session)
    return {"state": serialize_state(session)}


@app.post("/session/{session_id}/play")
async def play_card(session_id: str, request: PlayRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    if not session.seat.awaiting("card"):
        raise HTTPException(status_code=409, detail="Not your turn to play")
    try:
        card: Card = deserialize_card({"rank": request.rank, "suit": request.suit})
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    pending = session.seat.pending
    assert pending is not None
    if card not in pending.options:
        raise HTTPException(status_code=400, detail=f"Card {card} is not a legal play")
    session.seat.submit_card(card)
    await settle(session)
    return {"state": serialize_state(session)}


@app.post("/session/{session_id}/stop")
async def stop_session(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    session.orchestrator.stop()
    if session.task is not None and not session.task.done():
        await asyncio.wait({session.task})
    return {"state": serialize_state(session)}


