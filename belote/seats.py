"""Seat, partnership and clockwise ordering model for the four-seat table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterable, List


class Seat(IntEnum):
    """Table positions numbered clockwise."""

    SOUTH = 0
    WEST = 1
    NORTH = 2
    EAST = 3

    def __str__(self) -> str:
        return self.name.lower()


class Team(Enum):
    US = "us"
    THEM = "them"


SEAT_COUNT = len(Seat)


def next_seat(seat: Seat, *, clockwise: bool = True) -> Seat:
    step = 1 if clockwise else SEAT_COUNT - 1
    return Seat((int(seat) + step) % SEAT_COUNT)


def partner_of(seat: Seat) -> Seat:
    return Seat((int(seat) + 2) % SEAT_COUNT)


def are_partners(a: Seat, b: Seat) -> bool:
    return a is not b and partner_of(a) is b


def team_of(seat: Seat) -> Team:
    """South/North play as "us", West/East as "them"."""
    return Team.US if int(seat) % 2 == 0 else Team.THEM


def order_from(start: Seat, *, clockwise: bool = True) -> List[Seat]:
    """All four seats starting at ``start``."""
    order = [start]
    while len(order) < SEAT_COUNT:
        order.append(next_seat(order[-1], clockwise=clockwise))
    return order


def order_after(dealer: Seat, *, clockwise: bool = True) -> List[Seat]:
    """All four seats starting at the dealer's left."""
    return order_from(next_seat(dealer, clockwise=clockwise), clockwise=clockwise)


def parse_seat(value: str) -> Seat:
    try:
        return Seat[value.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown seat: {value!r}") from exc


@dataclass(frozen=True)
class TableSeat:
    seat: Seat
    team: Team
    is_local: bool = False


@dataclass(frozen=True)
class Table:
    """Fixed seating: exactly four seats, opposite seats partnered."""

    seats: tuple[TableSeat, ...]

    def __post_init__(self) -> None:
        if sorted(entry.seat for entry in self.seats) != list(Seat):
            raise ValueError("A table needs exactly one entry per seat.")
        for entry in self.seats:
            if entry.team is not team_of(entry.seat):
                raise ValueError(f"Seat {entry.seat} must play for team {team_of(entry.seat).value}.")

    @classmethod
    def standard(cls, local_seats: Iterable[Seat] = (Seat.SOUTH,)) -> "Table":
        local = set(local_seats)
        return cls(tuple(TableSeat(seat, team_of(seat), seat in local) for seat in Seat))

    def get(self, seat: Seat) -> TableSeat:
        return self._by_seat()[seat]

    def team_of(self, seat: Seat) -> Team:
        return self.get(seat).team

    def local_seats(self) -> List[Seat]:
        return [entry.seat for entry in self.seats if entry.is_local]

    def members(self, team: Team) -> List[Seat]:
        return [entry.seat for entry in self.seats if entry.team is team]

    def _by_seat(self) -> Dict[Seat, TableSeat]:
        return {entry.seat: entry for entry in self.seats}
