from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..battleship.coord import Coordinate, format_coord, parse_coord
from ..battleship.game import Outcome

# Messages are single UTF-8 lines, fields separated by ';'
# Opening (connecting side only, once):
# - start;<coord>
# Every later message: outcome of the shot just received, then our next shot
# - pudło;<coord>                 miss
# - trafiony;<coord>              hit
# - trafiony zatopiony;<coord>    hit, ship sunk
# Terminal (no coordinate): the receiver's last ship went down
# - ostatni zatopiony

SEPARATOR = ";"
START = "start"
MISS_TOKEN = "pudło"
HIT_TOKEN = "trafiony"
SUNK_MARK = "zatopiony"
LAST_SUNK_TOKEN = "ostatni zatopiony"

OUTCOME_TOKENS = {
    Outcome.MISS: MISS_TOKEN,
    Outcome.HIT: HIT_TOKEN,
    Outcome.HIT_SUNK: f"{HIT_TOKEN} {SUNK_MARK}",
    Outcome.LAST_SUNK: LAST_SUNK_TOKEN,
}


class ParseError(ValueError):
    pass


class Kind(Enum):
    START = "start"
    REPLY = "reply"
    LAST_SUNK = "last_sunk"


@dataclass(frozen=True)
class Message:
    kind: Kind
    outcome: Optional[Outcome] = None
    target: Optional[Coordinate] = None


def parse_outcome(token: str) -> Outcome:
    # prefix matching keeps us compatible with peers that append text
    if token == LAST_SUNK_TOKEN:
        return Outcome.LAST_SUNK
    if token.startswith(MISS_TOKEN):
        return Outcome.MISS
    if token.startswith(HIT_TOKEN):
        return Outcome.HIT_SUNK if SUNK_MARK in token else Outcome.HIT
    raise ParseError(f"unknown outcome {token!r}")


def parse_message(line: str) -> Message:
    parts = line.strip().split(SEPARATOR)
    command = parts[0]
    if command == LAST_SUNK_TOKEN:
        return Message(Kind.LAST_SUNK, Outcome.LAST_SUNK)
    if len(parts) < 2:
        raise ParseError(f"missing coordinate in {line!r}")
    target = parse_coord(parts[1])
    if target is None:
        raise ParseError(f"bad coordinate {parts[1]!r}")
    if command == START:
        return Message(Kind.START, None, target)
    return Message(Kind.REPLY, parse_outcome(command), target)


def encode_opening(target: Coordinate) -> str:
    return f"{START}{SEPARATOR}{format_coord(target)}"


def encode_reply(outcome: Outcome, target: Coordinate) -> str:
    if outcome is Outcome.LAST_SUNK:
        raise ValueError("the last-sunk message carries no target")
    return f"{OUTCOME_TOKENS[outcome]}{SEPARATOR}{format_coord(target)}"


def encode_last_sunk() -> str:
    return LAST_SUNK_TOKEN


def target_of(line: str) -> Optional[Coordinate]:
    """Coordinate carried by a line we sent ourselves, if any."""
    parts = line.split(SEPARATOR)
    if len(parts) < 2:
        return None
    return parse_coord(parts[1])
