from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .battleship.coord import Coordinate
from .battleship.game import Board, Outcome
from .battleship.shots import ShotSequencer
from .net.net import ConnectionClosed, ReadTimeout
from .net.protocol import (
    Kind,
    Message,
    ParseError,
    encode_last_sunk,
    encode_opening,
    encode_reply,
    parse_message,
    target_of,
)

logger = logging.getLogger(__name__)

READ_TIMEOUT = 1.0
MAX_RETRIES = 3


class Role(Enum):
    LISTENER = "listener"
    CONNECTOR = "connector"


class State(Enum):
    OPENING = "opening"
    AWAITING_REMOTE = "awaiting_remote"
    SCORING = "scoring"
    WON = "won"
    LOST = "lost"
    ABORTED = "aborted"

    @property
    def finished(self) -> bool:
        return self in (State.WON, State.LOST, State.ABORTED)


class RetryExhausted(RuntimeError):
    pass


class Channel(Protocol):
    def read_line(self, timeout: float) -> str: ...

    def write_line(self, text: str) -> None: ...


@dataclass
class Session:
    """Everything one connection needs to remember between lines."""

    own_board: Board
    enemy_board: Board
    sequencer: ShotSequencer
    role: Role
    last_sent: Optional[str] = None
    retries: int = 0
    state: State = State.OPENING
    abort_reason: Optional[str] = None

    @property
    def last_target(self) -> Optional[Coordinate]:
        if self.last_sent is None:
            return None
        return target_of(self.last_sent)


@dataclass(frozen=True)
class GameResult:
    state: State
    reason: Optional[str] = None

    @property
    def won(self) -> bool:
        return self.state is State.WON

    @property
    def lost(self) -> bool:
        return self.state is State.LOST

    @property
    def aborted(self) -> bool:
        return self.state is State.ABORTED


class TurnProtocol:
    """Drives the alternating shot/outcome exchange until someone wins.

    At most one of our messages is ever unanswered; that message is what
    gets resent after a timeout or an unreadable reply.
    """

    def __init__(
        self,
        channel: Channel,
        session: Session,
        timeout: float = READ_TIMEOUT,
        max_retries: int = MAX_RETRIES,
    ) -> None:
        self.channel = channel
        self.session = session
        self.timeout = timeout
        self.max_retries = max_retries

    def run(self) -> GameResult:
        s = self.session
        try:
            if s.role is Role.CONNECTOR:
                self._send(encode_opening(s.sequencer.next()))
            s.state = State.AWAITING_REMOTE
            while not s.state.finished:
                self.step()
        except ConnectionClosed as exc:
            self._abort(f"connection lost: {exc}")
        except RetryExhausted as exc:
            self._abort(str(exc))
        return GameResult(s.state, s.abort_reason)

    def step(self) -> None:
        try:
            line = self.channel.read_line(self.timeout)
        except ReadTimeout as exc:
            self._retry(str(exc))
            return
        logger.info("Received: %s", line.strip())
        try:
            msg = parse_message(line)
            self._check_expected(msg)
        except ParseError as exc:
            self._retry(str(exc))
            return
        self.session.retries = 0
        self.session.state = State.SCORING
        self._handle(msg)

    def _check_expected(self, msg: Message) -> None:
        s = self.session
        if msg.kind is Kind.START:
            if s.role is Role.CONNECTOR or s.last_sent is not None:
                raise ParseError("unexpected opening message")
        elif s.last_target is None:
            raise ParseError(f"{msg.kind.value} received before we fired")

    def _handle(self, msg: Message) -> None:
        s = self.session
        if msg.kind is Kind.LAST_SUNK:
            s.enemy_board.absorb_opponent_result(s.last_target, Outcome.LAST_SUNK)
            s.state = State.WON
            logger.info("Opponent fleet destroyed")
            return

        if msg.kind is Kind.REPLY:
            s.enemy_board.absorb_opponent_result(s.last_target, msg.outcome)

        outcome = s.own_board.score_shot(msg.target)
        if outcome is Outcome.LAST_SUNK:
            self._send(encode_last_sunk())
            s.state = State.LOST
            logger.info("Our fleet was destroyed")
            return

        self._send(encode_reply(outcome, s.sequencer.next()))
        s.state = State.AWAITING_REMOTE

    def _send(self, line: str) -> None:
        self.session.last_sent = line
        logger.info("Sending: %s", line)
        self.channel.write_line(line)

    def _retry(self, reason: str) -> None:
        s = self.session
        s.retries += 1
        logger.warning("%s (%d/%d)", reason, s.retries, self.max_retries)
        if s.retries >= self.max_retries:
            raise RetryExhausted(f"gave up after {s.retries} failed reads")
        if s.last_sent is not None:
            logger.info("Resending: %s", s.last_sent)
            self.channel.write_line(s.last_sent)

    def _abort(self, reason: str) -> None:
        s = self.session
        s.state = State.ABORTED
        s.abort_reason = reason
        logger.error("Communication error: %s", reason)

