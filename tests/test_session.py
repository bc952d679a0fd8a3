import socket
import threading

import pytest

from broadside.battleship.coord import Coordinate, all_coords, parse_coord
from broadside.battleship.game import Board, CellState, empty_grid
from broadside.battleship.shots import ShotSequencer
from broadside.net.net import ConnectionClosed, LineChannel, ReadTimeout
from broadside.session import GameResult, Role, Session, State, TurnProtocol

from .conftest import FLEET, ScriptedChannel, board_from

OTHER_FLEET = """\
..........
.####.....
..........
.......#..
.......#..
..........
##........
..........
....###...
..........
"""


def C(token: str) -> Coordinate:
    coord = parse_coord(token)
    assert coord is not None
    return coord


def single_ship_board(token: str) -> Board:
    c = C(token)
    grid = empty_grid()
    grid[c.row][c.col] = True
    return Board.build(grid)


def make(role: Role, script, own=None, seed=1, max_retries=3):
    channel = ScriptedChannel(script)
    session = Session(own or board_from(FLEET), Board.enemy(), ShotSequencer(seed=seed), role)
    return channel, session, TurnProtocol(channel, session, timeout=0.5, max_retries=max_retries)


def first_shots(seed: int, n: int):
    seq = ShotSequencer(seed=seed)
    return [seq.next() for _ in range(n)]


def test_connector_opens_with_start() -> None:
    channel, session, proto = make(Role.CONNECTOR, [])
    result = proto.run()
    opening = first_shots(1, 1)[0]
    assert channel.sent == [f"start;{opening}"]
    assert result.state is State.ABORTED
    assert "connection lost" in result.reason


def test_listener_answers_opening() -> None:
    channel, session, proto = make(Role.LISTENER, ["start;A1"])
    proto.run()
    assert channel.sent[0] == f"trafiony;{first_shots(1, 1)[0]}"
    assert session.own_board.cell(C("A1")) == CellState.HIT_SHIP
    # opening carries no outcome for us
    assert all(session.enemy_board.cell(c) == CellState.UNKNOWN for c in all_coords())


def test_reply_updates_enemy_board_and_scores_incoming_shot() -> None:
    channel, session, proto = make(Role.CONNECTOR, ["trafiony;J1"])
    proto.run()
    opening = first_shots(1, 2)
    assert session.enemy_board.cell(opening[0]) == CellState.HIT_SHIP
    assert session.own_board.cell(C("J1")) == CellState.MISS
    assert channel.sent[1] == f"pudło;{opening[1]}"


def test_hit_sunk_reply_propagates_over_straight_hits() -> None:
    channel, session, proto = make(Role.LISTENER, ["trafiony zatopiony;D5"])
    session.last_sent = "pudło;D5"
    session.state = State.AWAITING_REMOTE
    session.enemy_board.set_cell(C("D3"), CellState.HIT_SHIP)
    session.enemy_board.set_cell(C("D4"), CellState.HIT_SHIP)
    session.enemy_board.set_cell(C("E6"), CellState.HIT_SHIP)

    proto.step()

    enemy = session.enemy_board
    assert enemy.cell(C("D5")) == CellState.HIT_SHIP
    for token in ("C2", "D2", "E2", "C5", "E5", "C6", "D6"):
        assert enemy.cell(C(token)) == CellState.WATER, token
    assert enemy.cell(C("E6")) == CellState.HIT_SHIP
    assert enemy.cell(C("F7")) == CellState.UNKNOWN
    assert session.state is State.AWAITING_REMOTE
    assert session.retries == 0
    assert channel.sent[0].startswith("pudło;")


def test_three_timeouts_abort_without_a_fourth_send() -> None:
    channel, session, proto = make(Role.CONNECTOR, [ReadTimeout("t")] * 3)
    result = proto.run()
    assert result.aborted
    assert session.retries == 3
    assert len(channel.sent) == 3
    assert len(set(channel.sent)) == 1


def test_retry_ceiling_is_configurable() -> None:
    channel, session, proto = make(Role.CONNECTOR, [ReadTimeout("t")] * 5, max_retries=5)
    assert proto.run().aborted
    assert len(channel.sent) == 5


def test_malformed_line_resends_verbatim() -> None:
    channel, session, proto = make(Role.CONNECTOR, ["garbage", "pudło;Z99", "pudło;B10"])
    proto.run()
    opening = channel.sent[0]
    assert channel.sent[1] == opening
    assert channel.sent[2] == opening
    assert channel.sent[3].startswith("pudło;")
    assert session.own_board.cell(C("B10")) == CellState.MISS


def test_good_line_resets_retries() -> None:
    script = [ReadTimeout("t"), ReadTimeout("t"), "pudło;C1", ReadTimeout("t"), ReadTimeout("t")]
    channel, session, proto = make(Role.CONNECTOR, script)
    result = proto.run()
    # two retries, a good line, two more retries, then the script runs dry
    assert result.aborted
    assert "connection lost" in result.reason
    assert session.retries == 2


def test_listener_timeouts_resend_nothing() -> None:
    channel, session, proto = make(Role.LISTENER, [ReadTimeout("t")] * 3)
    assert proto.run().aborted
    assert channel.sent == []


def test_connection_closed_skips_retries() -> None:
    channel, session, proto = make(Role.CONNECTOR, [ConnectionClosed("reset")])
    result = proto.run()
    assert result.aborted
    assert session.retries == 0
    assert len(channel.sent) == 1


def test_unexpected_messages_count_as_malformed() -> None:
    # a connector never receives an opening, a listener never gets an outcome first
    channel, session, proto = make(Role.CONNECTOR, ["start;A1"] * 3)
    assert proto.run().aborted
    channel, session, proto = make(Role.LISTENER, ["pudło;A1", "ostatni zatopiony", "start;J9"])
    proto.run()
    assert session.own_board.cell(C("J9")) == CellState.MISS
    assert session.retries == 0


def test_last_sunk_received_means_we_won() -> None:
    channel, session, proto = make(Role.CONNECTOR, ["ostatni zatopiony"])
    result = proto.run()
    target = first_shots(1, 1)[0]
    assert result.won
    assert session.enemy_board.cell(target) == CellState.HIT_SHIP
    ring = target.neighbors8()
    assert all(session.enemy_board.cell(n) == CellState.WATER for n in ring)
    assert len(channel.sent) == 1


def test_losing_shot_sends_terminal_token() -> None:
    own = single_ship_board("C4")
    channel, session, proto = make(Role.LISTENER, ["start;C4"], own=own)
    result = proto.run()
    assert result.lost
    assert channel.sent == ["ostatni zatopiony"]
    assert session.state is State.LOST


def test_game_result_flags() -> None:
    assert GameResult(State.WON).won
    assert GameResult(State.LOST).lost
    assert GameResult(State.ABORTED, "x").aborted


def run_game(own_a: Board, own_b: Board, seed_a: int, seed_b: int):
    a, b = socket.socketpair()
    listener = Session(own_a, Board.enemy(), ShotSequencer(seed=seed_a), Role.LISTENER)
    connector = Session(own_b, Board.enemy(), ShotSequencer(seed=seed_b), Role.CONNECTOR)
    results = {}

    def play(name, sock, session):
        channel = LineChannel(sock)
        try:
            results[name] = TurnProtocol(channel, session, timeout=2.0).run()
        finally:
            channel.close()

    threads = [
        threading.Thread(target=play, args=("listener", a, listener)),
        threading.Thread(target=play, args=("connector", b, connector)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(30.0)
    return results, listener, connector


@pytest.mark.parametrize("seeds", [(1, 2), (3, 4), (99, 7)])
def test_full_game_over_a_socket(seeds) -> None:
    results, listener, connector = run_game(board_from(FLEET), board_from(OTHER_FLEET), *seeds)
    states = {results["listener"].state, results["connector"].state}
    assert states == {State.WON, State.LOST}

    winner, loser = (listener, connector) if results["listener"].won else (connector, listener)
    assert loser.own_board.all_sunk()
    assert not winner.own_board.all_sunk()
    # every real ship cell of the loser ends up as a known hit on the winner's side
    for c in all_coords():
        real = loser.own_board.occupied[c.row][c.col]
        if real:
            assert winner.enemy_board.cell(c) == CellState.HIT_SHIP
        assert loser.own_board.cell(c) != CellState.UNKNOWN


@pytest.mark.parametrize("bad", ["pudło;ß1", "pudło;C 4", "trafiony;A0_1"])
def test_unparsable_target_is_retried(bad: str) -> None:
    channel, session, proto = make(Role.CONNECTOR, [bad, "pudło;J9"])
    result = proto.run()
    assert channel.sent[1] == channel.sent[0]
    assert channel.sent[2].startswith("pudło;")
    assert session.own_board.cell(C("J9")) == CellState.MISS
    assert result.state is State.ABORTED
    assert "connection lost" in result.reason
