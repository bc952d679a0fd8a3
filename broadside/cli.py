from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .battleship.game import Board, LayoutLoadError
from .battleship.shots import ShotSequencer
from .net.net import LineChannel, open_client, open_server
from .session import MAX_RETRIES, READ_TIMEOUT, Role, Session, TurnProtocol
from .ui import announce, show_layout, show_result

DEFAULT_PORT = 5000

EXIT_OK = 0
EXIT_SETUP_FAILED = 1
EXIT_ABORTED = 2


def port_number(text: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a port number: {text!r}") from None
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return value


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Broadside - automatic two-player battleships over TCP")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--map", required=True, help="Fleet layout file, one row per line, '#' marks a ship")
    common.add_argument("--port", type=port_number, default=DEFAULT_PORT, help="TCP port")
    common.add_argument("--timeout", type=positive_float, default=READ_TIMEOUT, help="Seconds to wait for each reply")
    common.add_argument("--retries", type=positive_int, default=MAX_RETRIES, help="Failed reads before giving up")
    common.add_argument("--seed", type=int, default=None, help="Seed for the shot order")
    common.add_argument("--verbose", action="store_true", help="Log debug details")
    common.add_argument("--no-color", dest="color", action="store_false", help="Plain text output")
    common.add_argument("--gui", action="store_true", help="Show the final boards in a window")

    subparsers = parser.add_subparsers(dest="mode", required=True)

    host_p = subparsers.add_parser("host", parents=[common], help="Wait for the opponent to connect")
    host_p.add_argument("--bind", type=str, default="0.0.0.0", help="Bind address")

    join_p = subparsers.add_parser("join", parents=[common], help="Connect to a waiting opponent")
    join_p.add_argument("--address", type=str, required=True, help="Host IP or name")

    return parser


def run(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    try:
        own = Board.from_layout(args.map)
    except LayoutLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_SETUP_FAILED
    show_layout(own, args.color)

    srv = None
    try:
        if args.mode == "host":
            announce(f"Waiting for a player on port {args.port}...", args.color)
            srv, conn, addr = open_server(args.bind, args.port)
            announce(f"Player connected from {addr[0]}:{addr[1]}", args.color)
            role = Role.LISTENER
        else:
            announce(f"Connecting to {args.address}:{args.port} ...", args.color)
            conn = open_client(args.address, args.port)
            announce("Connected.", args.color)
            role = Role.CONNECTOR
    except OSError as exc:
        print(f"error: cannot establish connection: {exc}", file=sys.stderr)
        if srv is not None:
            srv.close()
        return EXIT_SETUP_FAILED

    channel = LineChannel(conn)
    session = Session(own, Board.enemy(), ShotSequencer(seed=args.seed), role)
    try:
        result = TurnProtocol(channel, session, args.timeout, args.retries).run()
    finally:
        channel.close()
        if srv is not None:
            srv.close()

    show_result(result, session.own_board, session.enemy_board, args.color)
    if args.gui:
        from .gui import show_result_window
        show_result_window(result, session.own_board, session.enemy_board)
    return EXIT_ABORTED if result.aborted else EXIT_OK


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    sys.exit(run(args))
