from __future__ import annotations

import logging
import socket
import time
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
RECV_CHUNK = 4096
MAX_LINE = 4096


class ConnectionClosed(ConnectionError):
    pass


class ReadTimeout(TimeoutError):
    pass


# Newline-delimited UTF-8 text over TCP


class LineChannel:
    """Line reader/writer over a connected stream socket."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self._buf = bytearray()
        self._closed = False

    def _pop_line(self) -> Optional[str]:
        idx = self._buf.find(b"\n")
        if idx < 0:
            return None
        raw = bytes(self._buf[:idx])
        del self._buf[: idx + 1]
        return raw.decode(ENCODING, errors="replace").rstrip("\r")

    def read_line(self, timeout: float) -> str:
        deadline = time.monotonic() + timeout
        while True:
            line = self._pop_line()
            if line is not None:
                return line
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ReadTimeout(f"no line within {timeout:.1f}s")
            self.sock.settimeout(remaining)
            try:
                chunk = self.sock.recv(RECV_CHUNK)
            except socket.timeout:
                raise ReadTimeout(f"no line within {timeout:.1f}s") from None
            except OSError as exc:
                raise ConnectionClosed(str(exc)) from exc
            if not chunk:
                raise ConnectionClosed("peer closed the connection")
            self._buf.extend(chunk)
            if len(self._buf) > MAX_LINE and b"\n" not in self._buf:
                raise ConnectionClosed(f"no line break within {MAX_LINE} bytes")

    def write_line(self, text: str) -> None:
        data = (text + "\n").encode(ENCODING)
        try:
            self.sock.settimeout(None)
            self.sock.sendall(data)
        except OSError as exc:
            raise ConnectionClosed(str(exc)) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.sock.close()
        except OSError:
            logger.debug("error while closing socket", exc_info=True)


def open_server(bind: str, port: int) -> Tuple[socket.socket, socket.socket, Tuple[str, int]]:
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind((bind, port))
    srv.listen(1)
    conn, addr = srv.accept()
    return srv, conn, addr


def open_client(host: str, port: int) -> socket.socket:
    return socket.create_connection((host, port))
