"""Multi-client chat relay that forwards each message to every other client."""

from __future__ import annotations

import argparse
import selectors
import socket
import sys
import threading
from dataclasses import dataclass
from typing import TextIO

DEFAULT_HOST = "192.168.233.203"
DEFAULT_PORT = 8080
DEFAULT_BACKLOG = 5
DEFAULT_MAX_CLIENTS = 2
BUFFER_SIZE = 1024
LOGOUT = "logout"


@dataclass
class _Client:
    sock: socket.socket
    number: int


def _describe(exc: OSError) -> str:
    return str(exc.errno) if exc.errno is not None else str(exc)


def _text(data: bytes) -> str:
    """Decode received bytes the way a C string would see them: up to the first NUL."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


class ChatRelay:
    """A select-driven TCP relay with a fixed number of client slots.

    Every message from a client is logged and forwarded to all other
    connected clients. A client sending ``logout`` is disconnected.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        max_clients: int = DEFAULT_MAX_CLIENTS,
        backlog: int = DEFAULT_BACKLOG,
        out: TextIO | None = None,
    ) -> None:
        if max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        self._out = out if out is not None else sys.stdout
        self.max_clients = max_clients
        self._slots: list[_Client | None] = [None] * max_clients
        self._unassigned: list[socket.socket] = []
        self._client_count = 0
        self._stop = threading.Event()
        self._closed = False

        try:
            self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            self._say(f"Socket creation failed: {_describe(exc)}")
            raise
        self._say("Socket created successfully")

        try:
            self._server.bind((host, port))
        except OSError as exc:
            self._say(f"Bind failed: {_describe(exc)}")
            self._server.close()
            raise
        self._say("Bind successful")

        try:
            self._server.listen(backlog)
        except OSError as exc:
            self._say(f"Listening failed: {_describe(exc)}")
            self._server.close()
            raise
        self._say("Listening for connections...")

        self.address: tuple[str, int] = self._server.getsockname()
        self._wake_recv, self._wake_send = socket.socketpair()
        self._wake_recv.setblocking(False)
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._server, selectors.EVENT_READ)
        self._selector.register(self._wake_recv, selectors.EVENT_READ)

    def __enter__(self) -> ChatRelay:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _say(self, message: str) -> None:
        print(message, file=self._out, flush=True)

    def serve_forever(self) -> None:
        """Relay messages until :meth:`shutdown` is called or select fails."""
        while not self._stop.is_set():
            try:
                events = self._selector.select()
            except OSError as exc:
                self._say(f"Select error: {_describe(exc)}")
                break
            ready = {key.fileobj for key, _ in events}
            if self._wake_recv in ready:
                self._drain_wakeups()
                if self._stop.is_set():
                    break
            if self._server in ready:
                self._accept()
            for index, client in enumerate(self._slots):
                if client is not None and client.sock in ready:
                    self._handle(index)

    def _drain_wakeups(self) -> None:
        try:
            while self._wake_recv.recv(64):
                pass
        except (BlockingIOError, OSError):
            pass

    def _accept(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError as exc:
            self._say(f"Accept failed: {_describe(exc)}")
            return
        self._say(f"New client connected on socket {conn.fileno()}")
        for index, slot in enumerate(self._slots):
            if slot is None:
                self._client_count += 1
                self._slots[index] = _Client(conn, self._client_count)
                self._selector.register(conn, selectors.EVENT_READ)
                return
        # No free slot: the connection stays open but is never serviced.
        self._unassigned.append(conn)

    def _handle(self, index: int) -> None:
        client = self._slots[index]
        assert client is not None
        try:
            data: bytes | None = client.sock.recv(BUFFER_SIZE)
        except OSError:
            data = None
        if not data:
            if data == b"":
                self._say(f"Client {client.number} disconnected")
            self._drop(index)
            return
        message = _text(data)
        self._say(f"client_{client.number}: {message}")
        if message == LOGOUT:
            self._say(f"Client {client.number} requested logout")
            self._drop(index)
            return
        for other_index, other in enumerate(self._slots):
            if other_index != index and other is not None:
                try:
                    other.sock.sendall(data)
                except OSError:
                    pass

    def _drop(self, index: int) -> None:
        client = self._slots[index]
        if client is None:
            return
        try:
            self._selector.unregister(client.sock)
        except (KeyError, ValueError):
            pass
        client.sock.close()
        self._slots[index] = None

    def shutdown(self) -> None:
        """Ask a running :meth:`serve_forever` to return."""
        self._stop.set()
        try:
            self._wake_send.send(b"\0")
        except OSError:
            pass

    def close(self) -> None:
        """Close the listening socket and every client connection."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        for index, _ in enumerate(self._slots):
            self._drop(index)
        for conn in self._unassigned:
            conn.close()
        self._unassigned.clear()
        self._selector.close()
        self._server.close()
        self._wake_recv.close()
        self._wake_send.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Relay chat messages between clients.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--max-clients", type=int, default=DEFAULT_MAX_CLIENTS)
    parser.add_argument("--backlog", type=int, default=DEFAULT_BACKLOG)
    args = parser.parse_args(argv)
    try:
        relay = ChatRelay(args.host, args.port, args.max_clients, args.backlog, sys.stdout)
    except OSError:
        return 1
    with relay:
        try:
            relay.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0