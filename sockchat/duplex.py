"""One-to-one chat: a named client and a console-driven server take turns."""

from __future__ import annotations

import socket
import sys
from collections.abc import Callable, Iterator
from itertools import chain
from typing import NamedTuple, TextIO

from sockchat.relay_client import (
    DEFAULT_PORT,
    _ClientTexts,
    _connect,
    _parse_args,
    _prompt,
    _streams,
    _text,
)

DEFAULT_HOST = "0.0.0.0"
BACKLOG = 3
USERNAME_SIZE = 32
MESSAGE_SIZE = 1024
EXIT_COMMAND = "exitapp"


class _ServerTexts(NamedTuple):
    """Console messages printed while a server sets up its listening socket."""

    created: str
    creation_failed: str
    bound: str
    bind_failed: str
    listening: str
    listen_failed: str


_SERVER_TEXTS = _ServerTexts(
    created="Socket Created Successfully.",
    creation_failed="Socket Creation Failed.",
    bound="Socket Binded Successfully.",
    bind_failed="Failed to Bind Socket.",
    listening="Listening for Clients...",
    listen_failed="Failed to Listen for Clients.",
)

_CLIENT_TEXTS = _ClientTexts(
    created="Socket Created Successfully.",
    creation_failed="Socket Creation Failed.",
    connected="Connection with Server Established.",
    connect_failed="Connection with Server Failed.",
)


def pack_field(text: str, size: int) -> bytes:
    """Encode text as a fixed-width, NUL-padded field of ``size`` bytes."""
    if size < 1:
        raise ValueError("size must be positive")
    return text.encode("utf-8")[:size].ljust(size, b"\0")


def unpack_field(data: bytes) -> str:
    """Decode a field up to its first NUL byte."""
    return _text(data)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read ``size`` bytes, or fewer if the peer closes the connection."""
    chunks: list[bytes] = []
    remaining = size
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _strip_newline(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def _listen(host: str, port: int, out: TextIO, texts: _ServerTexts) -> socket.socket | None:
    """Create, bind and listen, reporting each step; return None on failure."""
    try:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        print(texts.creation_failed, file=out)
        return None
    print(texts.created, file=out)
    steps = (
        (lambda: listener.bind((host, port)), texts.bound, texts.bind_failed),
        (lambda: listener.listen(BACKLOG), texts.listening, texts.listen_failed),
    )
    for action, done, failed in steps:
        try:
            action()
        except OSError:
            print(failed, file=out)
            listener.close()
            return None
        print(done, file=out)
    return listener


def _run_server(
    argv: list[str] | None,
    description: str,
    texts: _ServerTexts,
    serve: Callable[[socket.socket], object],
) -> int:
    """Parse arguments, set up a listener and hand it to ``serve``."""
    args = _parse_args(argv, description, DEFAULT_HOST)
    listener = _listen(args.host, args.port, sys.stdout, texts)
    if listener is None:
        return 1
    with listener:
        try:
            serve(listener)
        except OSError:
            return 1
    return 0


def serve_duplex(
    listener: socket.socket,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> str:
    """Accept one client and answer each of its messages from ``stdin``.

    Returns the client's user name once it exits or disconnects.
    """
    stdin, stdout = _streams(stdin, stdout)
    try:
        conn, _ = listener.accept()
    except OSError:
        print("Failed to Establish connection with Client.", file=stdout)
        raise
    with conn:
        print("Connection with Client Established.", file=stdout)
        username = unpack_field(_recv_exact(conn, USERNAME_SIZE))
        print(f"Recognized client as: {username}", file=stdout)
        while True:
            try:
                data = _recv_exact(conn, MESSAGE_SIZE)
            except OSError:
                break
            if not data:
                break
            message = unpack_field(data)
            print(f"{username}: {message}", file=stdout)
            if message == EXIT_COMMAND:
                print(f"{username} Has Exited the Chat...", file=stdout)
                break
            _prompt(stdout, "Server: ")
            reply = _strip_newline(stdin.readline())
            try:
                conn.sendall(pack_field(reply, MESSAGE_SIZE))
            except OSError:
                break
    return username


def _read_username(lines: Iterator[str]) -> tuple[str, str] | None:
    """Take the first word of input as the user name; return it with the rest of its line."""
    for line in lines:
        stripped = line.lstrip()
        if stripped:
            name = stripped.split(None, 1)[0]
            return name, _strip_newline(stripped[len(name):])
    return None


def run_duplex_client(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Connect, send a user name, then alternate messages with the server."""
    stdin, stdout = _streams(stdin, stdout)
    sock = _connect(host, port, stdout, _CLIENT_TEXTS)
    if sock is None:
        return 1
    with sock:
        _prompt(stdout, "Enter Username: ")
        lines = iter(stdin)
        entry = _read_username(lines)
        if entry is None:
            return 1
        name, rest = entry
        try:
            sock.sendall(pack_field(name, USERNAME_SIZE))
            for message in chain([rest], map(_strip_newline, lines)):
                _prompt(stdout, f"{name}: ")
                sock.sendall(pack_field(message, MESSAGE_SIZE))
                if message == EXIT_COMMAND:
                    print("Exiting the Chat....", file=stdout)
                    break
                data = _recv_exact(sock, MESSAGE_SIZE)
                if not data:
                    break
                print(f"Server: {unpack_field(data)}", file=stdout)
        except OSError as exc:
            print(f"Connection lost: {exc}", file=stdout)
            return 1
    return 0


def server_main(argv: list[str] | None = None) -> int:
    return _run_server(
        argv,
        "Chat with a single named client.",
        _SERVER_TEXTS,
        lambda listener: serve_duplex(listener, sys.stdin, sys.stdout),
    )


def client_main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv, "Chat with the server under a user name.", DEFAULT_HOST)
    return run_duplex_client(args.host, args.port, sys.stdin, sys.stdout)