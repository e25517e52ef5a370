"""Interactive client for the chat relay."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Callable, Iterable, Iterator
from typing import NamedTuple, TextIO

DEFAULT_HOST = "192.168.233.203"
DEFAULT_PORT = 8080
BUFFER_SIZE = 1024
MAX_INPUT = BUFFER_SIZE - 1
LOGOUT = "logout"
PROMPT = "Enter message: "
INVALID_ADDRESS = "Invalid address/ Address not supported"


class _ClientTexts(NamedTuple):
    """Console messages printed while a client opens its connection."""

    created: str
    creation_failed: str
    connected: str
    connect_failed: str


_TEXTS = _ClientTexts(
    created="Socket created successfully.",
    creation_failed="Socket creation failed: {error}",
    connected="Connected to server.",
    connect_failed="Connection failed: {error}",
)


def _describe(exc: OSError) -> str:
    return str(exc.errno) if exc.errno is not None else str(exc)


def _text(data: bytes) -> str:
    """Decode received bytes up to the first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _streams(stdin: TextIO | None, stdout: TextIO | None) -> tuple[TextIO, TextIO]:
    """Fall back to the process's standard streams where none is given."""
    return (
        sys.stdin if stdin is None else stdin,
        sys.stdout if stdout is None else stdout,
    )


def _prompt(out: TextIO, text: str) -> None:
    out.write(text)
    out.flush()


def _chunks(lines: Iterable[str], limit: int) -> Iterator[str]:
    """Split each line into pieces of at most ``limit`` characters."""
    for line in lines:
        for start in range(0, len(line), limit):
            yield line[start:start + limit]


def _messages(lines: Iterable[str]) -> Iterator[str]:
    """Split input lines into messages the size of one input buffer, without newline."""
    for line in lines:
        if not line:
            yield ""
            continue
        for piece in _chunks([line], MAX_INPUT):
            yield piece.split("\n", 1)[0]


def _parse_address(host: str) -> str:
    """Accept only a dotted IPv4 address other than the broadcast address."""
    try:
        packed = socket.inet_aton(host)
    except (OSError, ValueError):
        raise ValueError(INVALID_ADDRESS) from None
    if packed == b"\xff\xff\xff\xff":
        raise ValueError(INVALID_ADDRESS)
    return socket.inet_ntoa(packed)


def _connect(
    host: str,
    port: int,
    out: TextIO,
    texts: _ClientTexts,
    resolve: Callable[[str], str] | None = None,
) -> socket.socket | None:
    """Open a TCP connection, reporting each step; return None on failure."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        print(texts.creation_failed.format(error=_describe(exc)), file=out)
        return None
    print(texts.created, file=out)
    try:
        address = resolve(host) if resolve is not None else host
        sock.connect((address, port))
    except ValueError as exc:
        print(exc, file=out)
    except OSError as exc:
        print(texts.connect_failed.format(error=_describe(exc)), file=out)
    else:
        print(texts.connected, file=out)
        return sock
    sock.close()
    return None


def _parse_args(
    argv: list[str] | None, description: str, host: str, port: int = DEFAULT_PORT
) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--host", default=host)
    parser.add_argument("--port", type=int, default=port)
    return parser.parse_args(argv)


def chat(sock: socket.socket, lines: Iterable[str], out: TextIO) -> None:
    """Send each input line and print the server's reply until logout or disconnect."""
    for message in _messages(lines):
        _prompt(out, PROMPT)
        try:
            sock.sendall(message.encode("utf-8"))
        except OSError as exc:
            print(f"Message failed to send: {_describe(exc)}", file=out)
            break
        if message == LOGOUT:
            print("Logging out...", file=out)
            break
        try:
            data = sock.recv(MAX_INPUT)
        except OSError as exc:
            print(f"Failed to receive message: {_describe(exc)}", file=out)
            break
        if not data:
            print("Server closed the connection.", file=out)
            break
        print(f"Server: {_text(data)}", file=out)


def run_client(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Connect to the relay and chat; return the process exit status."""
    stdin, stdout = _streams(stdin, stdout)
    sock = _connect(host, port, stdout, _TEXTS, _parse_address)
    if sock is None:
        return 1
    with sock:
        chat(sock, stdin, stdout)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv, "Chat through a relay server.", DEFAULT_HOST)
    return run_client(args.host, args.port, sys.stdin, sys.stdout)