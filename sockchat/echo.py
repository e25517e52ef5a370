"""Line chat where the server acknowledges every message with a fixed response."""

from __future__ import annotations

import socket
import sys
from typing import TextIO

from sockchat.duplex import DEFAULT_HOST, _run_server, _ServerTexts, unpack_field
from sockchat.relay_client import (
    DEFAULT_PORT,
    _chunks,
    _ClientTexts,
    _connect,
    _parse_args,
    _prompt,
    _streams,
)

BUFFER_SIZE = 1024
INPUT_SIZE = 100
EXIT_MESSAGE = "exit\n"
RESPONSE = "Response"

_SERVER_TEXTS = _ServerTexts(
    created="Socket Created Successfully",
    creation_failed="Socket Creation Failed",
    bound="Bind Successful",
    bind_failed="Bind Failed",
    listening="Listen Successful",
    listen_failed="Listen Failed",
)

_CLIENT_TEXTS = _ClientTexts(
    created="Socket Created Successfully",
    creation_failed="Socket Creation Failed",
    connected="Connection Successful",
    connect_failed="Connection Failed",
)


def serve_echo(listener: socket.socket, out: TextIO | None = None) -> list[str]:
    """Accept one client, answer each message with ``Response`` until ``exit``.

    Returns the messages received, in order.
    """
    out = sys.stdout if out is None else out
    try:
        conn, _ = listener.accept()
    except OSError:
        print("Accept Failed", file=out)
        raise
    print("Accept Successful", file=out)
    received: list[str] = []
    with conn:
        while True:
            try:
                data = conn.recv(BUFFER_SIZE)
            except OSError:
                break
            if not data:
                break
            message = unpack_field(data)
            received.append(message)
            print(f"Message Received: {message}", file=out)
            if message == EXIT_MESSAGE:
                break
            try:
                conn.sendall(RESPONSE.encode("ascii"))
            except OSError:
                break
    return received


def run_echo_client(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Send input lines one at a time and print each reply until ``exit``."""
    stdin, stdout = _streams(stdin, stdout)
    sock = _connect(host, port, stdout, _CLIENT_TEXTS)
    if sock is None:
        return 1
    with sock:
        try:
            for message in _chunks(stdin, INPUT_SIZE - 1):
                _prompt(stdout, "Enter message: ")
                sock.sendall(message.encode("utf-8"))
                if message == EXIT_MESSAGE:
                    break
                data = sock.recv(BUFFER_SIZE)
                if not data:
                    break
                print(f"Message Received: {unpack_field(data)}", file=stdout)
        except OSError as exc:
            print(f"Connection lost: {exc}", file=stdout)
            return 1
    return 0


def server_main(argv: list[str] | None = None) -> int:
    return _run_server(
        argv,
        "Acknowledge each message from a single client.",
        _SERVER_TEXTS,
        lambda listener: serve_echo(listener, sys.stdout),
    )


def client_main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv, "Send lines to the acknowledging server.", DEFAULT_HOST)
    return run_echo_client(args.host, args.port, sys.stdin, sys.stdout)