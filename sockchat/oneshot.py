"""Single-message TCP and UDP senders and receivers."""

from __future__ import annotations

import argparse
import socket
import sys

from sockchat.duplex import unpack_field

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
BACKLOG = 3
BUFFER_SIZE = 1024
TCP_MESSAGE = "TCP and UDP socket programming, now understood."
UDP_MESSAGE = "Hello"


def _payload(message: str | bytes) -> bytes:
    return message.encode("utf-8") if isinstance(message, str) else bytes(message)


def receive_tcp(listener: socket.socket) -> bytes:
    """Accept one connection and return up to one buffer of what it sends."""
    conn, _ = listener.accept()
    chunks: list[bytes] = []
    received = 0
    with conn:
        while received < BUFFER_SIZE:
            chunk = conn.recv(BUFFER_SIZE - received)
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
    return b"".join(chunks)


def send_tcp(host: str, port: int, message: str | bytes) -> int:
    """Connect, send ``message`` and close; return the number of bytes sent."""
    payload = _payload(message)
    with socket.create_connection((host, port)) as sock:
        sock.sendall(payload)
    return len(payload)


def receive_udp(sock: socket.socket) -> bytes:
    """Return one datagram received on a bound UDP socket."""
    data, _ = sock.recvfrom(BUFFER_SIZE)
    return data


def send_udp(host: str, port: int, message: str | bytes) -> int:
    """Send ``message`` as one datagram; return the number of bytes sent."""
    payload = _payload(message)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        return sock.sendto(payload, (host, port))


def _bound(kind: int, host: str, port: int) -> socket.socket | None:
    try:
        sock = socket.socket(socket.AF_INET, kind)
    except OSError:
        print("Socket Creation Failed")
        return None
    print("Socket Created Successfully")
    try:
        sock.bind((host, port))
    except OSError:
        print("Bind Failed")
        sock.close()
        return None
    print("Bind Successful")
    return sock


def _tcp_server(args: argparse.Namespace) -> int:
    listener = _bound(socket.SOCK_STREAM, args.host, args.port)
    if listener is None:
        return 1
    with listener:
        try:
            listener.listen(BACKLOG)
        except OSError:
            print("Listen Failed")
            return 1
        print("Listen Successful")
        try:
            data = receive_tcp(listener)
        except OSError:
            print("Receive Failed")
            return 1
    print("Receive Successful")
    print(f"Message Received: {unpack_field(data)}")
    return 0


def _udp_server(args: argparse.Namespace) -> int:
    sock = _bound(socket.SOCK_DGRAM, args.host, args.port)
    if sock is None:
        return 1
    with sock:
        try:
            data = receive_udp(sock)
        except OSError:
            print("Receive Failed")
            return 1
    print("Receive Successful")
    print(f"Received: {unpack_field(data)}")
    return 0


def _tcp_client(args: argparse.Namespace) -> int:
    message = args.message if args.message is not None else TCP_MESSAGE
    try:
        send_tcp(args.host, args.port, message)
    except OSError as exc:
        print(f"Send Failed: {exc}")
        return 1
    print("Message Sent")
    return 0


def _udp_client(args: argparse.Namespace) -> int:
    message = args.message if args.message is not None else UDP_MESSAGE
    try:
        send_udp(args.host, args.port, message)
    except OSError as exc:
        print(f"Send Failed: {exc}")
        return 1
    print("Send Successful")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send or receive a single message.")
    modes = parser.add_subparsers(dest="mode", required=True)
    handlers = {
        "tcp-server": _tcp_server,
        "udp-server": _udp_server,
        "tcp-client": _tcp_client,
        "udp-client": _udp_client,
    }
    for name in handlers:
        sub = modes.add_parser(name)
        sub.add_argument("--host", default=DEFAULT_HOST)
        sub.add_argument("--port", type=int, default=DEFAULT_PORT)
        if name.endswith("client"):
            sub.add_argument("--message", default=None)
    args = parser.parse_args(argv)
    return handlers[args.mode](args)