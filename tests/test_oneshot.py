import socket
import struct
import threading

import pytest

from sockchat.oneshot import (
    BUFFER_SIZE,
    main,
    receive_tcp,
    receive_udp,
    send_tcp,
    send_udp,
)

ARRAY = (25, 128, 45, 232, 74, 11)


@pytest.fixture
def listener():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen(3)
        yield sock


@pytest.fixture
def udp_socket():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.settimeout(5)
        yield sock


def _start(func, *args):
    result = {}

    def target():
        result["value"] = func(*args)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread, result


def test_tcp_carries_integer_array(listener):
    port = listener.getsockname()[1]
    thread, result = _start(receive_tcp, listener)
    payload = struct.pack("<6i", *ARRAY)
    sent = send_tcp("127.0.0.1", port, payload)
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert sent == len(payload)
    assert struct.unpack("<6i", result["value"]) == ARRAY


def test_tcp_text_message(listener):
    port = listener.getsockname()[1]
    thread, result = _start(receive_tcp, listener)
    sent = send_tcp("127.0.0.1", port, "hello over tcp")
    thread.join(timeout=5)
    assert sent == len("hello over tcp")
    assert result["value"] == b"hello over tcp"


def test_tcp_receive_is_limited_to_one_buffer(listener):
    port = listener.getsockname()[1]
    thread, result = _start(receive_tcp, listener)
    payload = bytes(range(256)) * 8
    send_tcp("127.0.0.1", port, payload)
    thread.join(timeout=5)
    assert result["value"] == payload[:BUFFER_SIZE]


def test_udp_round_trip(udp_socket):
    port = udp_socket.getsockname()[1]
    sent = send_udp("127.0.0.1", port, "Hello")
    assert sent == len("Hello")
    assert receive_udp(udp_socket) == b"Hello"


def test_udp_carries_integer_array(udp_socket):
    port = udp_socket.getsockname()[1]
    send_udp("127.0.0.1", port, struct.pack("<6i", *ARRAY))
    assert struct.unpack("<6i", receive_udp(udp_socket)) == ARRAY


def test_send_tcp_refused():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as idle:
        idle.bind(("127.0.0.1", 0))
        port = idle.getsockname()[1]
        with pytest.raises(OSError):
            send_tcp("127.0.0.1", port, "nobody listens")


def test_main_udp_client(udp_socket, capsys):
    port = udp_socket.getsockname()[1]
    status = main(["udp-client", "--host", "127.0.0.1", "--port", str(port), "--message", "ping"])
    assert status == 0
    assert receive_udp(udp_socket) == b"ping"
    assert "Send Successful" in capsys.readouterr().out


def test_main_tcp_client_refused(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as idle:
        idle.bind(("127.0.0.1", 0))
        port = idle.getsockname()[1]
        status = main(["tcp-client", "--host", "127.0.0.1", "--port", str(port)])
    assert status == 1
    assert "Send Failed" in capsys.readouterr().out


def test_main_tcp_client_default_message(listener, capsys):
    port = listener.getsockname()[1]
    thread, result = _start(receive_tcp, listener)
    status = main(["tcp-client", "--host", "127.0.0.1", "--port", str(port)])
    thread.join(timeout=5)
    assert status == 0
    assert result["value"] == b"TCP and UDP socket programming, now understood."
    assert "Message Sent" in capsys.readouterr().out