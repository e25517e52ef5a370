import io
import socket
import threading
import time

import pytest

from sockchat.relay import ChatRelay


def wait_until(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture
def relay_log():
    out = io.StringIO()
    relay = ChatRelay("127.0.0.1", 0, 2, 5, out)
    thread = threading.Thread(target=relay.serve_forever, daemon=True)
    thread.start()
    sockets = []

    def connect():
        sock = socket.create_connection(relay.address, timeout=5)
        sockets.append(sock)
        expected = len(sockets)
        assert wait_until(lambda: out.getvalue().count("New client connected") == expected)
        return sock

    yield out, connect
    relay.shutdown()
    thread.join(5)
    relay.close()
    for sock in sockets:
        sock.close()


@pytest.fixture
def pair(relay_log):
    out, connect = relay_log
    return out, connect, connect(), connect()


def logged(out, text):
    return wait_until(lambda: text in out.getvalue())


def test_startup_messages():
    out = io.StringIO()
    with ChatRelay("127.0.0.1", 0, 2, 5, out):
        pass
    assert out.getvalue().splitlines() == [
        "Socket created successfully",
        "Bind successful",
        "Listening for connections...",
    ]


def test_message_is_broadcast_to_other_client(pair):
    out, _, a, b = pair
    a.sendall(b"hello")
    assert b.recv(1024) == b"hello"
    assert logged(out, "client_1: hello")


def test_sender_does_not_receive_own_message(pair):
    _, _, a, b = pair
    a.sendall(b"hello")
    assert b.recv(1024) == b"hello"
    b.sendall(b"x")
    assert a.recv(1024) == b"x"


def test_logout_closes_connection(relay_log):
    out, connect = relay_log
    a = connect()
    a.sendall(b"logout")
    assert logged(out, "Client 1 requested logout")
    assert a.recv(1024) == b""


def test_disconnect_frees_slot_for_next_client_number(pair):
    out, connect, a, b = pair
    a.close()
    assert logged(out, "Client 1 disconnected")
    assert "Client 1 disconnected" in out.getvalue().splitlines()
    c = connect()
    c.sendall(b"hi")
    assert logged(out, "client_3: hi")
    assert b.recv(1024) == b"hi"


def test_client_beyond_capacity_is_not_served(pair):
    _, connect, a, b = pair
    c = connect()
    a.sendall(b"hello")
    assert b.recv(1024) == b"hello"
    c.settimeout(0.3)
    with pytest.raises(socket.timeout):
        c.recv(1024)


def test_bind_failure_raises_and_reports():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
        holder.bind(("127.0.0.1", 0))
        holder.listen(1)
        out = io.StringIO()
        with pytest.raises(OSError):
            ChatRelay("127.0.0.1", holder.getsockname()[1], 2, 5, out)
    assert "Bind failed" in out.getvalue()


def test_zero_capacity_rejected():
    with pytest.raises(ValueError):
        ChatRelay("127.0.0.1", 0, 0, 5, io.StringIO())


def test_shutdown_before_serving_returns():
    relay = ChatRelay("127.0.0.1", 0, 2, 5, io.StringIO())
    relay.shutdown()
    thread = threading.Thread(target=relay.serve_forever, daemon=True)
    thread.start()
    thread.join(5)
    relay.close()
    assert not thread.is_alive()