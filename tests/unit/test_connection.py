"""
Unit tests for Connection.
"""

import socket

import pytest

from statichttpd.core.connection import Connection, ConnectionState, RequestBuffer


class FakeSocket:
    """Records calls instead of touching the network."""

    def __init__(self, recv_data: bytes = b"", send_error: OSError = None):
        self.recv_data = recv_data
        self.send_error = send_error
        self.sent = b""
        self.recv_calls = 0
        self.close_calls = 0
        self.shutdown_calls = 0
        self.timeout = "unset"

    def settimeout(self, timeout):
        self.timeout = timeout

    def recv(self, size):
        self.recv_calls += 1
        data, self.recv_data = self.recv_data[:size], self.recv_data[size:]
        return data

    def sendall(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def shutdown(self, how):
        self.shutdown_calls += 1

    def close(self):
        self.close_calls += 1


@pytest.fixture
def socket_pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


class TestConnection:
    """Tests for Connection."""

    def test_client_socket_has_no_timeout(self):
        sock = FakeSocket()
        Connection(socket=sock, address=("127.0.0.1", 50000))

        assert sock.timeout is None

    def test_address_properties(self):
        conn = Connection(socket=FakeSocket(), address=("127.0.0.1", 50000))

        assert conn.client_ip == "127.0.0.1"
        assert conn.client_port == 50000
        assert conn.state == ConnectionState.NEW
        assert len(conn.id) == 8

    def test_read_request_single_recv(self):
        sock = FakeSocket(recv_data=b"GET / HTTP/1.1\r\n\r\n" + b"x" * 2000)
        conn = Connection(socket=sock, address=("127.0.0.1", 50000))
        buffer = RequestBuffer(capacity=1024)

        conn.read_request(buffer)

        assert sock.recv_calls == 1
        assert len(buffer) == 1024
        assert buffer.is_full
        assert conn.state == ConnectionState.PROCESSING

    def test_read_request_real_socket(self, socket_pair):
        a, b = socket_pair
        b.sendall(b"GET /about HTTP/1.1\r\n\r\n")
        conn = Connection(socket=a, address=("127.0.0.1", 50000))
        buffer = RequestBuffer()

        conn.read_request(buffer)

        assert buffer.data == b"GET /about HTTP/1.1\r\n\r\n"

    def test_send_response(self, socket_pair):
        a, b = socket_pair
        conn = Connection(socket=a, address=("127.0.0.1", 50000))

        assert conn.send_response(b"HTTP/1.1 404 Not Found\r\n\n") is True
        assert b.recv(1024) == b"HTTP/1.1 404 Not Found\r\n\n"
        assert conn.state == ConnectionState.WRITING

    def test_send_failure_returns_false(self):
        sock = FakeSocket(send_error=BrokenPipeError("peer gone"))
        conn = Connection(socket=sock, address=("127.0.0.1", 50000))

        assert conn.send_response(b"data") is False

    def test_close_exactly_once(self):
        sock = FakeSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 50000))

        conn.close()
        conn.close()

        assert sock.close_calls == 1
        assert sock.shutdown_calls == 1
        assert conn.closed

    def test_context_manager_closes(self):
        sock = FakeSocket()

        with Connection(socket=sock, address=("127.0.0.1", 50000)) as conn:
            assert not conn.closed

        assert conn.closed
        assert sock.close_calls == 1

    def test_context_manager_closes_on_error(self):
        sock = FakeSocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 50000))

        with pytest.raises(ConnectionResetError):
            with conn:
                raise ConnectionResetError("reset")

        assert conn.closed
        assert sock.close_calls == 1

    def test_close_drains_unread_bytes(self):
        sock = FakeSocket(recv_data=b"y" * 10000)
        conn = Connection(socket=sock, address=("127.0.0.1", 50000))

        conn.close()

        assert sock.recv_data == b""

    def test_close_sends_eof_to_peer(self, socket_pair):
        a, b = socket_pair
        conn = Connection(socket=a, address=("127.0.0.1", 50000))
        conn.send_response(b"body")

        conn.close()

        assert b.recv(1024) == b"body"
        assert b.recv(1024) == b""
