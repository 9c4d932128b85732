"""Tests for the TCP transport."""

import socket

import pytest

from network import TcpTransport, Transport, TransportError


class FakeSocket:
    def __init__(self) -> None:
        self.options = []
        self.closed = False

    def setsockopt(self, level, option, value) -> None:
        self.options.append((level, option, value))

    def close(self) -> None:
        self.closed = True


class TestTcpTransport:
    """Tests for TcpTransport.open() and close()."""

    def test_is_a_transport(self) -> None:
        assert isinstance(TcpTransport(), Transport)

    def test_open_connects_with_timeout_and_keepalive(self, monkeypatch) -> None:
        calls = []
        fake = FakeSocket()

        def create_connection(address, timeout):
            calls.append((address, timeout))
            return fake

        monkeypatch.setattr(socket, "create_connection", create_connection)
        transport = TcpTransport(keep_alive=True)

        transport.open("new.example.com", 8080, 5.0)

        assert calls == [(("new.example.com", 8080), 5.0)]
        assert (socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1) in fake.options
        assert transport.is_open

    def test_keepalive_disabled_sets_no_option(self, monkeypatch) -> None:
        fake = FakeSocket()
        monkeypatch.setattr(socket, "create_connection", lambda address, timeout: fake)
        transport = TcpTransport(keep_alive=False)

        transport.open("h", 1, 1.0)

        assert fake.options == []

    def test_open_failure_raises_transport_error(self, monkeypatch) -> None:
        def refuse(address, timeout):
            raise ConnectionRefusedError("refused")

        monkeypatch.setattr(socket, "create_connection", refuse)

        with pytest.raises(TransportError) as exc_info:
            TcpTransport().open("h", 1, 1.0)

        assert exc_info.value.details["error_type"] == "ConnectionRefusedError"
        assert not TcpTransport().is_open

    def test_close_is_idempotent(self, monkeypatch) -> None:
        fake = FakeSocket()
        monkeypatch.setattr(socket, "create_connection", lambda address, timeout: fake)
        transport = TcpTransport()
        transport.open("h", 1, 1.0)

        transport.close()
        transport.close()

        assert fake.closed
        assert not transport.is_open

    def test_keepalive_failure_closes_socket(self, monkeypatch) -> None:
        fake = FakeSocket()

        def reject(level, option, value):
            raise OSError("option not supported")

        fake.setsockopt = reject
        monkeypatch.setattr(socket, "create_connection", lambda address, timeout: fake)
        transport = TcpTransport(keep_alive=True)

        with pytest.raises(TransportError) as exc_info:
            transport.open("h", 1, 1.0)

        assert fake.closed
        assert not transport.is_open
        assert exc_info.value.details["error_type"] == "OSError"
