"""Shared test fixtures for all test modules."""

import pytest

from core.app_logger import Logger, LogLevel, LogRecord
from core.runtime_config import RuntimeConfig
from network import Transport, TransportError


class RecordingSink:
    """Sink collecting every emitted LogRecord."""

    def __init__(self) -> None:
        self.records: list[LogRecord] = []

    def __call__(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: int = None) -> list[str]:
        return [r.message for r in self.records if level is None or r.level == level]

    def lines(self) -> list[str]:
        return [r.format() for r in self.records]


class FakeTransport(Transport):
    """Transport that fails a configurable number of times before opening."""

    def __init__(self, failures: int = 0, close_error: Exception = None) -> None:
        self.failures = failures
        self.close_error = close_error
        self.open_calls: list[tuple] = []
        self.close_calls = 0
        self.opened = False

    def open(self, host: str, port: int, timeout: float) -> None:
        self.open_calls.append((host, port, timeout))
        if len(self.open_calls) <= self.failures:
            raise TransportError(f"refused ({len(self.open_calls)})")
        self.opened = True

    def close(self) -> None:
        self.close_calls += 1
        self.opened = False
        if self.close_error is not None:
            raise self.close_error

    @property
    def is_open(self) -> bool:
        return self.opened


@pytest.fixture
def sink() -> RecordingSink:
    """Provide a list-backed log sink."""
    return RecordingSink()


@pytest.fixture
def app_logger(sink: RecordingSink) -> Logger:
    """Logger at DEBUG writing into the recording sink."""
    return Logger(LogLevel.DEBUG, sink=sink)


@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """Default configuration snapshot."""
    return RuntimeConfig()


@pytest.fixture
def fake_transport_factory():
    """Factory for FakeTransport instances."""
    return FakeTransport
