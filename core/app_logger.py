"""
Leveled application logger.

Records below the logger's current level are dropped. Emitted records are
rendered as ``[<ISO timestamp>] [<LEVEL>] <message> <payload>`` and handed to
a sink. The default sink forwards the rendered line to the standard
``logging`` hierarchy so that handlers configured by ``setup_logging`` apply.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Optional, Union


class LogLevel(IntEnum):
    """Application log levels, compared by ordinal"""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @classmethod
    def name_for(cls, value: int) -> str:
        """Symbolic name for a level value, UNKNOWN when out of range"""
        try:
            return cls(value).name
        except ValueError:
            return "UNKNOWN"


# Mapping onto standard library levels for the default sink
STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class LogRecord:
    """A single emitted log record"""
    timestamp: str
    level: int
    level_name: str
    message: str
    data: Any = None

    @property
    def payload(self) -> str:
        """Payload rendered as text, empty when absent"""
        if self.data is None:
            return ""
        if isinstance(self.data, (dict, list, tuple)):
            return json.dumps(self.data, default=str, ensure_ascii=False)
        return str(self.data)

    def format(self) -> str:
        return f"[{self.timestamp}] [{self.level_name}] {self.message} {self.payload}".rstrip()


Sink = Callable[[LogRecord], None]


class StdlibSink:
    """Sink that writes rendered records to a standard library logger"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("client_runtime.app")

    def __call__(self, record: LogRecord):
        level = STDLIB_LEVELS.get(record.level, logging.ERROR)
        self.logger.log(level, record.format(), extra={
            "extra_data": {"app_level": record.level_name}
        })


class Logger:
    """Leveled logger filtering on current_level"""

    def __init__(self, level: Union[LogLevel, int] = LogLevel.INFO, sink: Optional[Sink] = None):
        self.current_level = level
        self.sink = sink or StdlibSink()

    def log(self, level: Union[LogLevel, int], message: str, data: Any = None) -> Optional[LogRecord]:
        """
        Emit a record if level is at or above the current level

        Args:
            level: Record level
            message: Message text
            data: Optional payload rendered after the message

        Returns:
            The emitted record, or None if it was filtered out
        """
        if int(level) < int(self.current_level):
            return None

        record = LogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            level=int(level),
            level_name=LogLevel.name_for(level),
            message=message,
            data=data
        )
        self.sink(record)
        return record

    def debug(self, message: str, data: Any = None) -> Optional[LogRecord]:
        return self.log(LogLevel.DEBUG, message, data)

    def info(self, message: str, data: Any = None) -> Optional[LogRecord]:
        return self.log(LogLevel.INFO, message, data)

    def warn(self, message: str, data: Any = None) -> Optional[LogRecord]:
        return self.log(LogLevel.WARN, message, data)

    warning = warn

    def error(self, message: str, data: Any = None) -> Optional[LogRecord]:
        return self.log(LogLevel.ERROR, message, data)
