"""Log sinks used while loading nodesets."""

from __future__ import annotations

import enum
import sys
from typing import Callable, Optional, TextIO


class LogLevel(enum.IntEnum):
    DEBUG = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Logger:
    """Forwards every message with its level to a callable."""

    def __init__(self, sink: Callable[[LogLevel, str], None]) -> None:
        self._sink = sink

    def log(self, level: LogLevel, message: str) -> None:
        self._sink(LogLevel(level), message)


class PrintLogger(Logger):
    """Writes messages as text lines, to standard output by default."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(self._write)
        self._stream = stream

    def _write(self, level: LogLevel, message: str) -> None:
        out = self._stream if self._stream is not None else sys.stdout
        print(f"NODESETLOADER: {level.label} : {message}", file=out)

    def log(self, level: LogLevel, message: str) -> None:
        self._write(LogLevel(level), message)