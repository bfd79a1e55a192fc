"""
Diagnostic Sinks
================

Write-only collaborators notified when a vector operation fails.

A sink never influences control flow: the vector layer ignores whatever
notify() returns, and formatting, file output and level filtering are the
sink's own concern. Both concrete sinks ride on the standard logging module:

- LoggingSink  forwards records to a named logger (handlers/levels are the host's)
- FileSink     owns a private FileHandler, one line per record

Usage:
    from densevec.diagnostics import LoggingSink, FileSink, set_diagnostic_sink

    set_diagnostic_sink(LoggingSink())
    set_diagnostic_sink(FileSink('vector.log', rewrite_if_exist=False))
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import FrameType
from typing import Optional

from densevec.core.codes import Level, ReturnCode


DEFAULT_LOGGER_NAME = "densevec.diagnostics"
DEFAULT_LOG_FILE = "Test.txt"


@dataclass(frozen=True)
class DiagnosticContext:
    """Where a failure was detected."""
    filename: str
    function: str
    lineno: int

    @classmethod
    def from_frame(cls, frame: FrameType) -> "DiagnosticContext":
        code = frame.f_code
        return cls(
            filename=os.path.basename(code.co_filename),
            function=code.co_name,
            lineno=frame.f_lineno,
        )

    def __str__(self) -> str:
        return f"{self.function} ({self.filename}:{self.lineno})"


def format_record(code: ReturnCode, context: Optional[DiagnosticContext] = None) -> str:
    """Render one diagnostic line: 'INVALID ARGUMENT in scale (vector.py:120)'."""
    if context is None:
        return code.message
    return f"{code.message} in {context}"


class DiagnosticSink(ABC):
    """
    Base class for diagnostic sinks.

    Subclasses must implement notify(). close() is called when the sink is
    replaced in the process-wide registry.
    """

    @abstractmethod
    def notify(
        self,
        code: ReturnCode,
        level: Level = Level.WARNING,
        context: Optional[DiagnosticContext] = None,
    ) -> ReturnCode:
        """Record one failure. The return value is informational only."""
        pass

    def close(self) -> None:
        """Release any resources held by the sink."""
        pass


class LoggingSink(DiagnosticSink):
    """Forward diagnostics to a standard-library logger."""

    def __init__(self, logger_name: str = DEFAULT_LOGGER_NAME, logger: Optional[logging.Logger] = None):
        self.logger = logger if logger is not None else logging.getLogger(logger_name)

    def notify(
        self,
        code: ReturnCode,
        level: Level = Level.WARNING,
        context: Optional[DiagnosticContext] = None,
    ) -> ReturnCode:
        self.logger.log(level.logging_level, format_record(code, context))
        return ReturnCode.SUCCESS

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.logger.name!r})"


class FileSink(LoggingSink):
    """
    Append (or rewrite) diagnostics to a plain text file.

    The logger is private to the sink: it is not registered with the logging
    manager, so host logging configuration neither filters nor duplicates it.

    Args:
        path: Target file (default 'Test.txt' in the working directory)
        rewrite_if_exist: Truncate an existing file on open instead of appending
    """

    def __init__(self, path: str = DEFAULT_LOG_FILE, rewrite_if_exist: bool = True):
        self.path = str(path)
        self.rewrite_if_exist = rewrite_if_exist

        self._handler = logging.FileHandler(
            self.path,
            mode='w' if rewrite_if_exist else 'a',
            encoding='utf-8',
        )
        self._handler.setFormatter(logging.Formatter('%(levelname)s %(message)s'))

        logger = logging.Logger(f"{DEFAULT_LOGGER_NAME}.file")
        logger.addHandler(self._handler)
        super().__init__(logger=logger)

    def notify(
        self,
        code: ReturnCode,
        level: Level = Level.WARNING,
        context: Optional[DiagnosticContext] = None,
    ) -> ReturnCode:
        if self._handler is None:
            return ReturnCode.FILE_NOT_FOUND
        return super().notify(code, level, context)

    def close(self) -> None:
        if self._handler is None:
            return
        self.logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def __repr__(self) -> str:
        return f"FileSink({self.path!r}, rewrite_if_exist={self.rewrite_if_exist})"
