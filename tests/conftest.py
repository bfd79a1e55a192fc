"""Shared pytest fixtures for densevec tests."""

from typing import List, Optional, Tuple

import pytest

from densevec.core.codes import Level, ReturnCode
from densevec.diagnostics import DiagnosticContext, DiagnosticSink, set_diagnostic_sink


class RecordingSink(DiagnosticSink):
    """Keeps every notification in memory."""

    def __init__(self):
        self.records: List[Tuple[ReturnCode, Level, Optional[DiagnosticContext]]] = []
        self.closed = False

    def notify(self, code, level=Level.WARNING, context=None):
        self.records.append((code, level, context))
        return ReturnCode.SUCCESS

    def close(self):
        self.closed = True

    @property
    def codes(self) -> List[ReturnCode]:
        return [code for code, _, _ in self.records]

    @property
    def functions(self) -> List[str]:
        return [context.function for _, _, context in self.records if context is not None]


@pytest.fixture(autouse=True)
def _reset_sink():
    set_diagnostic_sink(None)
    yield
    set_diagnostic_sink(None)


@pytest.fixture
def sink():
    """RecordingSink registered process-wide for the test."""
    recorder = RecordingSink()
    set_diagnostic_sink(recorder)
    return recorder


@pytest.fixture
def own_sink():
    """RecordingSink that is not registered (for per-vector injection)."""
    return RecordingSink()
