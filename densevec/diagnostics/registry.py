"""
Process-wide diagnostic sink registry.

One optional sink shared by every vector that was not created with its own.
The registry owns the registered sink: replacing it closes the previous one.
"""

import logging
from types import FrameType
from typing import Optional

from densevec.core.codes import Level, ReturnCode
from .sink import DiagnosticContext, DiagnosticSink

logger = logging.getLogger(__name__)

_sink: Optional[DiagnosticSink] = None


def set_diagnostic_sink(sink: Optional[DiagnosticSink]) -> ReturnCode:
    """
    Register the process-wide sink, closing the one it replaces.

    Passing None silences notifications; failures are then visible only
    through returned codes.
    """
    global _sink
    previous, _sink = _sink, sink
    if previous is not None and previous is not sink:
        previous.close()
    return ReturnCode.SUCCESS


def get_diagnostic_sink() -> Optional[DiagnosticSink]:
    return _sink


def notify(
    code: ReturnCode,
    frame: Optional[FrameType] = None,
    level: Level = Level.WARNING,
    sink: Optional[DiagnosticSink] = None,
) -> None:
    """
    Fire-and-forget delivery of one failure record.

    Args:
        code: Failure being reported
        frame: Frame where the failure was detected (becomes the context)
        level: Severity
        sink: Injected sink; falls back to the registered one when None
    """
    target = sink if sink is not None else _sink
    if target is None:
        return

    context = DiagnosticContext.from_frame(frame) if frame is not None else None
    try:
        target.notify(code, level, context)
    except Exception:
        # Reporting must not alter the outcome of the failing operation
        logger.exception("Diagnostic sink %r failed while reporting %s", target, code.message)
