"""
Diagnostics

Optional failure reporting for the vector layer.

Exports:
    - DiagnosticSink: Base class for sinks
    - LoggingSink: Sink forwarding to a standard-library logger
    - FileSink: Sink writing one line per failure to a file
    - DiagnosticContext: Location (file, function, line) of a failure
    - set_diagnostic_sink / get_diagnostic_sink: Process-wide registration
"""

from .sink import (
    DiagnosticContext,
    DiagnosticSink,
    LoggingSink,
    FileSink,
    format_record,
    DEFAULT_LOGGER_NAME,
    DEFAULT_LOG_FILE,
)

from .registry import (
    set_diagnostic_sink,
    get_diagnostic_sink,
    notify,
)

__all__ = [
    # Sinks
    'DiagnosticContext',
    'DiagnosticSink',
    'LoggingSink',
    'FileSink',
    'format_record',
    'DEFAULT_LOGGER_NAME',
    'DEFAULT_LOG_FILE',
    # Registry
    'set_diagnostic_sink',
    'get_diagnostic_sink',
    'notify',
]
