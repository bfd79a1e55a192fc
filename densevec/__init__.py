"""
densevec: dense vector numerical primitive.

Public API:
    from densevec import create_vector, add, sub, dot, equals, NormKind, ReturnCode

    v = create_vector(3, [1.0, 2.0, 3.0])
    v.scale(2.0)                      # ReturnCode.SUCCESS
    v.norm(NormKind.CHEBYSHEV)        # 6.0

Layers:
    densevec.core          Vector interface, DenseVector, factory, free functions
    densevec.diagnostics   Optional failure sinks (logging / file) + registry
    densevec.config        YAML configuration of the diagnostic sink

Failures come back as ReturnCode / None / False / NaN, never as exceptions.
"""

from densevec.core import (
    ReturnCode,
    Level,
    NormKind,
    Vector,
    DenseVector,
    create_vector,
    copy_into,
    move_into,
    add,
    sub,
    dot,
    equals,
    DEFAULT_TOLERANCE,
)
from densevec.diagnostics import (
    DiagnosticSink,
    LoggingSink,
    FileSink,
    set_diagnostic_sink,
    get_diagnostic_sink,
)

__version__ = "0.1.0"

__all__ = [
    "ReturnCode",
    "Level",
    "NormKind",
    "Vector",
    "DenseVector",
    "create_vector",
    "copy_into",
    "move_into",
    "add",
    "sub",
    "dot",
    "equals",
    "DEFAULT_TOLERANCE",
    "DiagnosticSink",
    "LoggingSink",
    "FileSink",
    "set_diagnostic_sink",
    "get_diagnostic_sink",
]
