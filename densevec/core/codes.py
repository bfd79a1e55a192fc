"""
Result Codes
============

Outcome taxonomy shared by every vector operation and diagnostic sink.

Vector operations never raise for validated failures. They hand back one of
three channels and the caller branches on whichever applies:

- ReturnCode   status of mutating / lifecycle operations
- None / False absent result of add, sub, create_vector, equals
- NaN          numeric result channel of norm and dot
"""

import logging
from enum import Enum


class ReturnCode(str, Enum):
    """
    Status returned by fallible vector operations.

    The full taxonomy is kept for sinks and callers that share it, but the
    vector layer never returns MISMATCHING_DIMENSIONS, NULLPTR_ERROR,
    VECTOR_NOT_FOUND or UNKNOWN. FILE_NOT_FOUND comes only from a closed
    FileSink.
    """
    SUCCESS = "success"
    INVALID_ARGUMENT = "invalid_argument"
    MISMATCHING_DIMENSIONS = "mismatching_dimensions"
    INDEX_OUT_OF_BOUND = "index_out_of_bound"      # also: dimension mismatch in increment/decrement
    NULLPTR_ERROR = "nullptr_error"
    ALLOCATION_ERROR = "allocation_error"          # also: copy_into / move_into onto itself
    FILE_NOT_FOUND = "file_not_found"
    VECTOR_NOT_FOUND = "vector_not_found"
    INFINITY_OVERFLOW = "infinity_overflow"
    NOT_NUMBER = "not_number"
    UNKNOWN = "unknown"

    @property
    def message(self) -> str:
        """Upper-case label used in diagnostic records, e.g. 'INVALID ARGUMENT'."""
        return self.value.replace("_", " ").upper()

    @property
    def ok(self) -> bool:
        return self is ReturnCode.SUCCESS


class Level(str, Enum):
    """Severity attached to a diagnostic record."""
    INFO = "info"
    WARNING = "warning"
    SEVERE = "severe"

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    Level.INFO: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.SEVERE: logging.ERROR,
}


class NormKind(str, Enum):
    """Norms understood by Vector.norm."""
    FIRST = "first"            # sum of raw coordinates
    SECOND = "second"          # sqrt of the sum of raw coordinates
    CHEBYSHEV = "chebyshev"    # max raw coordinate
