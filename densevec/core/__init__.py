"""
Core: dense vector value type and its algebra (numpy in, codes out).
"""

from .codes import ReturnCode, Level, NormKind

from .vector import (
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

__all__ = [
    # Codes
    'ReturnCode',
    'Level',
    'NormKind',
    # Vector
    'Vector',
    'DenseVector',
    'create_vector',
    'copy_into',
    'move_into',
    'add',
    'sub',
    'dot',
    'equals',
    'DEFAULT_TOLERANCE',
]
