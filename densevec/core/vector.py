"""
Dense Vector
============

Fixed-dimension vector of float64 coordinates plus its algebra.

Every fallible operation reports through its return value and never raises
for a validated failure:

- lifecycle / mutation   -> ReturnCode
- create_vector, add, sub -> DenseVector or None
- equals                 -> bool (False on mismatch)
- norm, dot              -> float (NaN on failure)

Each failure is also handed once, at the point of detection, to the vector's
injected sink or else the process-wide one (see densevec.diagnostics).

Usage:
    from densevec import create_vector, add, dot, NormKind

    a = create_vector(3, [1.0, 2.0, 3.0])
    b = create_vector(3, [4.0, 5.0, 6.0])
    c = add(a, b)                      # [5, 7, 9], a and b untouched
    a.scale(2.0)                       # ReturnCode.SUCCESS
    a.norm(NormKind.CHEBYSHEV)         # 6.0
    dot(a, b)                          # 64.0
"""

import inspect
import math
from abc import ABC, abstractmethod
from numbers import Integral, Real
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from densevec.core.codes import Level, NormKind, ReturnCode
from densevec.diagnostics.registry import notify
from densevec.diagnostics.sink import DiagnosticSink


DEFAULT_TOLERANCE = 1e-9


def _fail(code: ReturnCode, sink: Optional[DiagnosticSink] = None, depth: int = 1) -> ReturnCode:
    """Report `code` from the frame `depth` levels above this one and return it."""
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            break
        frame = frame.f_back
    notify(code, frame, Level.WARNING, sink)
    return code


def _coerce_data(dimension: Any, data: Any) -> Optional[np.ndarray]:
    """Validated float64 copy of the first `dimension` items of `data`, or None."""
    if isinstance(dimension, bool) or not isinstance(dimension, Integral) or dimension < 1:
        return None
    if data is None:
        return None

    try:
        raw = np.asarray(data)
        # Only integer and float input; strings and objects are refused
        if raw.dtype.kind not in 'iuf':
            return None
        values = np.array(raw, dtype=np.float64)
    except (TypeError, ValueError, OverflowError):
        return None

    if values.ndim != 1 or values.shape[0] < dimension:
        return None

    values = values[:int(dimension)].copy()
    if np.isnan(values).any():
        return None
    return values


def _is_index(index: Any, dimension: int) -> bool:
    return (
        not isinstance(index, bool)
        and isinstance(index, Integral)
        and 0 <= index < dimension
    )


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def _exceeds_float(value: Any) -> bool:
    """True for a real number too large to be represented as a float (10**400)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        float(value)
    except OverflowError:
        return True
    return False


class Vector(ABC):
    """
    Capability interface of a dense vector.

    There is no public constructor: obtain instances from create_vector(),
    clone(), add() or sub().
    """

    @property
    def sink(self) -> Optional[DiagnosticSink]:
        """Sink injected at creation, None when the process-wide one applies."""
        return None

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        """False once the vector has been consumed by move_into()."""
        pass

    @property
    @abstractmethod
    def data(self) -> Optional[np.ndarray]:
        """Read-only view of the coordinates (None when consumed)."""
        pass

    @abstractmethod
    def dimension(self) -> int:
        pass

    @abstractmethod
    def size_allocated(self) -> int:
        """Bytes of coordinate storage owned by the vector."""
        pass

    @abstractmethod
    def clone(self) -> Optional["Vector"]:
        pass

    @abstractmethod
    def release(self) -> ReturnCode:
        """Drop the storage and mark the vector consumed."""
        pass

    @abstractmethod
    def get_coordinate(self, index: int) -> Tuple[ReturnCode, float]:
        pass

    @abstractmethod
    def set_coordinate(self, index: int, value: float) -> ReturnCode:
        pass

    @abstractmethod
    def replace_all(self, dimension: int, data: Sequence[float]) -> ReturnCode:
        pass

    @abstractmethod
    def scale(self, multiplier: float) -> ReturnCode:
        pass

    @abstractmethod
    def increment(self, other: "Vector") -> ReturnCode:
        pass

    @abstractmethod
    def decrement(self, other: "Vector") -> ReturnCode:
        pass

    @abstractmethod
    def norm(self, kind: Union[NormKind, str]) -> float:
        pass

    @abstractmethod
    def apply_function(self, func: Callable[[float], float]) -> ReturnCode:
        pass

    @abstractmethod
    def for_each(self, func: Callable[[float], Any]) -> ReturnCode:
        pass


def _alive(vector: Any) -> bool:
    return isinstance(vector, Vector) and vector.is_valid


def _sink_of(*vectors: Any) -> Optional[DiagnosticSink]:
    for vector in vectors:
        sink = getattr(vector, 'sink', None)
        if sink is not None:
            return sink
    return None


class DenseVector(Vector):
    """Vector backed by one owned float64 numpy array."""

    def __init__(self, data: np.ndarray, sink: Optional[DiagnosticSink] = None):
        # Callers go through create_vector(), which validates and copies
        self._data: Optional[np.ndarray] = data
        self._sink = sink

    # -- state -----------------------------------------------------------

    @property
    def sink(self) -> Optional[DiagnosticSink]:
        return self._sink

    @property
    def is_valid(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> Optional[np.ndarray]:
        if self._data is None:
            return None
        view = self._data.view()
        view.flags.writeable = False
        return view

    def dimension(self) -> int:
        return 0 if self._data is None else int(self._data.shape[0])

    def size_allocated(self) -> int:
        return 0 if self._data is None else int(self._data.nbytes)

    def to_list(self) -> List[float]:
        return [] if self._data is None else self._data.tolist()

    def __len__(self) -> int:
        return self.dimension()

    def __repr__(self) -> str:
        if self._data is None:
            return "DenseVector(<consumed>)"
        return f"DenseVector({self._data.tolist()})"

    # -- lifecycle -------------------------------------------------------

    def clone(self) -> Optional["DenseVector"]:
        if self._data is None:
            _fail(ReturnCode.INVALID_ARGUMENT, self._sink)
            return None
        return DenseVector(self._data.copy(), self._sink)

    def release(self) -> ReturnCode:
        self._data = None
        return ReturnCode.SUCCESS

    # -- coordinates -----------------------------------------------------

    def get_coordinate(self, index: int) -> Tuple[ReturnCode, float]:
        if not _is_index(index, self.dimension()):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink), math.nan
        return ReturnCode.SUCCESS, float(self._data[index])

    def set_coordinate(self, index: int, value: float) -> ReturnCode:
        if not _is_index(index, self.dimension()):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        value = _as_float(value)
        if value is None or math.isnan(value):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        self._data[index] = value
        return ReturnCode.SUCCESS

    def replace_all(self, dimension: int, data: Sequence[float]) -> ReturnCode:
        """Swap dimension and coordinates together; unchanged on failure."""
        if self._data is None:
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        values = _coerce_data(dimension, data)
        if values is None:
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        self._data = values
        return ReturnCode.SUCCESS

    # -- arithmetic ------------------------------------------------------

    def scale(self, multiplier: float) -> ReturnCode:
        """
        Multiply every coordinate by `multiplier`.

        All products are checked before any is stored, so a failed call
        leaves the vector exactly as it was.

        Returns:
            INVALID_ARGUMENT   multiplier is NaN / not a real number
            INFINITY_OVERFLOW  multiplier is infinite (or beyond float range), or a product is
            NOT_NUMBER         a product is NaN (0 * inf)
        """
        if self._data is None:
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        if _exceeds_float(multiplier):
            return _fail(ReturnCode.INFINITY_OVERFLOW, self._sink)
        multiplier = _as_float(multiplier)
        if multiplier is None or math.isnan(multiplier):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)
        if math.isinf(multiplier):
            return _fail(ReturnCode.INFINITY_OVERFLOW, self._sink)

        with np.errstate(over='ignore', invalid='ignore'):
            scaled = self._data * multiplier

        if np.isinf(scaled).any():
            return _fail(ReturnCode.INFINITY_OVERFLOW, self._sink)
        if np.isnan(scaled).any():
            return _fail(ReturnCode.NOT_NUMBER, self._sink)

        self._data[:] = scaled
        return ReturnCode.SUCCESS

    def increment(self, other: Vector) -> ReturnCode:
        return self._combine(other, np.add)

    def decrement(self, other: Vector) -> ReturnCode:
        return self._combine(other, np.subtract)

    def _combine(self, other: Vector, op: Callable) -> ReturnCode:
        # Failures are reported against increment/decrement, two frames up
        if self._data is None or not _alive(other):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink, depth=2)
        if other.dimension() != self.dimension():
            return _fail(ReturnCode.INDEX_OUT_OF_BOUND, self._sink, depth=2)

        with np.errstate(over='ignore', invalid='ignore'):
            result = op(self._data, other.data)

        if np.isnan(result).any():
            return _fail(ReturnCode.NOT_NUMBER, self._sink, depth=2)

        self._data[:] = result
        return ReturnCode.SUCCESS

    # -- norms -----------------------------------------------------------

    def norm(self, kind: Union[NormKind, str]) -> float:
        """
        Norm over raw (signed) coordinates.

        FIRST      sum of coordinates
        SECOND     sqrt of the sum of coordinates (NaN if the sum is negative)
        CHEBYSHEV  largest coordinate

        Unknown kinds and consumed vectors give NaN.
        """
        if self._data is None:
            _fail(ReturnCode.INVALID_ARGUMENT, self._sink)
            return math.nan

        try:
            kind = NormKind(kind)
        except ValueError:
            _fail(ReturnCode.INVALID_ARGUMENT, self._sink)
            return math.nan

        values = self._data.tolist()

        if kind is NormKind.CHEBYSHEV:
            return max(values)

        # Sequential accumulation, index order
        total = 0.0
        for x in values:
            total += x

        if kind is NormKind.FIRST:
            return total
        if total < 0:
            return math.nan
        return math.sqrt(total)

    # -- transforms ------------------------------------------------------

    def apply_function(self, func: Callable[[float], float]) -> ReturnCode:
        """
        Replace each coordinate x_i with func(x_i), ascending index order.

        Coordinates are written one at a time, every index is visited. A
        result that cannot be stored (NaN, or not a real number) is reported
        and that coordinate keeps its old value; the walk goes on and the
        call still returns SUCCESS. Exceptions raised by func propagate.
        """
        if self._data is None or not callable(func):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        for i in range(self.dimension()):
            value = _as_float(func(float(self._data[i])))
            if value is None:
                _fail(ReturnCode.INVALID_ARGUMENT, self._sink)
                continue
            if math.isnan(value):
                _fail(ReturnCode.NOT_NUMBER, self._sink)
                continue
            self._data[i] = value

        return ReturnCode.SUCCESS

    def for_each(self, func: Callable[[float], Any]) -> ReturnCode:
        """Call func(x_i) for each coordinate in ascending index order."""
        if self._data is None or not callable(func):
            return _fail(ReturnCode.INVALID_ARGUMENT, self._sink)

        for value in self._data.tolist():
            func(value)

        return ReturnCode.SUCCESS


# ---------------------------------------------------------------------------
# Factory and free functions
# ---------------------------------------------------------------------------

def create_vector(
    dimension: int,
    data: Sequence[float],
    sink: Optional[DiagnosticSink] = None,
) -> Optional[DenseVector]:
    """
    Create a vector from the first `dimension` items of `data`.

    Parameters
    ----------
    dimension : int
        Number of coordinates, >= 1
    data : sequence of float or np.ndarray
        Initial coordinates; at least `dimension` items, none NaN
    sink : DiagnosticSink, optional
        Sink for this vector (and its clones) instead of the registered one

    Returns
    -------
    DenseVector or None
        None when validation fails (INVALID_ARGUMENT is reported)
    """
    values = _coerce_data(dimension, data)
    if values is None:
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return None
    return DenseVector(values, sink)


def copy_into(dest: Vector, src: Vector) -> ReturnCode:
    """
    Overwrite dest's coordinates with src's.

    Copying a vector onto itself is rejected with ALLOCATION_ERROR rather
    than treated as a no-op.
    """
    sink = _sink_of(dest, src)
    if not _alive(dest) or not _alive(src):
        return _fail(ReturnCode.INVALID_ARGUMENT, sink)
    if dest is src:
        return _fail(ReturnCode.ALLOCATION_ERROR, sink)
    if dest.dimension() != src.dimension():
        return _fail(ReturnCode.INVALID_ARGUMENT, sink)

    return dest.replace_all(src.dimension(), src.data)


def move_into(dest: Vector, src: Vector) -> ReturnCode:
    """
    Transfer src's state onto dest and consume src.

    After SUCCESS, src.is_valid is False and every operation on it fails
    as if it were absent.
    """
    sink = _sink_of(dest, src)
    if not _alive(dest) or not _alive(src):
        return _fail(ReturnCode.INVALID_ARGUMENT, sink)
    if dest is src:
        return _fail(ReturnCode.ALLOCATION_ERROR, sink)
    if dest.dimension() != src.dimension():
        return _fail(ReturnCode.INVALID_ARGUMENT, sink)
    if dest.size_allocated() != src.size_allocated():
        return _fail(ReturnCode.INVALID_ARGUMENT, sink)

    rc = dest.replace_all(src.dimension(), src.data)
    if not rc.ok:
        return rc
    return src.release()


def add(a: Vector, b: Vector) -> Optional[DenseVector]:
    """New vector a + b; None on mismatched or absent operands."""
    sink = _sink_of(a, b)
    if not _alive(a) or not _alive(b) or a.dimension() != b.dimension():
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return None

    result = a.clone()
    if result is None or not result.increment(b).ok:
        return None
    return result


def sub(a: Vector, b: Vector) -> Optional[DenseVector]:
    """New vector a - b; None on mismatched or absent operands."""
    sink = _sink_of(a, b)
    if not _alive(a) or not _alive(b) or a.dimension() != b.dimension():
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return None

    result = a.clone()
    if result is None or not result.decrement(b).ok:
        return None
    return result


def dot(a: Vector, b: Vector) -> float:
    """
    Inner product of a and b.

    Returns NaN when the operands are mismatched or absent, or when the
    running sum reaches +inf.
    """
    sink = _sink_of(a, b)
    if not _alive(a) or not _alive(b) or a.dimension() != b.dimension():
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return math.nan

    result = 0.0
    for x, y in zip(a.data.tolist(), b.data.tolist()):
        result += x * y
        if result == math.inf:
            _fail(ReturnCode.INFINITY_OVERFLOW, sink)
            return math.nan
    return result


def equals(
    a: Vector,
    b: Vector,
    norm: Union[NormKind, str] = NormKind.SECOND,
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """
    True when norm(a - b) does not exceed `tolerance`.

    Mismatched or absent operands and a NaN tolerance give False. A NaN norm
    of the difference is not greater than `tolerance`, so it gives True.
    """
    sink = _sink_of(a, b)
    if not _alive(a) or not _alive(b) or a.dimension() != b.dimension():
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return False

    tolerance = _as_float(tolerance)
    if tolerance is None or math.isnan(tolerance):
        _fail(ReturnCode.INVALID_ARGUMENT, sink)
        return False

    diff = sub(a, b)
    if diff is None:
        return False

    # NaN distance is not "greater than", so it compares equal
    return not diff.norm(norm) > tolerance
