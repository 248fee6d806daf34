"""
Native object model of the analysis library.

Responsibilities:
- The Thing hierarchy with explicit, manual lifetime (forget)
- Generic Thing/Data/Sampled/Vector query functions

Invariants:
- Every constructed Thing is live until forget() is called on it, once
- forget() drops the object's buffers; a forgotten Thing must not be used
- Sample i (0-based) of a Sampled sits at x1 + i * dx
"""

import copy
import threading

import numpy as np
from scipy.interpolate import interp1d

from phonobind.native.enums import Interpolation

_live: set[int] = set()
_live_lock = threading.Lock()


def live_count() -> int:
    """Number of Things constructed and not yet forgotten."""
    with _live_lock:
        return len(_live)


def is_live(thing) -> bool:
    with _live_lock:
        return id(thing) in _live


def _register(thing) -> None:
    with _live_lock:
        _live.add(id(thing))


def forget(thing) -> None:
    """
    Destroy a Thing.

    Raises:
        RuntimeError: If the Thing was already forgotten.
    """
    if thing is None:
        return
    with _live_lock:
        if id(thing) not in _live:
            raise RuntimeError(f"{type(thing).__name__} forgotten twice")
        _live.discard(id(thing))
    thing.destroy()


# =============================================================================
# Hierarchy
# =============================================================================


class Thing:
    """Root of the native object hierarchy."""

    def __init__(self):
        self.name: str | None = None
        _register(self)

    def destroy(self) -> None:
        """Release owned memory. Subclasses drop their buffers."""


class Data(Thing):
    """A Thing that can be copied and compared."""


class Function(Data):
    """Data defined on a domain [xmin, xmax]."""

    def __init__(self, xmin: float, xmax: float):
        super().__init__()
        self.xmin = float(xmin)
        self.xmax = float(xmax)


class Sampled(Function):
    """Function sampled at nx points: x1, x1 + dx, ..."""

    def __init__(self, xmin: float, xmax: float, nx: int, dx: float, x1: float):
        super().__init__(xmin, xmax)
        self.nx = int(nx)
        self.dx = float(dx)
        self.x1 = float(x1)


class Matrix(Sampled):
    """Sampled in x and y; values in z with shape (ny, nx)."""

    def __init__(self, xmin, xmax, nx, dx, x1, ymin, ymax, ny, dy, y1, z=None):
        super().__init__(xmin, xmax, nx, dx, x1)
        self.ymin = float(ymin)
        self.ymax = float(ymax)
        self.ny = int(ny)
        self.dy = float(dy)
        self.y1 = float(y1)
        self.z = np.zeros((self.ny, self.nx)) if z is None else np.ascontiguousarray(z, dtype=np.float64)

    def destroy(self) -> None:
        self.z = None


class Vector(Matrix):
    """Matrix whose rows are channels of one sampled signal."""


class Sound(Vector):
    """Sampled acoustic pressure, one row per channel."""


class Intensity(Vector):
    """Intensity contour in dB, a single row."""


class Harmonicity(Vector):
    """Harmonics-to-noise ratio contour in dB."""


class Spectrum(Matrix):
    """Complex spectrum: row 0 real parts, row 1 imaginary parts."""


class Spectrogram(Matrix):
    """Power spectral density over time and frequency."""


class Pitch(Sampled):
    """Pitch candidates per frame."""

    def __init__(self, xmin, xmax, nx, dx, x1, ceiling: float = 600.0):
        super().__init__(xmin, xmax, nx, dx, x1)
        self.ceiling = float(ceiling)
        self.frequencies = np.zeros(self.nx)

    def destroy(self) -> None:
        self.frequencies = None


class Formant(Sampled):
    """Formant frequencies and bandwidths per frame."""

    def __init__(self, xmin, xmax, nx, dx, x1, max_n_formants: int = 5):
        super().__init__(xmin, xmax, nx, dx, x1)
        self.max_n_formants = int(max_n_formants)
        self.frames = np.zeros((self.nx, self.max_n_formants, 2))

    def destroy(self) -> None:
        self.frames = None


class MFCC(Sampled):
    """Mel-frequency cepstral coefficients per frame."""

    def __init__(self, xmin, xmax, nx, dx, x1, max_n_coefficients: int = 12):
        super().__init__(xmin, xmax, nx, dx, x1)
        self.max_n_coefficients = int(max_n_coefficients)
        self.coefficients = np.zeros((self.nx, self.max_n_coefficients + 1))

    def destroy(self) -> None:
        self.coefficients = None


# =============================================================================
# Thing / Data Functions
# =============================================================================


def Thing_className(me) -> str:
    return type(me).__name__


def Thing_getName(me) -> str | None:
    return me.name


def Thing_setName(me, name: str | None) -> None:
    me.name = None if name is None else str(name)


def Thing_info(me) -> str:
    """Human-readable description, one item per line."""
    lines = [f"Object type: {Thing_className(me)}", f"Object name: {me.name or '<no name>'}"]
    if isinstance(me, Function):
        lines.append(f"Domain: {me.xmin:g} .. {me.xmax:g}")
    if isinstance(me, Sampled):
        lines.append(f"Number of samples: {me.nx}")
        lines.append(f"Sampling period: {me.dx:g}")
        lines.append(f"First sample at: {me.x1:g}")
    if isinstance(me, Matrix):
        lines.append(f"Number of rows: {me.ny}")
    return "\n".join(lines)


def Data_copy(me) -> Data:
    """New, independently owned deep copy."""
    clone = copy.deepcopy(me)
    _register(clone)
    return clone


def Data_equal(me, thee) -> bool:
    """Same class and same data; names are not compared."""
    if type(me) is not type(thee):
        return False
    mine, theirs = vars(me), vars(thee)
    if mine.keys() != theirs.keys():
        return False
    for key, value in mine.items():
        if key == "name":
            continue
        other = theirs[key]
        if isinstance(value, np.ndarray) or isinstance(other, np.ndarray):
            if not np.array_equal(value, other):
                return False
        elif value != other:
            return False
    return True


# =============================================================================
# Sampled / Vector Functions
# =============================================================================


def Sampled_indexToX(me, index: float) -> float:
    return me.x1 + index * me.dx


def Sampled_xToIndex(me, x: float) -> float:
    return (x - me.x1) / me.dx


def Vector_getValueAtX(me, x: float, channel: int | None = None,
                       interpolation: Interpolation = Interpolation.LINEAR) -> float:
    """
    Value at time `x`, interpolated between samples.

    Args:
        x: Position in the domain
        channel: 0-based row, or None for the mean over all rows
        interpolation: Interpolation method

    Returns:
        The value, or NaN outside the sampled range.
    """
    if channel is None:
        row = me.z.mean(axis=0)
    else:
        if not 0 <= channel < me.ny:
            raise ValueError(f"Channel {channel} out of range [0, {me.ny})")
        row = me.z[channel]

    index = Sampled_xToIndex(me, x)
    if index < -0.5 or index > me.nx - 0.5:
        return float("nan")

    if interpolation == Interpolation.NEAREST or me.nx == 1:
        return float(row[min(max(int(round(index)), 0), me.nx - 1)])
    index = min(max(index, 0.0), me.nx - 1.0)
    if interpolation == Interpolation.LINEAR:
        return float(np.interp(index, np.arange(me.nx), row))
    if interpolation == Interpolation.CUBIC:
        if me.nx < 4:
            return float(np.interp(index, np.arange(me.nx), row))
        lo = min(max(int(index) - 1, 0), me.nx - 4)
        support = np.arange(lo, lo + 4)
        return float(interp1d(support, row[support], kind="cubic")(index))
    depth = 70 if interpolation == Interpolation.SINC70 else 700
    return _sinc_interpolate(row, index, depth)


def _sinc_interpolate(row: np.ndarray, index: float, depth: int) -> float:
    """Hann-windowed sinc interpolation using `depth` samples on each side."""
    left = int(np.floor(index))
    if index == left:
        return float(row[left])
    k = np.arange(max(left - depth + 1, 0), min(left + depth, len(row) - 1) + 1)
    phase = index - k
    window = 0.5 + 0.5 * np.cos(np.pi * phase / (depth + 0.5))
    return float(np.sum(row[k] * np.sinc(phase) * window))
