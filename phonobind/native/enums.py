"""
Native enumerations of the analysis library.

Ordinals are part of the native API and must not be renumbered.
"""

from enum import IntEnum


class Interpolation(IntEnum):
    """Interpolation method for reading a sampled function between samples."""
    NEAREST = 0
    LINEAR = 1
    CUBIC = 2
    SINC70 = 3
    SINC700 = 4


class SoundWindowShape(IntEnum):
    """Window applied when extracting part of a sound."""
    RECTANGULAR = 0
    TRIANGULAR = 1
    PARABOLIC = 2
    HANNING = 3
    HAMMING = 4
    GAUSSIAN1 = 5
    GAUSSIAN2 = 6
    GAUSSIAN3 = 7
    GAUSSIAN4 = 8
    GAUSSIAN5 = 9
    KAISER1 = 10
    KAISER2 = 11


class ConvolveScaling(IntEnum):
    """Amplitude scaling of a convolution or cross-correlation result."""
    INTEGRAL = 0
    SUM = 1
    NORMALIZE = 2
    PEAK_099 = 3


class ConvolveSignalOutsideTimeDomain(IntEnum):
    """How a signal is extended beyond its time domain."""
    ZERO = 0
    SIMILAR = 1
