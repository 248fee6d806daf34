"""
Native analysis library.

Plain construction and query functions over a manually managed object
hierarchy (Thing -> Data -> ...). Objects live until forget() is called on
them; the binding layer decides when that happens.
"""

from phonobind.native.enums import (
    ConvolveScaling,
    ConvolveSignalOutsideTimeDomain,
    Interpolation,
    SoundWindowShape,
)
from phonobind.native.things import (
    MFCC,
    Data,
    Formant,
    Function,
    Harmonicity,
    Intensity,
    Matrix,
    Pitch,
    Sampled,
    Sound,
    Spectrogram,
    Spectrum,
    Thing,
    Vector,
    forget,
    is_live,
    live_count,
)
