"""
phonobind Binding Table

The fixed set of bound classes and enums, in table order. Order does not
matter for correctness: parents are declared before children and every
declaration precedes every initialization.

    Thing
    └── Data
        ├── Vector            (buffer)
        │   ├── Sound
        │   ├── Intensity     (read-only buffer)
        │   └── Harmonicity   (read-only buffer)
        ├── Spectrum
        ├── Spectrogram
        ├── Pitch
        ├── Formant
        └── MFCC

    Interpolation, WindowShape, AmplitudeScaling, SignalOutsideTimeDomain
"""

from phonobind.aggregate import Bindings
from phonobind.bindings.analysis import (
    FormantBinding,
    HarmonicityBinding,
    IntensityBinding,
    MFCCBinding,
    PitchBinding,
    SpectrogramBinding,
    SpectrumBinding,
)
from phonobind.bindings.enums import (
    AmplitudeScalingBinding,
    InterpolationBinding,
    SignalOutsideTimeDomainBinding,
    WindowShapeBinding,
)
from phonobind.bindings.sound import SoundBinding
from phonobind.bindings.thing import DataBinding, ThingBinding
from phonobind.bindings.vector import VectorBinding
from phonobind.native.lapack import call_routine, ilaver


CLASS_BINDINGS = [
    ThingBinding,
    DataBinding,
    VectorBinding,
    SoundBinding,
    SpectrumBinding,
    SpectrogramBinding,
    PitchBinding,
    IntensityBinding,
    HarmonicityBinding,
    FormantBinding,
    MFCCBinding,
]

ENUM_BINDINGS = [
    InterpolationBinding,
    WindowShapeBinding,
    AmplitudeScalingBinding,
    SignalOutsideTimeDomainBinding,
]


def lapack_version() -> tuple[int, int, int]:
    """(major, minor, patch) of the linear-algebra library."""
    return call_routine(ilaver, 3)


FUNCTIONS = [
    ("lapack_version", lapack_version),
]

BINDINGS = Bindings(CLASS_BINDINGS, ENUM_BINDINGS, FUNCTIONS)
