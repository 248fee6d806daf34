"""
Bindings for analysis results.

Most analysis types expose only their inherited Thing/Data surface. The
intermediate native classes (Matrix, Sampled) are not bound, so their
children name Data as parent explicitly.
"""

from phonobind import native
from phonobind.bindings.thing import NativeClassBinding
from phonobind.descriptor import BufferSpec
from phonobind.native import sound


def _values(me):
    return me.z


class SpectrumBinding(NativeClassBinding):
    native_type = native.Spectrum
    parent = native.Data

    def init(self, scope) -> None:
        self.def_method("to_sound", sound.Spectrum_to_Sound, returns="Sound")


class SpectrogramBinding(NativeClassBinding):
    native_type = native.Spectrogram
    parent = native.Data


class PitchBinding(NativeClassBinding):
    native_type = native.Pitch
    parent = native.Data


class IntensityBinding(NativeClassBinding):
    native_type = native.Intensity
    # Analysis output is a snapshot; numpy views of it are read-only
    buffer = BufferSpec(_values, readonly=True)


class HarmonicityBinding(NativeClassBinding):
    native_type = native.Harmonicity
    buffer = BufferSpec(_values, readonly=True)


class FormantBinding(NativeClassBinding):
    native_type = native.Formant
    parent = native.Data


class MFCCBinding(NativeClassBinding):
    native_type = native.MFCC
    parent = native.Data
