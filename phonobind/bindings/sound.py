"""
Binding for Sound.

Sound methods return new Sounds, Spectra and Intensities; Spectrum and
Intensity are listed after Sound in the binding table.
"""

import os

from phonobind import native
from phonobind.bindings.thing import NativeClassBinding
from phonobind.native import sound


def _create(values, sampling_frequency: float = 44100.0, start_time: float = 0.0):
    """Sound(values, sampling_frequency=44100.0, start_time=0.0) or Sound(file_path)."""
    if isinstance(values, (str, os.PathLike)):
        return sound.Sound_readFromSoundFile(values)
    return sound.Sound_create(values, sampling_frequency, start_time)


class SoundBinding(NativeClassBinding):
    native_type = native.Sound

    def init(self, scope) -> None:
        self.def_init(_create, sampling_frequency=float, start_time=float)
        self.def_static("read", sound.Sound_readFromSoundFile, returns="Sound")

        self.def_property("sampling_frequency", sound.Sound_getSamplingFrequency)
        self.def_property("duration", sound.Sound_getDuration)

        self.def_method("save", sound.Sound_saveAsAudioFile)
        self.def_method("get_sampling_frequency", sound.Sound_getSamplingFrequency)
        self.def_method("get_energy", sound.Sound_getEnergy)
        self.def_method("get_root_mean_square", sound.Sound_getRootMeanSquare)

        self.def_method("convert_to_mono", sound.Sound_convertToMono, returns="Sound")
        self.def_method("resample", sound.Sound_resample, returns="Sound", new_frequency=float)
        self.def_method(
            "extract_part",
            sound.Sound_extractPart,
            returns="Sound",
            window_shape="WindowShape",
        )
        self.def_method(
            "convolve",
            sound.Sounds_convolve,
            returns="Sound",
            thee="Sound",
            scaling="AmplitudeScaling",
            signal_outside_time_domain="SignalOutsideTimeDomain",
        )
        self.def_method("to_spectrum", sound.Sound_to_Spectrum, returns="Spectrum")
        self.def_method("to_intensity", sound.Sound_to_Intensity, returns="Intensity")
