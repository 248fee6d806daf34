"""
Enum bindings. Host names differ from some native enum names.
"""

from phonobind import native
from phonobind.enums import EnumBinding


class InterpolationBinding(EnumBinding):
    native_type = native.Interpolation
    case_insensitive = True


class WindowShapeBinding(EnumBinding):
    native_type = native.SoundWindowShape
    name = "WindowShape"
    case_insensitive = True


class AmplitudeScalingBinding(EnumBinding):
    native_type = native.ConvolveScaling
    name = "AmplitudeScaling"
    case_insensitive = True


class SignalOutsideTimeDomainBinding(EnumBinding):
    native_type = native.ConvolveSignalOutsideTimeDomain
    name = "SignalOutsideTimeDomain"
    case_insensitive = True
