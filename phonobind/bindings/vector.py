"""
Binding for Vector, the buffer-backed base of sampled signals.

Vector exposes its (channels x samples) matrix without copying; Matrix and
Sampled are not bound, so Vector derives directly from Data.
"""

import numpy as np

from phonobind import native
from phonobind.bindings.thing import NativeClassBinding
from phonobind.descriptor import BufferSpec
from phonobind.native import things


def _values(me) -> np.ndarray:
    return me.z


def _xs(me) -> np.ndarray:
    return things.Sampled_indexToX(me, np.arange(me.nx))


def _getter(field):
    def get(me):
        return getattr(me, field)
    get.__name__ = f"get_{field}"
    return get


class VectorBinding(NativeClassBinding):
    native_type = native.Vector
    parent = native.Data
    buffer = BufferSpec(_values)

    def init(self, scope) -> None:
        for field in ("xmin", "xmax", "nx", "dx", "x1", "ny"):
            self.def_property(field, _getter(field))
        self.def_property("n_channels", _getter("ny"))
        self.def_method("xs", _xs)
        self.def_method("__len__", _getter("nx"))
        self.def_method(
            "get_value",
            things.Vector_getValueAtX,
            interpolation="Interpolation",
            x=float,
        )
