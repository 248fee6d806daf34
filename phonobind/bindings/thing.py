"""
Bindings for the root of the hierarchy: Thing and Data.
"""

from phonobind import native
from phonobind.descriptor import ClassBinding
from phonobind.holder import ManualRelease
from phonobind.native import things

# Native objects are uniquely owned and destroyed with forget()
THING_LIFETIME = ManualRelease(native.forget)


class NativeClassBinding(ClassBinding):
    """ClassBinding over a native Thing subclass."""

    lifetime = THING_LIFETIME


class ThingBinding(NativeClassBinding):
    native_type = native.Thing

    def init(self, scope) -> None:
        self.def_property("name", things.Thing_getName, things.Thing_setName)
        self.def_property("class_name", things.Thing_className)
        self.def_method("info", things.Thing_info)
        self.def_method("__str__", things.Thing_info)


def _copy(me):
    return things.Data_copy(me)


def _deepcopy(me, memo):
    return things.Data_copy(me)


class DataBinding(NativeClassBinding):
    native_type = native.Data

    def init(self, scope) -> None:
        data = scope.resolve("Data", self.name)

        def as_data(value):
            return value._native if isinstance(value, data) else NotImplemented

        def equal(me, other):
            if other is NotImplemented:
                return NotImplemented
            return things.Data_equal(me, other)

        self.def_method("copy", _copy, returns="Data")
        self.def_method("__copy__", _copy, returns="Data")
        self.def_method("__deepcopy__", _deepcopy, returns="Data")
        self.def_method("__eq__", equal, other=as_data)
