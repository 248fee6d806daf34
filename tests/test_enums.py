"""
phonobind Enum Binder Tests

Coverage:
- Exact labels construct their ordinal
- Case-insensitive fallback, exact match first, declaration order
- Unmatched strings raise a ValueError naming the enum
- Members of another enum type are rejected
- Empty and duplicate member tables fail at declaration
- Enum-typed method arguments accept strings
"""

from enum import Enum, IntEnum

import pytest

from phonobind.aggregate import Bindings
from phonobind.descriptor import BindingState, ClassBinding
from phonobind.enums import EnumBinding, match_label
from phonobind.errors import ConfigurationError, EnumTypeMismatchError, EnumValueError

WINDOW_LABELS = ("RECTANGULAR", "HANNING", "HAMMING")
SCALING_LABELS = ("INTEGRAL", "SUM", "NORMALIZE", "PEAK_099")


def _members(labels):
    return tuple((label, ordinal) for ordinal, label in enumerate(labels))


@pytest.fixture
def scenario(host_module, config):
    """WindowShape (case-insensitive) and AmplitudeScaling (exact only)."""
    bindings = Bindings(enums=[
        EnumBinding(name="WindowShape", members=_members(WINDOW_LABELS), case_insensitive=True),
        EnumBinding(name="AmplitudeScaling", members=_members(SCALING_LABELS)),
    ])
    bindings.register_all(host_module, config)
    return host_module


# =============================================================================
# Test: String Construction
# =============================================================================


class TestStringConstruction:

    @pytest.mark.parametrize("ordinal,label", list(enumerate(WINDOW_LABELS)))
    def test_exact_label_yields_ordinal(self, scenario, ordinal, label):
        member = scenario.WindowShape(label)
        assert member.value == ordinal
        assert member.name == label

    def test_case_insensitive_label(self, scenario):
        assert scenario.WindowShape("hanning") is scenario.WindowShape.HANNING

    @pytest.mark.parametrize("text", ["hamming", "Hamming", "hAmMiNg", "HAMMING"])
    def test_case_permutations_match_exact_label(self, scenario, text):
        assert scenario.WindowShape(text) is scenario.WindowShape("HAMMING")

    def test_unknown_label_names_enum(self, scenario):
        with pytest.raises(EnumValueError) as exc_info:
            scenario.WindowShape("triangular")

        error = exc_info.value
        assert isinstance(error, ValueError)
        assert error.value == "triangular"
        assert error.enum_name == "WindowShape"
        assert "WindowShape" in str(error)
        assert '"triangular"' in str(error)

    def test_exact_only_enum_rejects_other_case(self, scenario):
        assert scenario.AmplitudeScaling("SUM") is scenario.AmplitudeScaling.SUM
        with pytest.raises(ValueError, match="AmplitudeScaling"):
            scenario.AmplitudeScaling("sum")

    def test_ordinal_lookup_still_works(self, scenario):
        assert scenario.WindowShape(1) is scenario.WindowShape.HANNING
        with pytest.raises(ValueError):
            scenario.WindowShape(99)

    def test_members_keep_declaration_order(self, scenario):
        assert [m.name for m in scenario.AmplitudeScaling] == list(SCALING_LABELS)


# =============================================================================
# Test: Exact Match Priority
# =============================================================================


class TestExactMatchPriority:

    @pytest.fixture
    def mixed(self, host_module, config):
        bindings = Bindings(enums=[
            EnumBinding(name="Mixed", members=(("abc", 0), ("ABC", 1)), case_insensitive=True),
        ])
        bindings.register_all(host_module, config)
        return host_module.Mixed

    def test_exact_match_wins_over_case_insensitive(self, mixed):
        assert mixed("ABC").value == 1
        assert mixed("abc").value == 0

    def test_first_declared_wins_among_case_insensitive(self, mixed):
        assert mixed("Abc").value == 0

    def test_match_label_directly(self, mixed):
        assert match_label(mixed, "ABC", case_insensitive=True).value == 1
        with pytest.raises(EnumValueError):
            match_label(mixed, "aBc", case_insensitive=False)


# =============================================================================
# Test: Enum Type Mismatch
# =============================================================================


class TestTypeMismatch:

    def test_other_enum_member_rejected(self, scenario):
        with pytest.raises(EnumTypeMismatchError):
            scenario.WindowShape(scenario.AmplitudeScaling.SUM)

    def test_mismatch_is_type_error_not_value_error(self, scenario):
        with pytest.raises(TypeError) as exc_info:
            scenario.WindowShape(scenario.AmplitudeScaling.INTEGRAL)
        assert not isinstance(exc_info.value, ValueError)

    def test_unrelated_int_enum_member_rejected(self, scenario):
        class Level(IntEnum):
            LOW = 1

        with pytest.raises(EnumTypeMismatchError):
            scenario.WindowShape(Level.LOW)
        assert scenario.WindowShape(1) is scenario.WindowShape.HANNING

    def test_unrelated_python_enum_rejected(self, scenario):
        class Color(Enum):
            HANNING = 1

        with pytest.raises(EnumTypeMismatchError):
            scenario.WindowShape(Color.HANNING)


# =============================================================================
# Test: Declaration-Time Configuration Errors
# =============================================================================


class TestConfigurationErrors:

    def test_empty_enum_fails_at_declaration(self, host_module, config):
        empty = EnumBinding(name="Empty", members=())
        bindings = Bindings(enums=[empty])

        with pytest.raises(ConfigurationError, match="Empty: enum declares no members"):
            bindings.register_all(host_module, config)
        assert empty.state is BindingState.UNDECLARED
        assert not hasattr(host_module, "Empty")

    def test_duplicate_label(self, host_module, config):
        bindings = Bindings(enums=[EnumBinding(name="Twice", members=(("A", 0), ("A", 1)))])
        with pytest.raises(ConfigurationError, match="duplicate label 'A'"):
            bindings.register_all(host_module, config)

    def test_duplicate_ordinal(self, host_module, config):
        bindings = Bindings(enums=[EnumBinding(name="Alias", members=(("A", 0), ("B", 0)))])
        with pytest.raises(ConfigurationError, match="duplicate ordinal 0"):
            bindings.register_all(host_module, config)

    def test_private_label_rejected(self, host_module, config):
        bindings = Bindings(enums=[EnumBinding(name="Hidden", members=(("_X", 0),))])
        with pytest.raises(ConfigurationError, match="invalid label '_X'"):
            bindings.register_all(host_module, config)

    def test_enum_without_name_or_native_type(self):
        with pytest.raises(ConfigurationError):
            EnumBinding(members=(("A", 0),))


# =============================================================================
# Test: Native Enums and Argument Conversion
# =============================================================================


class NativeShape(IntEnum):
    BOX = 0
    HANN = 3


class NativeColor(IntEnum):
    RED = 0
    GREEN = 3


class Filter:
    def __init__(self):
        self.shape = NativeShape.BOX


def filter_new():
    return Filter()


def filter_set_shape(me, shape=NativeShape.BOX):
    me.shape = shape
    return shape


class FilterBinding(ClassBinding):
    native_type = Filter

    def init(self, scope):
        self.def_init(filter_new)
        self.def_method("set_shape", filter_set_shape, returns="Shape", shape="Shape")


class ShapeBinding(EnumBinding):
    native_type = NativeShape
    name = "Shape"
    case_insensitive = True


class TestNativeEnumConversion:

    @pytest.fixture
    def module(self, host_module, config):
        Bindings([FilterBinding], [ShapeBinding]).register_all(host_module, config)
        return host_module

    def test_members_mirror_native_ordinals(self, module):
        assert [(m.name, m.value) for m in module.Shape] == [("BOX", 0), ("HANN", 3)]

    def test_string_argument_converted_to_native(self, module):
        f = module.Filter()
        result = f.set_shape("hann")

        assert f._native.shape is NativeShape.HANN
        assert result is module.Shape.HANN

    def test_host_member_argument(self, module):
        f = module.Filter()
        f.set_shape(module.Shape.HANN)
        assert f._native.shape is NativeShape.HANN

    def test_native_member_argument_and_default(self, module):
        f = module.Filter()
        f.set_shape(NativeShape.HANN)
        assert f._native.shape is NativeShape.HANN
        f.set_shape()
        assert f._native.shape is NativeShape.BOX

    def test_construct_from_native_member(self, module):
        assert module.Shape(NativeShape.HANN) is module.Shape.HANN

    def test_other_native_enum_rejected(self, module):
        with pytest.raises(EnumTypeMismatchError, match="Shape"):
            module.Shape(NativeColor.GREEN)
        with pytest.raises(EnumTypeMismatchError):
            module.Filter().set_shape(NativeColor.GREEN)

    def test_bad_string_argument(self, module):
        with pytest.raises(EnumValueError, match="enum type Shape"):
            module.Filter().set_shape("triangle")

    def test_non_enum_argument(self, module):
        with pytest.raises(TypeError, match="expected Shape or str"):
            module.Filter().set_shape(3.5)
