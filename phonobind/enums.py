"""
phonobind Enum Binder

Exposes native enumerations as Python enums constructible from strings.

Responsibilities:
- Validate the member table at declaration (non-empty, unique labels/ordinals)
- Create the host enum type in declaration order
- bind_enum(): install string construction, exact match first, then an
  optional case-insensitive scan in declaration order
- Per-enum conversion function used wherever an argument is typed with the enum

Invariants:
- An exact label match always wins over a case-insensitive one
- Members of a different enum type are rejected, never coerced
- Unmatched strings raise EnumValueError naming the enum type
"""

import enum
import logging

from phonobind.descriptor import Descriptor
from phonobind.errors import ConfigurationError, EnumTypeMismatchError, EnumValueError

logger = logging.getLogger(__name__)


# =============================================================================
# Host Enum Base
# =============================================================================


class HostEnumMeta(enum.EnumMeta):
    """
    Metaclass of host enums.

    Value lookup compares by hash, so an IntEnum member of an unrelated type
    would match the host member with the same ordinal. Members of any enum
    other than the host enum and its native enum are rejected first.
    """

    def __call__(cls, value, *args, **kwargs):
        if not args and not kwargs and isinstance(value, enum.Enum) and not isinstance(value, cls):
            native_type = getattr(cls, "_native_type", None)
            if native_type is None or not isinstance(value, native_type):
                raise EnumTypeMismatchError(value, cls.__name__)
        return super().__call__(value, *args, **kwargs)


class HostEnum(enum.Enum, metaclass=HostEnumMeta):
    """Base of every host enum created by an EnumBinding."""


# =============================================================================
# String Matching
# =============================================================================


def match_label(host_enum: type[enum.Enum], value: str, case_insensitive: bool = False) -> enum.Enum:
    """
    Find the member of `host_enum` labelled `value`.

    Args:
        host_enum: Host enum type
        value: Input string
        case_insensitive: Fall back to an upper-case comparison

    Returns:
        The matching member.

    Raises:
        EnumValueError: If no label matches.
    """
    members = host_enum.__members__
    if value in members:
        return members[value]

    if case_insensitive:
        upper = value.upper()
        # Linear scan, declaration order; first match wins
        for label, member in members.items():
            if label.upper() == upper:
                return member

    raise EnumValueError(value, host_enum.__name__)


def bind_enum(binding: "EnumBinding", case_insensitive: bool = False) -> None:
    """
    Make the binding's host enum constructible from strings.

    After this, `WindowShape("label")` works like a value lookup, and a member of
    another enum type raises EnumTypeMismatchError instead of a lookup failure.
    """
    host_enum = binding.handle

    def _missing_(cls, value):
        if isinstance(value, (str, enum.Enum)):
            return binding.convert(value)
        return None

    host_enum._missing_ = classmethod(_missing_)
    binding.case_insensitive = case_insensitive


# =============================================================================
# EnumBinding
# =============================================================================


class EnumBinding(Descriptor):
    """
    Exposes one native enumeration.

    Attributes:
        native_type: Native enum class (optional for host-only enums)
        name: Host name (defaults to the native enum's name)
        members: Ordered (label, ordinal) pairs; defaults to the native members
        case_insensitive: Accept strings differing from a label only in case
    """

    kind = "enum"
    members: tuple[tuple[str, int], ...] | None = None
    case_insensitive = False

    def __init__(self, native_type=None, name=None, members=None, case_insensitive=None):
        super().__init__()
        if native_type is not None:
            self.native_type = native_type
        if members is not None:
            self.members = tuple(members)
        if case_insensitive is not None:
            self.case_insensitive = case_insensitive
        self.name = name or self.name or getattr(self.native_type, "__name__", None)
        if self.name is None:
            raise ConfigurationError(type(self).__name__, "enum binding needs a name or a native type")

    def member_table(self) -> tuple[tuple[str, int], ...]:
        """Declared (label, ordinal) pairs in declaration order."""
        if self.members is not None:
            return self.members
        if self.native_type is None:
            return ()
        return tuple((member.name, int(member.value)) for member in self.native_type)

    def validate(self) -> tuple[tuple[str, int], ...]:
        """
        Check the member table.

        Raises:
            ConfigurationError: If the table is empty, or a label or ordinal
                is duplicated, or a label is not a public identifier.
        """
        table = self.member_table()
        if not table:
            raise ConfigurationError(self.name, "enum declares no members")

        labels: set[str] = set()
        ordinals: set[int] = set()
        for label, ordinal in table:
            if not label.isidentifier() or label.startswith("_"):
                raise ConfigurationError(self.name, f"invalid label '{label}'")
            if label in labels:
                raise ConfigurationError(self.name, f"duplicate label '{label}'")
            if ordinal in ordinals:
                raise ConfigurationError(self.name, f"duplicate ordinal {ordinal} ('{label}')")
            labels.add(label)
            ordinals.add(ordinal)
        return table

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def declare(self, scope) -> None:
        table = self.validate()
        handle = HostEnum(self.name, list(table), module=scope.module_name, qualname=self.name)
        handle._native_type = self.native_type
        if self.native_type is not None:
            handle.__doc__ = self.native_type.__doc__
        scope.define(self, handle)

    def initialize(self, scope) -> None:
        bind_enum(self, self.case_insensitive)
        self.init(scope)

    def init(self, scope) -> None:
        """Attach extra members. Most enums have none."""

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert(self, value) -> enum.Enum:
        """
        Convert a host value to a member of this enum.

        Accepts members of this enum, members of the native enum, and strings.

        Raises:
            EnumValueError: If a string matches no label.
            EnumTypeMismatchError: If `value` belongs to another enum type.
            TypeError: For any other value.
        """
        host_enum = self.handle
        if isinstance(value, host_enum):
            return value
        if self.native_type is not None and isinstance(value, self.native_type):
            return host_enum(int(value.value))
        if isinstance(value, enum.Enum):
            raise EnumTypeMismatchError(value, self.name)
        if isinstance(value, str):
            return match_label(host_enum, value, self.case_insensitive)
        raise TypeError(f"expected {self.name} or str, got {type(value).__name__}")

    def to_native(self, member: enum.Enum):
        """Native value of a host member (the ordinal if there is no native enum)."""
        if self.native_type is None:
            return member.value
        return self.native_type(member.value)

    def from_native(self, value) -> enum.Enum:
        return self.handle(int(value.value) if isinstance(value, enum.Enum) else value)

    def cast(self, value):
        """Host argument -> native value."""
        return self.to_native(self.convert(value))
