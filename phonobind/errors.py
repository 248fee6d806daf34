"""
phonobind Error Taxonomy

Responsibilities:
- Configuration errors raised while registering bindings
- Conversion errors raised at the host argument boundary
- Ownership usage errors raised by holders in debug runs
- Status errors raised by the numerical collaborator

Invariants:
- Configuration and resolution errors name the offending type or enum
- Ownership errors are never caught and converted into recoverable errors
"""


class BindingError(Exception):
    """Base class for all registration-time failures."""


class ConfigurationError(BindingError):
    """
    Raised when the binding table itself is inconsistent.

    Examples: an empty enum, a duplicate label, two descriptors declaring the
    same name, a parent cycle, or a descriptor entering a state twice.

    Attributes:
        name: Declared name of the offending type or enum
    """

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"{name}: {message}")


class BindingResolutionError(ConfigurationError):
    """
    Raised when a binding references a type that was never declared.

    Attributes:
        missing: Name (or native type name) that could not be resolved
        referenced_by: Name of the binding holding the reference
    """

    def __init__(self, missing: str, referenced_by: str):
        self.missing = missing
        self.referenced_by = referenced_by
        super().__init__(
            referenced_by,
            f"references undeclared type '{missing}'",
        )


class EnumValueError(ValueError):
    """
    Raised when a string matches none of an enum's labels.

    Attributes:
        value: The rejected input string
        enum_name: Declared name of the enum type
    """

    def __init__(self, value: str, enum_name: str):
        self.value = value
        self.enum_name = enum_name
        super().__init__(f'"{value}" is not a valid value for enum type {enum_name}')


class EnumTypeMismatchError(TypeError):
    """Raised when a member of one enum type is passed where another is expected."""

    def __init__(self, value, enum_name: str):
        self.value = value
        self.enum_name = enum_name
        super().__init__(
            f"{type(value).__name__}.{value.name} cannot be converted to enum type {enum_name}"
        )


class OwnershipError(RuntimeError):
    """Raised on holder misuse, e.g. two owning holders over one native instance."""


class ObjectReleasedError(OwnershipError):
    """Raised when a holder is dereferenced after its release action ran."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"{type_name} object already released")


class NumericalError(RuntimeError):
    """
    Raised when a numerical routine reports a non-zero status code.

    Attributes:
        routine: Name of the routine that was called
        status: The integer status it returned
    """

    def __init__(self, routine: str, status: int):
        self.routine = routine
        self.status = status
        super().__init__(f"Numerical routine '{routine}' failed with status {status}")
