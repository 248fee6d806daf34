"""
phonobind Two-Phase Registrar

Responsibilities:
- Scope: the host namespace plus the tables the host boundary consults
  (handles, parent relationships, native-type index, live wrappers)
- Registrar: declare every descriptor, then initialize every descriptor

Invariants:
- No descriptor's init() runs before every descriptor's declare() has run
- A parent is declared before its child, whatever the list order
- Each descriptor is declared once and initialized once
- Resolution failures surface at registration, naming the missing type
"""

import logging
import weakref
from types import ModuleType
from typing import Callable

from phonobind.config import BindingConfig
from phonobind.descriptor import BindingState, ClassBinding, Descriptor, HostObject
from phonobind.enums import EnumBinding
from phonobind.errors import BindingResolutionError, ConfigurationError
from phonobind.holder import Holder

logger = logging.getLogger(__name__)


RETURN_POLICIES = frozenset({"take", "reference", "self"})


# =============================================================================
# Scope - Host Namespace and Relationship Table
# =============================================================================


class Scope:
    """
    Host namespace the bindings are registered into.

    Attributes:
        module: Module receiving one attribute per declared type
        config: Binding configuration
    """

    def __init__(self, module: ModuleType, config: BindingConfig | None = None):
        self.module = module
        self.config = config or BindingConfig.from_env()
        self._descriptors: dict[str, Descriptor] = {}
        self._by_native: dict[type, Descriptor] = {}
        self._handles: dict[str, type] = {}
        self._parents: dict[str, str | None] = {}
        self._wrappers: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    @property
    def module_name(self) -> str:
        return self.module.__name__

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def index(self, descriptor: Descriptor) -> None:
        """Add a descriptor to the name and native-type tables."""
        if descriptor.name in self._descriptors:
            raise ConfigurationError(descriptor.name, "declared twice")
        native = descriptor.native_type
        if native is not None and native in self._by_native:
            other = self._by_native[native].name
            raise ConfigurationError(
                descriptor.name,
                f"native type {native.__name__} is already bound as {other}",
            )
        self._descriptors[descriptor.name] = descriptor
        if native is not None:
            self._by_native[native] = descriptor

    def descriptors(self) -> list[Descriptor]:
        return list(self._descriptors.values())

    def descriptor(self, name: str, referenced_by: str) -> Descriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise BindingResolutionError(name, referenced_by) from None

    def binding_for_native(self, native_type: type, referenced_by: str) -> Descriptor:
        """Descriptor bound to exactly `native_type`."""
        try:
            return self._by_native[native_type]
        except KeyError:
            raise BindingResolutionError(native_type.__name__, referenced_by) from None

    def define(self, descriptor: Descriptor, handle: type, parent: str | None = None) -> None:
        """Publish a declared handle in the host namespace."""
        descriptor.handle = handle
        self._handles[descriptor.name] = handle
        if isinstance(descriptor, ClassBinding):
            self._parents[descriptor.name] = parent
        setattr(self.module, descriptor.name, handle)

    def define_function(self, name: str, fn: Callable) -> None:
        fn.__module__ = self.module_name
        setattr(self.module, name, fn)

    def resolve(self, name: str, referenced_by: str) -> type:
        """
        Host handle of a declared type.

        Raises:
            BindingResolutionError: If `name` was never declared.
        """
        try:
            return self._handles[name]
        except KeyError:
            raise BindingResolutionError(name, referenced_by) from None

    @property
    def relationships(self) -> dict[str, str | None]:
        """Copy of the child -> parent table."""
        return dict(self._parents)

    def is_subtype(self, child, parent) -> bool:
        """Whether `child` equals or derives from `parent` (names or handles)."""
        child = child if isinstance(child, str) else child.__name__
        parent = parent if isinstance(parent, str) else parent.__name__
        current: str | None = child
        while current is not None:
            if current == parent:
                return True
            current = self._parents.get(current)
        return False

    # -------------------------------------------------------------------------
    # Argument and Result Conversion
    # -------------------------------------------------------------------------

    def caster(self, type_spec, referenced_by: str, optional: bool = False) -> Callable:
        """
        Argument converter for a declared type name (or a plain callable).

        Class names cast host wrappers to their native instance; enum names
        cast members and strings to the native enum value. The name is
        resolved now, so an undeclared type fails during registration.

        None is passed through only if `optional` is set (the native
        parameter defaults to None); otherwise it is a type mismatch.
        """
        if callable(type_spec):
            return type_spec

        descriptor = self.descriptor(type_spec, referenced_by)
        if isinstance(descriptor, EnumBinding):
            if optional:
                return lambda value: None if value is None else descriptor.cast(value)
            return descriptor.cast

        handle = self.resolve(type_spec, referenced_by)

        def cast(value):
            if value is None and optional:
                return None
            if not isinstance(value, handle):
                raise TypeError(f"expected {type_spec}, got {type(value).__name__}")
            return value._native

        return cast

    def returner(self, type_spec, policy: str, referenced_by: str) -> Callable:
        """Result converter: native result (and receiver wrapper) -> host value."""
        if policy not in RETURN_POLICIES:
            raise ConfigurationError(referenced_by, f"unknown return policy '{policy}'")
        if type_spec is None:
            return lambda result, receiver: result
        if callable(type_spec):
            return lambda result, receiver: type_spec(result)

        descriptor = self.descriptor(type_spec, referenced_by)
        if isinstance(descriptor, EnumBinding):
            return lambda result, receiver: descriptor.from_native(result)

        self.resolve(type_spec, referenced_by)
        if policy == "self":
            return lambda result, receiver: receiver
        owning = policy == "take"
        return lambda result, receiver: self.wrap(result, owning=owning)

    # -------------------------------------------------------------------------
    # Wrapping
    # -------------------------------------------------------------------------

    def class_binding_of(self, instance) -> ClassBinding:
        """Most-derived class binding for a native instance."""
        for native_type in type(instance).__mro__:
            descriptor = self._by_native.get(native_type)
            if isinstance(descriptor, ClassBinding):
                return descriptor
        raise TypeError(f"no binding registered for native type {type(instance).__name__}")

    def wrap(self, instance, owning: bool = True):
        """
        Host wrapper for a native instance.

        Returns the live wrapper if `instance` is already exposed, so no
        second holder is ever created over the same native instance.
        """
        if instance is None:
            return None
        existing = self._wrappers.get(id(instance))
        if existing is not None and not existing._holder.released and existing._holder.get() is instance:
            return existing

        binding = self.class_binding_of(instance)
        wrapper = HostObject.__new__(binding.handle)
        self.adopt(wrapper, instance, owning)
        return wrapper

    def adopt(self, wrapper, instance, owning: bool = True) -> None:
        """Attach a holder over `instance` to a freshly created wrapper."""
        if owning:
            binding = self.class_binding_of(instance)
            holder = Holder.acquire(instance, binding.lifetime, track=self.config.debug_ownership)
        else:
            holder = Holder.borrow(instance)
        wrapper._holder = holder.attach(wrapper)
        self._wrappers[id(instance)] = wrapper


# =============================================================================
# Registrar - Declare All, Then Init All
# =============================================================================


class Registrar:
    """
    Drives every descriptor through UNDECLARED -> DECLARED -> INITIALIZED.

    Classes are declared parents-first regardless of list order; enums have
    no inheritance and are declared in list order.
    """

    def __init__(self, scope: Scope, classes: list[ClassBinding], enums: list[EnumBinding]):
        self.scope = scope
        self.classes = list(classes)
        self.enums = list(enums)

    @property
    def descriptors(self) -> list[Descriptor]:
        return [*self.classes, *self.enums]

    def declare_all(self) -> None:
        """Declare every class and enum descriptor exactly once."""
        for descriptor in self.descriptors:
            self.scope.index(descriptor)

        for binding in self.classes:
            self._declare_class(binding, ())
        for binding in self.enums:
            binding.transition(BindingState.DECLARED, binding.declare, self.scope)

        logger.debug("Declared %d descriptors in %s", len(self.descriptors), self.scope.module_name)

    def _declare_class(self, binding: ClassBinding, chain: tuple[ClassBinding, ...]) -> None:
        if binding.state is BindingState.DECLARED:
            return
        if binding in chain:
            names = " -> ".join(b.name for b in (*chain, binding))
            raise ConfigurationError(binding.name, f"inheritance cycle: {names}")

        parent_type = binding.parent_type()
        if parent_type is not None:
            parent = self.scope.binding_for_native(parent_type, binding.name)
            if not isinstance(parent, ClassBinding):
                raise ConfigurationError(binding.name, f"parent {parent.name} is not a class")
            self._declare_class(parent, (*chain, binding))

        binding.transition(BindingState.DECLARED, binding.declare, self.scope)

    def init_all(self) -> None:
        """
        Initialize every descriptor exactly once.

        Raises:
            ConfigurationError: If any descriptor has not been declared.
        """
        for descriptor in self.descriptors:
            if descriptor.state is not BindingState.DECLARED:
                raise ConfigurationError(
                    descriptor.name,
                    f"is {descriptor.state.value}; every descriptor must be declared before initialization",
                )

        for descriptor in self.descriptors:
            descriptor.transition(BindingState.INITIALIZED, descriptor.initialize, self.scope)

        logger.debug("Initialized %d descriptors in %s", len(self.descriptors), self.scope.module_name)
