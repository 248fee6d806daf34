"""
phonobind Type Binding Descriptors

Per-type adapters exposing one native type's surface to Python.

Responsibilities:
- Descriptor lifecycle state (UNDECLARED -> DECLARED -> INITIALIZED)
- declare(): create the host class with its parent as base, nothing attached
- init(): attach constructors, methods, static functions, properties and
  buffer views, resolving every referenced type through the scope
- HostObject: base class of every bound host type

Invariants:
- State transitions are monotonic and happen exactly once
- declare() never attaches members
- Type names used in init() are resolved during init(), never at first call
- A host wrapper reaches its native instance only through its holder
"""

import functools
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import numpy as np

from phonobind.errors import ConfigurationError
from phonobind.holder import ArenaScoped, Lifetime

logger = logging.getLogger(__name__)


# =============================================================================
# Descriptor Lifecycle
# =============================================================================


class BindingState(Enum):
    UNDECLARED = "undeclared"
    DECLARED = "declared"
    INITIALIZED = "initialized"


_PREDECESSOR = {
    BindingState.DECLARED: BindingState.UNDECLARED,
    BindingState.INITIALIZED: BindingState.DECLARED,
}


class Descriptor:
    """
    Registration-time adapter for one native type or enum.

    Subclasses implement declare(scope) and init(scope); the registrar drives
    them through transition().
    """

    kind = "descriptor"
    name: str | None = None
    native_type: Any = None

    def __init__(self):
        self.state = BindingState.UNDECLARED
        self.handle = None

    def transition(self, target: BindingState, action: Callable, scope) -> None:
        """
        Run `action(scope)` and move to `target`.

        Raises:
            ConfigurationError: If the descriptor is not in the state that
                directly precedes `target`.
        """
        expected = _PREDECESSOR[target]
        if self.state is not expected:
            raise ConfigurationError(
                self.name,
                f"cannot move from {self.state.value} to {target.value}",
            )
        action(scope)
        self.state = target
        logger.debug("%s %s %s", self.kind, self.name, target.value)

    def declare(self, scope) -> None:
        raise NotImplementedError

    def initialize(self, scope) -> None:
        """Initialization run by the registrar; defaults to init()."""
        self.init(scope)

    def init(self, scope) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} {self.state.value}>"


# =============================================================================
# HostObject - Base of All Bound Classes
# =============================================================================


class HostObject:
    """Base class of every class exposed by a ClassBinding."""

    _binding = None
    _holder = None

    def __init__(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__}: No constructor defined")

    @property
    def _native(self):
        if self._holder is None:
            raise TypeError(f"{type(self).__name__} instance is not initialized")
        return self._holder.get()

    def __repr__(self) -> str:
        if self._holder is None:
            return f"<{type(self).__module__}.{type(self).__qualname__} (uninitialized)>"
        owner = "owned" if self._holder.owning else "borrowed"
        return f"<{type(self).__module__}.{type(self).__qualname__} ({owner})>"


# =============================================================================
# Buffer Views
# =============================================================================


@dataclass(frozen=True)
class BufferInfo:
    """Raw-memory view contract of a native numeric buffer."""

    shape: tuple[int, ...]
    strides: tuple[int, ...]
    dtype: str
    readonly: bool


@dataclass(frozen=True)
class BufferSpec:
    """
    Declares that a native type owns a numeric buffer.

    Attributes:
        getter: Returns the native numpy array backing an instance
        readonly: Deny writes (the buffer is immutable snapshot data)
    """

    getter: Callable[[Any], np.ndarray]
    readonly: bool = False

    def view(self, instance) -> np.ndarray:
        """Zero-copy view of the native buffer, non-writeable if readonly."""
        view = self.getter(instance).view()
        if self.readonly:
            view.flags.writeable = False
        return view

    def info(self, instance) -> BufferInfo:
        view = self.view(instance)
        return BufferInfo(
            shape=tuple(view.shape),
            strides=tuple(view.strides),
            dtype=view.dtype.str,
            readonly=not view.flags.writeable,
        )


# =============================================================================
# ClassBinding
# =============================================================================


class ClassBinding(Descriptor):
    """
    Exposes one native class.

    Subclasses set the class attributes below and override init() to attach
    members. Attributes may also be given as keyword arguments.

    Attributes:
        native_type: The native class (binding identity)
        parent: Native class of the parent binding. Defaults to the native
            type's direct base; set it to skip native classes that are not bound.
        name: Host name (defaults to the native class name)
        lifetime: Lifetime convention of the native type
        buffer: BufferSpec for buffer-like types
        doc: Docstring of the host class
    """

    kind = "class"
    parent: type | None = None
    lifetime: Lifetime = ArenaScoped()
    buffer: BufferSpec | None = None
    doc: str | None = None

    def __init__(self, native_type=None, parent=None, name=None, lifetime=None, buffer=None, doc=None):
        super().__init__()
        if native_type is not None:
            self.native_type = native_type
        if parent is not None:
            self.parent = parent
        if lifetime is not None:
            self.lifetime = lifetime
        if buffer is not None:
            self.buffer = buffer
        if doc is not None:
            self.doc = doc
        if self.native_type is None:
            raise ConfigurationError(name or type(self).__name__, "no native type given")
        self.name = name or self.name or self.native_type.__name__
        self.attached: list[str] = []
        self._scope = None

    def parent_type(self) -> type | None:
        """Native type of the parent binding, or None for a root."""
        if self.parent is not None:
            return self.parent
        base = self.native_type.__bases__[0]
        return None if base is object else base

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def declare(self, scope) -> None:
        """Create the host class. Attaches no members."""
        parent_type = self.parent_type()
        if parent_type is None:
            parent_name = None
            bases = (HostObject,)
        else:
            parent_name = scope.binding_for_native(parent_type, self.name).name
            bases = (scope.resolve(parent_name, self.name),)

        handle = type(self.name, bases, {
            "__module__": scope.module_name,
            "__qualname__": self.name,
            "__doc__": self.doc or inspect.getdoc(self.native_type),
            "_binding": self,
            "__init__": HostObject.__init__,
        })
        self._scope = scope
        scope.define(self, handle, parent_name)

    def initialize(self, scope) -> None:
        if self.buffer is not None:
            self.def_buffer(self.buffer)
        self.init(scope)

    def init(self, scope) -> None:
        """Attach members. Types with only inherited operations keep this no-op."""

    # -------------------------------------------------------------------------
    # Member Definition (used from init)
    # -------------------------------------------------------------------------

    def def_init(self, fn: Callable, **arg_types) -> None:
        """
        Attach a constructor.

        Args:
            fn: Native construction function returning a new native instance
            **arg_types: Parameter name -> declared type name or callable
        """
        scope = self._scope
        call = self._bind_call(fn, arg_types)

        def __init__(wrapper, *args, **kwargs):
            if wrapper._holder is not None:
                raise TypeError(f"{type(wrapper).__name__} instance is already initialized")
            scope.adopt(wrapper, call(args, kwargs))

        __init__.__name__ = "__init__"
        __init__.__qualname__ = f"{self.name}.__init__"
        __init__.__doc__ = fn.__doc__
        signature = inspect.signature(fn)
        receiver = inspect.Parameter("self", inspect.Parameter.POSITIONAL_ONLY)
        __init__.__signature__ = signature.replace(parameters=[receiver, *signature.parameters.values()])
        self.handle.__init__ = __init__
        self.attached.append("__init__")

    def def_method(self, name: str, fn: Callable, returns=None, policy: str = "take", **arg_types) -> None:
        """
        Attach an instance method.

        `fn` receives the native instance as its first argument.

        Args:
            name: Host method name
            fn: Native function
            returns: Declared type name (or callable) of the result
            policy: "take" (owning), "reference" (borrowed) or "self"
            **arg_types: Parameter name -> declared type name or callable
        """
        call = self._bind_call(fn, arg_types)
        convert = self._scope.returner(returns, policy, self.name)

        @functools.wraps(fn)
        def method(wrapper, *args, **kwargs):
            return convert(call((wrapper._native, *args), kwargs), wrapper)

        method.__name__ = name
        method.__qualname__ = f"{self.name}.{name}"
        setattr(self.handle, name, method)
        if name == "__eq__" and "__hash__" not in vars(self.handle):
            # Value equality without a value hash: instances are unhashable
            self.handle.__hash__ = None
        self.attached.append(name)

    def def_static(self, name: str, fn: Callable, returns=None, policy: str = "take", **arg_types) -> None:
        """Attach a static function (no native receiver)."""
        call = self._bind_call(fn, arg_types)
        convert = self._scope.returner(returns, policy, self.name)

        @functools.wraps(fn)
        def function(*args, **kwargs):
            return convert(call(args, kwargs), None)

        function.__name__ = name
        setattr(self.handle, name, staticmethod(function))
        self.attached.append(name)

    def def_property(self, name: str, getter: Callable, setter: Callable | None = None,
                     returns=None, policy: str = "reference", value_type=None) -> None:
        """Attach a field-like accessor over native getter/setter functions."""
        convert = self._scope.returner(returns, policy, self.name)
        cast = self._scope.caster(value_type, self.name) if value_type is not None else None

        def fget(wrapper):
            return convert(getter(wrapper._native), wrapper)

        fset = None
        if setter is not None:
            def fset(wrapper, value):
                setter(wrapper._native, cast(value) if cast is not None else value)

        setattr(self.handle, name, property(fget, fset, doc=inspect.getdoc(getter)))
        self.attached.append(name)

    def def_buffer(self, spec: BufferSpec) -> None:
        """
        Expose a native numeric buffer without copying.

        Adds `values` (numpy view), `buffer_info()` and `__array_interface__`,
        so numpy.asarray() reads and, unless readonly, writes native memory.
        """
        def values(wrapper):
            return spec.view(wrapper._native)

        def buffer_info(wrapper):
            return spec.info(wrapper._native)

        def array_interface(wrapper):
            return spec.view(wrapper._native).__array_interface__

        setattr(self.handle, "values", property(values, doc="Zero-copy view of the native buffer."))
        setattr(self.handle, "buffer_info", buffer_info)
        setattr(self.handle, "__array_interface__", property(array_interface))
        self.attached.extend(["values", "buffer_info", "__array_interface__"])

    def _bind_call(self, fn: Callable, arg_types: dict) -> Callable:
        """Resolve argument casters now; return call(args, kwargs) for later."""
        signature = inspect.signature(fn)
        for param in arg_types:
            if param not in signature.parameters:
                raise ConfigurationError(self.name, f"{fn.__name__} has no parameter '{param}'")
        casters = {
            param: self._scope.caster(
                type_spec, self.name, optional=signature.parameters[param].default is None,
            )
            for param, type_spec in arg_types.items()
        }

        def call(args, kwargs):
            try:
                bound = signature.bind(*args, **kwargs)
            except TypeError as e:
                raise TypeError(f"{self.name}: {e}") from None
            bound.apply_defaults()
            for param, cast in casters.items():
                bound.arguments[param] = cast(bound.arguments[param])
            return fn(*bound.args, **bound.kwargs)

        return call
