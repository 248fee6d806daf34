"""
phonobind Binding Aggregate

The single integration point a module's load hook calls.

Responsibilities:
- Hold the fixed, ordered table of class and enum descriptors
- register_all(): declare all, initialize all, then publish module functions

Invariants:
- register_all() runs at most once per aggregate
- A failed register_all() leaves the aggregate unusable; there is no retry
"""

import logging
from types import ModuleType
from typing import Callable, Iterable

from phonobind.config import BindingConfig
from phonobind.descriptor import ClassBinding
from phonobind.enums import EnumBinding
from phonobind.errors import ConfigurationError
from phonobind.registrar import Registrar, Scope

logger = logging.getLogger(__name__)


def _instantiate(entries: Iterable) -> list:
    """Descriptor classes in the table are constructed; instances pass through."""
    return [entry() if isinstance(entry, type) else entry for entry in entries]


class Bindings:
    """
    Composed set of all descriptors for one host module.

    Args:
        classes: ClassBinding subclasses or instances
        enums: EnumBinding subclasses or instances
        functions: (name, callable) pairs published as module functions
    """

    def __init__(
        self,
        classes: Iterable = (),
        enums: Iterable = (),
        functions: Iterable[tuple[str, Callable]] = (),
    ):
        self.classes: list[ClassBinding] = _instantiate(classes)
        self.enums: list[EnumBinding] = _instantiate(enums)
        self.functions = list(functions)
        self.scope: Scope | None = None
        self._attempted = False

    def register_all(self, module: ModuleType, config: BindingConfig | None = None) -> None:
        """
        Populate `module` with every declared class, enum and function.

        Raises:
            ConfigurationError: On the first configuration or resolution
                failure, or if registration was already attempted.
        """
        if self._attempted:
            raise ConfigurationError(module.__name__, "bindings were already registered")
        self._attempted = True

        scope = Scope(module, config)
        registrar = Registrar(scope, self.classes, self.enums)
        registrar.declare_all()
        registrar.init_all()
        for name, fn in self.functions:
            scope.define_function(name, fn)

        self.scope = scope
        logger.info(
            "Registered %d classes, %d enums and %d functions into %s",
            len(self.classes), len(self.enums), len(self.functions), module.__name__,
        )

    def describe(self) -> dict:
        """
        JSON-ready report of the registered hierarchy.

        Returns:
            Dictionary with module, classes, enums and functions. Classes
            carry their parent, state, attached members and buffer contract.
        """
        module = self.scope.module_name if self.scope is not None else None
        relationships = self.scope.relationships if self.scope is not None else {}
        classes = [
            {
                "name": binding.name,
                "parent": relationships.get(binding.name),
                "state": binding.state.value,
                "members": sorted(binding.attached),
                "buffer": None if binding.buffer is None else {"readonly": binding.buffer.readonly},
                "lifetime": type(binding.lifetime).__name__,
            }
            for binding in self.classes
        ]
        enums = [
            {
                "name": binding.name,
                "state": binding.state.value,
                "case_insensitive": binding.case_insensitive,
                "members": [
                    {"label": label, "ordinal": ordinal}
                    for label, ordinal in binding.member_table()
                ],
            }
            for binding in self.enums
        ]
        return {
            "module": module,
            "classes": classes,
            "enums": enums,
            "functions": [name for name, _ in self.functions],
        }
