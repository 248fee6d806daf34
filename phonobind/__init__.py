"""
phonobind - Acoustic Analysis Type Bindings

Exposes the native analysis library's object hierarchy and enumerations as
Python classes and enums.

Registration (at import, exactly once):
    A. Declare every class (parents first) and every enum
    B. Initialize every class and enum
    C. Publish module-level functions

Invariants:
    - Every bound class is a subclass of its bound parent
    - Enum-typed arguments also accept label strings
    - Native objects owned by a Python wrapper are freed when it is collected
    - Import fails on the first configuration or resolution error
"""

import sys

__version__ = "1.0.0.dev0"

from phonobind.bindings import BINDINGS  # noqa: E402

BINDINGS.register_all(sys.modules[__name__])
