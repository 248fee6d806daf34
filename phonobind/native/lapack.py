"""
Linear-algebra collaborator call contract.

Routines follow the C calling convention of the vendored LAPACK translation:
fixed arity, results written through `integer` pointers, an integer status
as return value (0 = success). Nothing else is observable.
"""

import ctypes
from typing import Callable

from phonobind.errors import NumericalError

# f2c's `integer`
integer = ctypes.c_long


def ilaver(vers_major, vers_minor, vers_patch) -> int:
    """
    Return the LAPACK version.

    Args:
        vers_major: (output) pointer to integer, the major version
        vers_minor: (output) pointer to integer, the minor version
        vers_patch: (output) pointer to integer, the patch version

    Returns:
        0
    """
    vers_major[0] = 3
    vers_minor[0] = 1
    vers_patch[0] = 1
    return 0


def call_routine(routine: Callable[..., int], n_outputs: int) -> tuple[int, ...]:
    """
    Call a routine whose arguments are all integer output pointers.

    Returns:
        The output values in argument order.

    Raises:
        NumericalError: If the routine returns a non-zero status.
    """
    outputs = [integer(0) for _ in range(n_outputs)]
    status = routine(*(ctypes.pointer(value) for value in outputs))
    if status != 0:
        raise NumericalError(routine.__name__, int(status))
    return tuple(value.value for value in outputs)
