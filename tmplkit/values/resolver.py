"""
Indirection resolution and kind classification.

Values arriving from the template host may be wrapped in any number of
reference layers before reaching something concrete:
    - Ref: explicit reference cell (tmplkit's pointer)
    - weakref.ref: called to reach the referent
    - ctypes pointers: followed through .contents

Resolution walks these layers until it reaches a concrete value or an absent
terminal (None, a dead weak reference, a NULL pointer, a Jinja2 Undefined).
The concrete value is then mapped to exactly one Kind.
"""

import ctypes
import decimal
import numbers
import weakref
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

from jinja2 import Undefined

from .errors import InvalidValueError


class Kind(Enum):
    """Closed set of value kinds the kernel knows how to handle."""

    SIGNED_INT = "signed_int"
    UNSIGNED_INT = "unsigned_int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    INVALID = "invalid"

    @property
    def is_numeric(self) -> bool:
        return self in NUMERIC_KINDS


NUMERIC_KINDS = frozenset({Kind.SIGNED_INT, Kind.UNSIGNED_INT, Kind.FLOAT})

# ctypes scalars keep their declared signedness
_CTYPES_SIGNED = (
    ctypes.c_byte, ctypes.c_short, ctypes.c_int, ctypes.c_long,
    ctypes.c_longlong, ctypes.c_ssize_t,
)
_CTYPES_UNSIGNED = (
    ctypes.c_ubyte, ctypes.c_ushort, ctypes.c_uint, ctypes.c_ulong,
    ctypes.c_ulonglong, ctypes.c_size_t,
)
_CTYPES_FLOAT = (ctypes.c_float, ctypes.c_double, ctypes.c_longdouble)
_CTYPES_SCALARS = _CTYPES_SIGNED + _CTYPES_UNSIGNED + _CTYPES_FLOAT + (ctypes.c_bool,)


@dataclass
class Ref:
    """
    Reference cell around a value.

    Lets callers hand the kernel a value "by reference"; Ref(None) is a nil
    reference and resolves to absent.
    """

    value: Any = None


def resolve(value: Any) -> Tuple[Any, bool]:
    """
    Strip every reference layer from a value.

    Args:
        value: Any value handed over by the template host

    Returns:
        (resolved value, is_absent). For absent values the resolved value is
        the terminal itself (None or Undefined).

    Raises:
        InvalidValueError: If the reference chain loops back on itself
    """
    seen = set()
    while True:
        if value is None or isinstance(value, Undefined):
            return value, True

        if isinstance(value, Ref):
            target = value.value
        elif isinstance(value, weakref.ReferenceType):
            target = value()
        elif isinstance(value, ctypes._Pointer):
            if not value:
                return None, True
            target = value.contents
        else:
            return value, False

        if id(value) in seen:
            raise InvalidValueError(f"reference cycle through {type(value).__name__}")
        seen.add(id(value))
        value = target


def classify(value: Any) -> Kind:
    """
    Map a resolved value to its Kind.

    Unresolved references, absent values and anything without comparison or
    iteration semantics (functions, arbitrary objects) are INVALID.
    """
    if value is None or isinstance(value, Undefined):
        return Kind.INVALID

    # bool is an int subclass; check it first
    if isinstance(value, (bool, ctypes.c_bool)):
        return Kind.BOOL
    if isinstance(value, _CTYPES_UNSIGNED):
        return Kind.UNSIGNED_INT
    if isinstance(value, (numbers.Integral,) + _CTYPES_SIGNED):
        return Kind.SIGNED_INT
    if isinstance(value, (numbers.Real, decimal.Decimal) + _CTYPES_FLOAT):
        return Kind.FLOAT

    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, (Sequence, Set, bytes, bytearray)):
        return Kind.SEQUENCE

    return Kind.INVALID


def unbox(value: Any) -> Any:
    """Return the Python scalar held by a ctypes scalar, or the value itself."""
    if isinstance(value, _CTYPES_SCALARS):
        return value.value
    return value


def resolve_kind(value: Any) -> Tuple[Any, Kind, bool]:
    """Resolve a value and classify it in one step."""
    resolved, absent = resolve(value)
    return resolved, classify(resolved), absent
