"""Canonical display strings for dynamic values."""

import math
from typing import Any, List

from .arithmetic import numeric_to_float
from .resolver import Kind, resolve_kind, unbox


def _format_float(number: float) -> str:
    if math.isfinite(number) and number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def printable(value: Any) -> str:
    """
    Render a value the way templates display it.

    Examples:
        >>> printable(6.0)
        '6'
        >>> printable([1, 2.5, True])
        '[1, 2.5, true]'
    """
    resolved, kind, absent = resolve_kind(value)
    if absent:
        return ""
    if kind is Kind.BOOL:
        return "true" if unbox(resolved) else "false"
    if kind in (Kind.SIGNED_INT, Kind.UNSIGNED_INT):
        return str(int(unbox(resolved)))
    if kind is Kind.FLOAT:
        return _format_float(numeric_to_float(resolved))
    if kind is Kind.STRING:
        return str(resolved)
    if kind is Kind.SEQUENCE:
        return "[" + ", ".join(printable(item) for item in resolved) + "]"
    if kind is Kind.MAPPING:
        pairs = (f"{printable(k)}: {printable(v)}" for k, v in resolved.items())
        return "{" + ", ".join(pairs) + "}"
    return str(resolved)


def flatten(value: Any) -> List[str]:
    """
    Turn a value into a list of display strings.

    Strings stay whole, sequences yield one entry per element and mappings
    one entry per value (in the mapping's own iteration order).
    """
    resolved, kind, _ = resolve_kind(value)
    if kind is Kind.SEQUENCE:
        return [printable(item) for item in resolved]
    if kind is Kind.MAPPING:
        return [printable(item) for item in resolved.values()]
    return [printable(resolved)]
