"""
Numeric coercion and left-to-right aggregation.

Every operand is promoted to an IEEE-754 double before it is combined, so
template literals and host data of different numeric widths mix freely.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable

from .errors import ParseError, TypeMismatchError
from .resolver import Kind, resolve_kind, unbox


class Operator(Enum):
    """Binary operators supported by fold()."""

    MUL = "mul"
    ADD = "add"
    DIV = "div"
    SUB = "sub"
    POW = "pow"


def _div(acc: float, value: float) -> float:
    # float division by zero follows IEEE-754 instead of raising
    if value == 0:
        if acc == 0 or math.isnan(acc):
            return math.nan
        return math.copysign(math.inf, acc) * math.copysign(1.0, value)
    return acc / value


def _is_odd_integer(value: float) -> bool:
    return value.is_integer() and value % 2 == 1


def _pow(acc: float, value: float) -> float:
    try:
        return math.pow(acc, value)
    except OverflowError:
        if _is_odd_integer(value):
            return math.copysign(math.inf, acc)
        return math.inf
    except ValueError:
        if acc == 0:
            # 0 ** -n keeps the sign of zero for odd n
            if _is_odd_integer(value):
                return math.copysign(math.inf, acc)
            return math.inf
        return math.nan


_APPLY: Dict[Operator, Callable[[float, float], float]] = {
    Operator.MUL: lambda acc, value: acc * value,
    Operator.ADD: lambda acc, value: acc + value,
    Operator.DIV: _div,
    Operator.SUB: lambda acc, value: acc - value,
    Operator.POW: _pow,
}

# Result of folding an empty input
_SEED: Dict[Operator, float] = {
    Operator.MUL: 1.0,
    Operator.ADD: 0.0,
    Operator.DIV: 1.0,
    Operator.SUB: 0.0,
    Operator.POW: 1.0,
}


def numeric_to_float(value: Any) -> float:
    """
    Promote an already-resolved numeric value to float.

    Integers too large for a double become signed infinity and a signalling
    Decimal NaN becomes a quiet NaN.
    """
    scalar = unbox(value)
    if isinstance(scalar, Decimal) and scalar.is_snan():
        return math.nan
    try:
        return float(scalar)
    except OverflowError:
        return math.inf if scalar > 0 else -math.inf


def to_float(value: Any) -> float:
    """
    Coerce a dynamic value to float for aggregation.

    Raises:
        ParseError: String that is not a numeric literal
        TypeMismatchError: Any other non-numeric kind
    """
    resolved, kind, _ = resolve_kind(value)
    if kind.is_numeric:
        return numeric_to_float(resolved)
    if kind is Kind.STRING:
        # float() would also accept surrounding blanks and digit separators
        if resolved != resolved.strip() or "_" in resolved:
            raise ParseError(resolved)
        try:
            return float(resolved)
        except ValueError:
            raise ParseError(resolved) from None
    raise TypeMismatchError(f"value must be numeric, kind: {kind.value}", left=kind)


def fold(op: Operator, values: Iterable[Any]) -> float:
    """
    Fold values left-to-right through a binary operator.

    The first value seeds the accumulator. Any parse or type error aborts
    the whole fold.

    Examples:
        >>> fold(Operator.SUB, [1, 2, 3])
        -4.0
        >>> fold(Operator.POW, [2, "2", 2.0])
        16.0
    """
    apply = _APPLY[op]
    result = _SEED[op]
    for i, value in enumerate(values):
        number = to_float(value)
        if i == 0:
            result = number
            continue
        result = apply(result, number)
    return result
