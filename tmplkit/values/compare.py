"""
Equality, truthiness and containment over dynamic values.

These are the predicates every conditional template helper is built from:
    - equal: numeric cross-kind equality, absent matches absent
    - is_true / is_empty: "does this value carry meaning"
    - contains_all / contains_any: search strings, sequences and mapping values
"""

import logging
from typing import Any, Iterable, Iterator

from .arithmetic import numeric_to_float
from .errors import InvalidValueError, TypeMismatchError
from .printing import printable
from .resolver import Kind, classify, resolve, resolve_kind, unbox

logger = logging.getLogger(__name__)


def equal(a: Any, b: Any) -> bool:
    """
    Compare two values.

    Numbers of any kind are compared as doubles, so 1, 1.0 and c_uint(1) are
    all equal. Two absent values are equal; absent and present never are.

    Raises:
        TypeMismatchError: Kinds cannot be compared (e.g. string vs number,
            or either side is a sequence or mapping)
    """
    a, a_absent = resolve(a)
    b, b_absent = resolve(b)
    if a_absent and b_absent:
        return True
    if a_absent or b_absent:
        return False

    a_kind, b_kind = classify(a), classify(b)
    if a_kind is Kind.STRING and b_kind is Kind.STRING:
        return str(a) == str(b)
    if a_kind.is_numeric and b_kind.is_numeric:
        return numeric_to_float(a) == numeric_to_float(b)
    if a_kind is Kind.BOOL and b_kind is Kind.BOOL:
        return bool(unbox(a)) == bool(unbox(b))

    raise TypeMismatchError(
        f"cannot compare {a_kind.value} with {b_kind.value}", left=a_kind, right=b_kind
    )


def is_true(value: Any) -> bool:
    """
    Report whether a value is meaningful, i.e. not the zero value of its kind.

    Absent values, empty strings and collections, zero and False are not.
    Never raises.
    """
    try:
        resolved, kind, absent = resolve_kind(value)
    except InvalidValueError:
        return False
    if absent:
        return False

    if kind is Kind.STRING:
        return len(resolved) > 0
    if kind.is_numeric:
        return numeric_to_float(resolved) != 0
    if kind is Kind.BOOL:
        return bool(unbox(resolved))
    if kind in (Kind.SEQUENCE, Kind.MAPPING):
        return len(resolved) > 0
    return True


def is_empty(value: Any) -> bool:
    """Opposite of is_true()."""
    return not is_true(value)


def _element_matches(target: Any, target_absent: bool, element: Any) -> bool:
    try:
        element, element_absent = resolve(element)
        if target_absent or element_absent:
            return target_absent and element_absent
        return equal(target, element)
    except (TypeMismatchError, InvalidValueError) as e:
        logger.debug("contains: skipping element: %s", e)
        return False


def _search(source: Any, targets: Iterable[Any]) -> Iterator[bool]:
    """Yield, per target, whether it occurs in source."""
    try:
        source, kind, absent = resolve_kind(source)
    except InvalidValueError as e:
        logger.debug("contains: unusable source: %s", e)
        absent, kind = True, Kind.INVALID

    for target in targets:
        if absent or kind not in (Kind.STRING, Kind.SEQUENCE, Kind.MAPPING):
            yield False
            continue

        try:
            target, target_absent = resolve(target)
        except InvalidValueError as e:
            logger.debug("contains: unusable target: %s", e)
            yield False
            continue

        if kind is Kind.STRING:
            yield not target_absent and printable(target) in source
            continue

        elements = source.values() if kind is Kind.MAPPING else source
        yield any(_element_matches(target, target_absent, element) for element in elements)


def contains_all(source: Any, targets: Iterable[Any]) -> bool:
    """
    Check that every target occurs in source.

    Strings are searched by substring using each target's printed form,
    sequences by element, mappings by value (keys are not searched). A
    missing source behaves like an empty container. No targets means True.
    """
    return all(_search(source, targets))


def contains_any(source: Any, targets: Iterable[Any]) -> bool:
    """Check that at least one target occurs in source. No targets means False."""
    return any(_search(source, targets))
