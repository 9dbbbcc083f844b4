"""
test_values.py - Unit tests for the value kernel

Covers, leaves first:
1. Indirection resolution
2. Kind classification
3. Equality
4. Truthiness
5. Containment
6. Printing and flattening
"""

import ctypes
import gc
import logging
import math
import weakref
from decimal import Decimal
from fractions import Fraction

import pytest
from jinja2 import ChainableUndefined, Undefined

from tmplkit.values import (
    InvalidValueError,
    Kind,
    Ref,
    TypeMismatchError,
    classify,
    contains_all,
    contains_any,
    equal,
    flatten,
    is_empty,
    is_true,
    printable,
    resolve,
)


class Node:
    """Plain object used as a weak reference target."""


# ============================================================================
# Indirection resolution
# ============================================================================

class TestResolve:
    """Test stripping reference layers."""

    def test_concrete_value_resolves_to_itself(self):
        assert resolve(5) == (5, False)
        assert resolve("x") == ("x", False)

    def test_nested_refs(self):
        """Chains of any depth reach the concrete value."""
        assert resolve(Ref(Ref(Ref(5)))) == (5, False)

    def test_absent_terminal_at_any_depth(self):
        assert resolve(None) == (None, True)
        assert resolve(Ref()) == (None, True)
        assert resolve(Ref(Ref(Ref(None)))) == (None, True)

    def test_undefined_is_absent(self):
        value, absent = resolve(Undefined())
        assert absent
        assert isinstance(value, Undefined)

    def test_weak_reference(self):
        node = Node()
        ref = weakref.ref(node)
        assert resolve(ref) == (node, False)

    def test_dead_weak_reference_is_absent(self):
        node = Node()
        ref = weakref.ref(node)
        del node
        gc.collect()
        assert resolve(ref) == (None, True)

    def test_ctypes_pointer(self):
        value = ctypes.c_int(5)
        resolved, absent = resolve(ctypes.pointer(value))
        assert not absent
        assert resolved.value == 5

    def test_null_ctypes_pointer_is_absent(self):
        null = ctypes.POINTER(ctypes.c_int)()
        assert resolve(null) == (None, True)

    def test_mixed_layers(self):
        node = Node()
        assert resolve(Ref(weakref.ref(node))) == (node, False)

    def test_resolve_is_idempotent(self):
        once = resolve(Ref(Ref(3)))
        twice = resolve(once[0])
        assert once == twice == (3, False)

    def test_reference_cycle(self):
        ref = Ref()
        ref.value = Ref(ref)
        with pytest.raises(InvalidValueError):
            resolve(ref)


# ============================================================================
# Kind classification
# ============================================================================

class TestClassify:
    """Test the total mapping from values to kinds."""

    @pytest.mark.parametrize("value,kind", [
        (1, Kind.SIGNED_INT),
        (-(2 ** 70), Kind.SIGNED_INT),
        (ctypes.c_int8(3), Kind.SIGNED_INT),
        (ctypes.c_int64(3), Kind.SIGNED_INT),
        (ctypes.c_uint8(3), Kind.UNSIGNED_INT),
        (ctypes.c_uint64(3), Kind.UNSIGNED_INT),
        (1.5, Kind.FLOAT),
        (Decimal("1.5"), Kind.FLOAT),
        (Fraction(1, 2), Kind.FLOAT),
        (ctypes.c_double(1.0), Kind.FLOAT),
        ("x", Kind.STRING),
        (True, Kind.BOOL),
        (ctypes.c_bool(False), Kind.BOOL),
        ([1], Kind.SEQUENCE),
        ((1,), Kind.SEQUENCE),
        (b"x", Kind.SEQUENCE),
        (bytearray(), Kind.SEQUENCE),
        ({1, 2}, Kind.SEQUENCE),
        (range(3), Kind.SEQUENCE),
        ({"a": 1}, Kind.MAPPING),
        (None, Kind.INVALID),
        (Undefined(), Kind.INVALID),
        (len, Kind.INVALID),
        (object(), Kind.INVALID),
    ])
    def test_kinds(self, value, kind):
        assert classify(value) is kind

    def test_unresolved_reference_is_invalid(self):
        """Classification expects an already resolved value."""
        assert classify(Ref(1)) is Kind.INVALID

    def test_numeric_kinds(self):
        assert Kind.SIGNED_INT.is_numeric
        assert Kind.UNSIGNED_INT.is_numeric
        assert Kind.FLOAT.is_numeric
        assert not Kind.BOOL.is_numeric
        assert not Kind.STRING.is_numeric


# ============================================================================
# Equality
# ============================================================================

class TestEqual:
    """Test cross-kind equality."""

    @pytest.mark.parametrize("a,b", [
        (2, 2.0),
        (1, ctypes.c_uint(1)),
        (ctypes.c_uint64(2), ctypes.c_int8(2)),
        (Decimal("0.5"), Fraction(1, 2)),
        (Ref(5), 5.0),
        (ctypes.c_float(0.5), 0.5),
    ])
    def test_numbers_equal_regardless_of_kind(self, a, b):
        assert equal(a, b)
        assert equal(b, a)

    def test_numbers_differ(self):
        assert not equal(1, 2)
        assert not equal(1.5, 1)

    def test_double_precision_promotion(self):
        """Integers are compared after conversion to double."""
        assert equal(2 ** 53, 2 ** 53 + 1)

    def test_absent_symmetry(self):
        assert equal(None, None)
        assert equal(None, Ref(None))
        assert equal(Undefined(), None)
        assert not equal(None, 0)
        assert not equal("", None)
        assert not equal(None, [])

    def test_strings(self):
        assert equal("a", "a")
        assert not equal("a", "A")

    def test_bools(self):
        assert equal(True, True)
        assert equal(ctypes.c_bool(True), True)
        assert not equal(True, False)

    @pytest.mark.parametrize("a,b", [
        ("1", 1),
        (True, 1),
        (0, False),
        ([1], [1]),
        ({}, {}),
        (len, len),
        ("x", ["x"]),
    ])
    def test_type_mismatch(self, a, b):
        with pytest.raises(TypeMismatchError) as exc_info:
            equal(a, b)
        assert exc_info.value.left is classify(resolve(a)[0])

    def test_type_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            equal("1", 1)


# ============================================================================
# Truthiness
# ============================================================================

class TestTruthiness:
    """Test is_true / is_empty."""

    @pytest.mark.parametrize("value", [
        "",
        0,
        0.0,
        False,
        [],
        {},
        (),
        b"",
        set(),
        None,
        Ref(),
        Ref(Ref(0)),
        ctypes.c_uint(0),
        Decimal(0),
        Undefined(),
        ChainableUndefined(),
    ])
    def test_zero_values_are_not_true(self, value):
        assert not is_true(value)
        assert is_empty(value)

    @pytest.mark.parametrize("value", [
        "ok",
        " ",
        1,
        -1,
        0.1,
        math.nan,
        True,
        [0],
        {"x": ""},
        b"x",
        Ref("x"),
        ctypes.c_int(-3),
        object(),
        len,
    ])
    def test_meaningful_values_are_true(self, value):
        assert is_true(value)
        assert not is_empty(value)

    def test_reference_cycle_is_not_true(self):
        ref = Ref()
        ref.value = ref
        assert not is_true(ref)

    def test_signalling_nan_is_true(self):
        assert is_true(Decimal("sNaN"))
        assert not is_empty(Decimal("sNaN"))
        assert not equal(Decimal("sNaN"), Decimal("sNaN"))


# ============================================================================
# Containment
# ============================================================================

class TestContains:
    """Test contains_all / contains_any."""

    def test_substring(self):
        assert contains_all("hellox", ["x"])
        assert not contains_all("hello", ["x"])

    def test_substring_uses_printed_form(self):
        assert contains_all("a1.5", [1.5])
        assert contains_all("v6", [6.0])
        assert contains_all("is true", [True])

    def test_sequence(self):
        assert contains_all(["y", "x"], ["x"])
        assert not contains_all(["y", "x"], ["z"])

    def test_mapping_values(self):
        assert contains_all({0: 0, 1: 1}, [1])
        assert not contains_all({0: 0, 1: 1}, [2])

    def test_mapping_keys_are_not_searched(self):
        assert not contains_all({"x": 1}, ["x"])

    def test_multiple_targets(self):
        assert not contains_all({0: 0, 1: 1}, [0, 1, 2])
        assert contains_all({0: 0, 1: 1, 2: 2}, [0, 1, 2])
        assert contains_any({0: 0, 1: 1, 2: 2}, [5, 6, 2])

    def test_contains_any_string(self):
        assert contains_any("my name is jack", ["x", "y"])
        assert not contains_any("mi name is jack", ["x", "y"])

    def test_scalar_source(self):
        assert not contains_all(1, [1])
        assert not contains_any(True, [True])

    def test_numeric_elements_match_across_kinds(self):
        assert contains_all([1, 2, 3], [2.0, ctypes.c_uint(3)])
        assert contains_all({1, 2}, [2.0])

    def test_references(self):
        x = Ref(5)
        arr = Ref([1, 2])
        assert contains_all(arr, [1])
        assert contains_any([x], [x])
        assert not contains_any(arr, [x])
        assert contains_any([x], [5])
        assert contains_any([1, 2, 3, 4, 5], [x])

    def test_absent_source_is_empty_container(self):
        assert not contains_all(None, [None])
        assert not contains_any(Ref(), [1])
        assert not contains_any(Undefined(), ["x"])

    def test_absent_element_matches_absent_target(self):
        assert contains_all([1, None], [None])
        assert contains_any({"a": Ref()}, [None])
        assert not contains_any([1, 2], [None])

    def test_absent_target_never_in_string(self):
        assert not contains_any("None", [None])

    def test_mismatched_elements_do_not_stop_scan(self):
        assert contains_all(["a", [1], 1], [1])
        assert contains_any({"a": "x", "b": 2}, [2])

    def test_mismatch_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="tmplkit.values.compare")
        assert contains_any(["a", 1], [1])
        assert "skipping element" in caplog.text

    def test_empty_targets(self):
        assert contains_all("abc", [])
        assert not contains_any("abc", [])
        assert contains_all(None, [])
        assert not contains_any(None, [])

    @pytest.mark.parametrize("source,targets", [
        ("hellox", ["x", "h"]),
        (["a", "b"], ["a", "c"]),
        ({1: 1, 2: 2}, [1, 2]),
        ([1, None], [None, 1]),
        (None, [1]),
        ("abc", ["z"]),
    ])
    def test_all_implies_any(self, source, targets):
        if contains_all(source, targets):
            assert contains_any(source, targets)

    def test_generator_targets(self):
        assert contains_all([1, 2, 3], (n for n in (1, 2)))


# ============================================================================
# Printing and flattening
# ============================================================================

class TestPrintable:
    """Test canonical display strings."""

    @pytest.mark.parametrize("value,expected", [
        (6.0, "6"),
        (0.25, "0.25"),
        (4.1, "4.1"),
        (2.1 + 2.1 + 2.1, "6.300000000000001"),
        (1e21, "1e+21"),
        (math.nan, "nan"),
        (math.inf, "inf"),
        (-3, "-3"),
        (ctypes.c_uint(7), "7"),
        (Decimal("1.50"), "1.5"),
        (Decimal("sNaN"), "nan"),
        (True, "true"),
        (False, "false"),
        (None, ""),
        (Undefined(), ""),
        ("x", "x"),
        (Ref(5), "5"),
        ([1, 2.5, True], "[1, 2.5, true]"),
        ([Ref("a"), None], "[a, ]"),
        ({"x": "y"}, "{x: y}"),
        ({1: [2.0]}, "{1: [2]}"),
    ])
    def test_printable(self, value, expected):
        assert printable(value) == expected

    @pytest.mark.parametrize("value", [
        Ref(Ref(5)),
        Ref([1, Ref(2)]),
        None,
        3.0,
        {"a": Ref(True)},
        "text",
    ])
    def test_printing_resolved_value_changes_nothing(self, value):
        assert printable(resolve(value)[0]) == printable(value)


class TestFlatten:
    """Test flattening values into display strings."""

    def test_string_stays_whole(self):
        assert flatten("abc") == ["abc"]

    def test_sequence(self):
        assert flatten([1, "2", 3.0, 4.1, Ref(5), True]) == ["1", "2", "3", "4.1", "5", "true"]

    def test_mapping_values(self):
        """Mapping order is not relied upon."""
        assert sorted(flatten({"x": 1, "y": 2})) == ["1", "2"]

    def test_scalar(self):
        assert flatten(5) == ["5"]
        assert flatten(Ref(5)) == ["5"]

    def test_referenced_sequence(self):
        assert flatten(Ref([1, Ref(2)])) == ["1", "2"]

    def test_absent(self):
        assert flatten(None) == [""]
