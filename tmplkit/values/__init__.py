"""Dynamic value introspection, comparison and aggregation."""

from .arithmetic import Operator, fold, to_float
from .compare import contains_all, contains_any, equal, is_empty, is_true
from .errors import InvalidValueError, ParseError, TypeMismatchError, ValueKernelError
from .printing import flatten, printable
from .resolver import Kind, Ref, classify, resolve

__all__ = [
    "Kind",
    "Operator",
    "Ref",
    "resolve",
    "classify",
    "equal",
    "is_true",
    "is_empty",
    "contains_all",
    "contains_any",
    "fold",
    "to_float",
    "printable",
    "flatten",
    "ValueKernelError",
    "InvalidValueError",
    "TypeMismatchError",
    "ParseError",
]
