"""Errors raised by the value kernel."""

from typing import Any, Optional


class ValueKernelError(ValueError):
    """Base class for value kernel errors."""


class InvalidValueError(ValueKernelError):
    """A value could not be resolved to something concrete."""


class TypeMismatchError(ValueKernelError):
    """
    An operation was asked to work on an unsupported kind or kind pairing.

    Attributes:
        left: Kind of the (first) offending operand
        right: Kind of the second operand, if the operation has one
    """

    def __init__(self, message: str, left: Any = None, right: Optional[Any] = None):
        self.left = left
        self.right = right
        super().__init__(message)


class ParseError(ValueKernelError):
    """A string operand is not a valid numeric literal."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse {text!r} as a number")
