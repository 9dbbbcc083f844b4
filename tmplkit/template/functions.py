"""
Helper functions for templates.

Thin wrappers over the value kernel, grouped the way they are exposed to
templates: general (truthiness, containment, display), number (aggregation),
string and time helpers. Every helper takes the value it works on first, so
it can be used both as a global function and as a filter.
"""

import logging
import os
import uuid as uuid_lib
from datetime import date as date_type, datetime, time, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

from ..config import HelperSettings
from ..values import (
    Kind,
    Operator,
    contains_all,
    contains_any,
    flatten,
    fold,
    is_empty,
    is_true,
    printable,
    to_float,
)
from ..values.resolver import resolve_kind, unbox
from .jsonpath import JSONPathEngine

logger = logging.getLogger(__name__)


# Function to get current datetime - can be overridden in tests
_get_current_datetime: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

_SIZE_SUFFIXES = ("bytes", "KB", "MB", "GB", "TB", "PB")


def _aggregate(op: Operator) -> Callable[..., float]:
    def helper(*values: Any) -> float:
        return fold(op, values)

    helper.__name__ = op.value
    helper.__doc__ = f"Fold all arguments left-to-right with {op.value}."
    return helper


class TemplateFunctions:
    """Implements the helper functions exposed to templates."""

    mul = staticmethod(_aggregate(Operator.MUL))
    add = staticmethod(_aggregate(Operator.ADD))
    div = staticmethod(_aggregate(Operator.DIV))
    sub = staticmethod(_aggregate(Operator.SUB))
    pow = staticmethod(_aggregate(Operator.POW))

    def __init__(self, settings: Optional[HelperSettings] = None):
        self.settings = settings or HelperSettings()
        self.jsonpath = JSONPathEngine()

    # ------------------------------------------------------------------
    # General
    # ------------------------------------------------------------------

    is_true = staticmethod(is_true)
    is_empty = staticmethod(is_empty)

    @staticmethod
    def default(value: Any, fallback: Any) -> Any:
        """Return fallback when value is empty, otherwise value."""
        if is_empty(value):
            return fallback
        return value

    @staticmethod
    def yesno(value: Any, yes: Any, no: Any) -> Any:
        """Return yes when value is meaningful, otherwise no."""
        if is_true(value):
            return yes
        return no

    @staticmethod
    def coalesce(*values: Any) -> Any:
        """Return the first meaningful value, or None."""
        for value in values:
            if is_true(value):
                return value
        return None

    @staticmethod
    def contains(collection: Any, *values: Any) -> bool:
        """Check whether all the values exist in the collection."""
        return contains_all(collection, values)

    @staticmethod
    def contains_any(collection: Any, *values: Any) -> bool:
        """Check whether at least one of the values exists in the collection."""
        return contains_any(collection, values)

    @staticmethod
    def eq_any(value: Any, *candidates: Any) -> bool:
        """Check whether value equals any of the candidates."""
        return contains_any(candidates, [value])

    @staticmethod
    def env(name: str, fallback: str = "") -> str:
        return os.environ.get(name, fallback)

    @staticmethod
    def uuid() -> str:
        return str(uuid_lib.uuid4())

    @staticmethod
    def file_size(value: Any) -> str:
        """
        Human readable file size, 1024 based.

        Examples:
            512 -> "512 bytes"
            1536 -> "1.5 KB"
            1048576 -> "1 MB"
        """
        try:
            resolved, kind, _ = resolve_kind(value)
        except ValueError:
            return ""
        if not kind.is_numeric:
            return ""

        size = to_float(resolved)
        for power, suffix in enumerate(_SIZE_SUFFIXES):
            unit = float(1 << (10 * power))
            if size < unit * 1024 or suffix == _SIZE_SUFFIXES[-1]:
                return f"{size / unit:.1f} {suffix}".replace(".0", "")
        return ""

    @staticmethod
    def repeat(value: Any, count: Any) -> str:
        """Repeat the printed value count times."""
        return printable(value) * int(to_float(count))

    @staticmethod
    def join(separator: Any, *values: Any) -> str:
        """
        Join every value with separator.

        Sequences and mappings contribute one entry per element (mapping
        values only), everything else one entry.
        """
        parts: List[str] = []
        for value in values:
            parts.extend(flatten(value))
        return printable(separator).join(parts)

    def query(self, data: Any, expression: str, **variables: Any) -> List[Any]:
        """Evaluate a JSONPath expression against data and return all matches."""
        return self.jsonpath.evaluate(expression, data, variables)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    @staticmethod
    def to_upper(value: Any) -> str:
        return printable(value).upper()

    @staticmethod
    def to_lower(value: Any) -> str:
        return printable(value).lower()

    to_string = staticmethod(printable)

    @staticmethod
    def trim(value: Any, cutset: Optional[str] = None) -> str:
        """Strip cutset characters (whitespace by default) from both ends."""
        return printable(value).strip(cutset)

    @staticmethod
    def trim_left(value: Any, cutset: Optional[str] = None) -> str:
        return printable(value).lstrip(cutset)

    @staticmethod
    def trim_right(value: Any, cutset: Optional[str] = None) -> str:
        return printable(value).rstrip(cutset)

    @staticmethod
    def has_prefix(value: Any, prefix: Any) -> bool:
        return printable(value).startswith(printable(prefix))

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def date(self, value: Any, fmt: str, zone: Optional[str] = None) -> str:
        """
        Format a date in the given zone.

        Args:
            value: datetime/date, integer seconds since the UNIX epoch, or a
                date string; anything else means now
            fmt: strftime format (e.g. '%Y-%m-%d %H:%M')
            zone: IANA zone name; empty or "Local" uses the configured
                default zone, unknown names fall back to UTC

        Returns:
            Formatted date string
        """
        dt = self._to_datetime(value)
        tz = self._zone(zone)
        # naive values are wall-clock times in the target zone
        if dt.tzinfo is None and tz is not None:
            dt = dt.replace(tzinfo=tz)
        return dt.astimezone(tz).strftime(fmt)

    @staticmethod
    def _to_datetime(value: Any) -> datetime:
        try:
            resolved, kind, absent = resolve_kind(value)
        except ValueError:
            return _get_current_datetime()
        if absent:
            return _get_current_datetime()

        if isinstance(resolved, datetime):
            return resolved
        if isinstance(resolved, date_type):
            return datetime.combine(resolved, time())
        if kind in (Kind.SIGNED_INT, Kind.UNSIGNED_INT):
            seconds = int(unbox(resolved))
            try:
                return datetime.fromtimestamp(seconds, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as e:
                logger.warning("date: epoch %d out of range, using current time: %s", seconds, e)
                return _get_current_datetime()
        if kind is Kind.STRING:
            try:
                return date_parser.parse(resolved)
            except (ValueError, OverflowError) as e:
                logger.warning("date: cannot parse %r, using current time: %s", resolved, e)
        return _get_current_datetime()

    def _zone(self, zone: Optional[str]) -> Optional[tzinfo]:
        name = zone or self.settings.default_zone
        if not name or name == "Local":
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("date: unknown zone %r, falling back to UTC", name)
            return timezone.utc

    # ------------------------------------------------------------------
    # Function maps
    # ------------------------------------------------------------------

    def general_func_map(self) -> Dict[str, Callable[..., Any]]:
        return {
            "is_true": self.is_true,
            "is_empty": self.is_empty,
            "default": self.default,
            "yesno": self.yesno,
            "coalesce": self.coalesce,
            "env": self.env,
            "contains": self.contains,
            "contains_any": self.contains_any,
            "eq_any": self.eq_any,
            "file_size": self.file_size,
            "uuid": self.uuid,
            "repeat": self.repeat,
            "join": self.join,
            "query": self.query,
        }

    def number_func_map(self) -> Dict[str, Callable[..., Any]]:
        return {
            "mul": self.mul,
            "add": self.add,
            "sum": self.add,
            "div": self.div,
            "sub": self.sub,
            "pow": self.pow,
        }

    def string_func_map(self) -> Dict[str, Callable[..., Any]]:
        return {
            "to_upper": self.to_upper,
            "to_lower": self.to_lower,
            "to_string": self.to_string,
            "trim": self.trim,
            "trim_left": self.trim_left,
            "trim_right": self.trim_right,
            "has_prefix": self.has_prefix,
        }

    def time_func_map(self) -> Dict[str, Callable[..., Any]]:
        return {"date": self.date}

    def func_map(self) -> Dict[str, Callable[..., Any]]:
        """All helpers by template name."""
        funcs: Dict[str, Callable[..., Any]] = {}
        funcs.update(self.general_func_map())
        funcs.update(self.number_func_map())
        funcs.update(self.string_func_map())
        funcs.update(self.time_func_map())
        return funcs

    def join_filter(self, value: Any, separator: Any = "") -> str:
        """Filter form of join: `{{ items | join(",") }}`."""
        return self.join(separator, value)

    def filter_map(self) -> Dict[str, Callable[..., Any]]:
        """Helpers that take their subject first, for use as filters."""
        variadic = {"coalesce", "env", "uuid", "join", "mul", "add", "sum", "div", "sub", "pow"}
        filters = {name: func for name, func in self.func_map().items() if name not in variadic}
        # replaces Jinja2's own join, which skips the kernel printer
        filters["join"] = self.join_filter
        return filters
