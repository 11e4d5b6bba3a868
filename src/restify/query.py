"""Query object to URL query parameter mapping.

A query object is a dataclass whose fields are search filters::

    @dataclass
    class CustomerQuery(QueryObject):
        name: str | None = None
        created_after: date | None = query_field("createdAfter", date_format="yyyyMMdd")
        page_token: str | None = query_field(ignore=True)

Fields are emitted in declaration order. ``None`` and empty values are left
out. Dates are rendered with the field's ``date_format`` (``yyyy-MM-dd`` by
default); enum members are rendered by name and every other value with
``str()``, both lower-cased.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Callable

from .core.errors import TypeNotAllowedError
from .core.serialization import resolve_type_hints, unwrap_optional

QUERY_FIELD_KEY = "restify.query"
DEFAULT_DATE_FORMAT = "yyyy-MM-dd"

_ALLOWED_TYPES = (str, date, timedelta, Decimal, int, float, complex, bool)


def _hour(value: date) -> int:
    return getattr(value, "hour", 0)


def _minute(value: date) -> int:
    return getattr(value, "minute", 0)


def _second(value: date) -> int:
    return getattr(value, "second", 0)


def _millisecond(value: date) -> int:
    return getattr(value, "microsecond", 0) // 1000


# Longest token first within each letter.
_DATE_TOKENS: tuple[tuple[str, Callable[[date], str]], ...] = (
    ("yyyy", lambda d: f"{d.year:04d}"),
    ("yy", lambda d: f"{d.year % 100:02d}"),
    ("MMMM", lambda d: d.strftime("%B")),
    ("MMM", lambda d: d.strftime("%b")),
    ("MM", lambda d: f"{d.month:02d}"),
    ("M", lambda d: str(d.month)),
    ("dddd", lambda d: d.strftime("%A")),
    ("ddd", lambda d: d.strftime("%a")),
    ("dd", lambda d: f"{d.day:02d}"),
    ("d", lambda d: str(d.day)),
    ("HH", lambda d: f"{_hour(d):02d}"),
    ("H", lambda d: str(_hour(d))),
    ("hh", lambda d: f"{_hour(d) % 12 or 12:02d}"),
    ("h", lambda d: str(_hour(d) % 12 or 12)),
    ("mm", lambda d: f"{_minute(d):02d}"),
    ("m", lambda d: str(_minute(d))),
    ("ss", lambda d: f"{_second(d):02d}"),
    ("s", lambda d: str(_second(d))),
    ("fff", lambda d: f"{_millisecond(d):03d}"),
    ("tt", lambda d: "AM" if _hour(d) < 12 else "PM"),
)


def format_date(value: date, pattern: str) -> str:
    """Render ``value`` with a ``yyyy-MM-dd`` style pattern.

    Patterns containing ``%`` are handed to ``strftime`` unchanged. Text in
    single or double quotes and characters after a backslash are literal.
    """

    if "%" in pattern:
        return value.strftime(pattern)
    out: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char in ("'", '"'):
            end = pattern.find(char, index + 1)
            if end == -1:
                end = len(pattern)
            out.append(pattern[index + 1 : end])
            index = end + 1
            continue
        if char == "\\" and index + 1 < len(pattern):
            out.append(pattern[index + 1])
            index += 2
            continue
        for token, render in _DATE_TOKENS:
            if pattern.startswith(token, index):
                out.append(render(value))
                index += len(token)
                break
        else:
            out.append(char)
            index += 1
    return "".join(out)


def query_field(
    key: str | None = None,
    *,
    date_format: str | None = None,
    ignore: bool = False,
    default: Any = None,
) -> Any:
    """Dataclass field carrying query-parameter options.

    ``key`` replaces the attribute name as the emitted parameter name,
    ``date_format`` overrides the date pattern and ``ignore`` excludes the
    field from mapping altogether.
    """

    return field(
        default=default,
        metadata={QUERY_FIELD_KEY: {"key": key, "date_format": date_format, "ignore": ignore}},
    )


@dataclass(slots=True, frozen=True)
class QueryFieldSpec:
    name: str
    key: str
    value_type: Any
    date_format: str | None


def is_allowed_type(tp: Any) -> bool:
    tp, _ = unwrap_optional(tp)
    if not isinstance(tp, type):
        return False
    return issubclass(tp, Enum) or issubclass(tp, _ALLOWED_TYPES)


@lru_cache(maxsize=None)
def describe_query_type(cls: type) -> tuple[QueryFieldSpec, ...]:
    """Field table for a query object type, in declaration order."""

    if not is_dataclass(cls):
        raise TypeError(f"query object type must be a dataclass, got {cls.__name__}")
    hints = resolve_type_hints(cls)
    specs: list[QueryFieldSpec] = []
    for item in fields(cls):
        options = item.metadata.get(QUERY_FIELD_KEY) or {}
        if options.get("ignore"):
            continue
        declared = hints.get(item.name, item.type)
        if not is_allowed_type(declared):
            raise TypeNotAllowedError(
                "query object fields must be str, date/datetime, timedelta, Decimal, "
                "a numeric or bool, an Enum, or an Optional of one of these; "
                f'field "{item.name}" has type {declared!r}',
                field_name=item.name,
                field_type=declared,
            )
        specs.append(
            QueryFieldSpec(
                name=item.name,
                key=options.get("key") or item.name,
                value_type=unwrap_optional(declared)[0],
                date_format=options.get("date_format"),
            )
        )
    return tuple(specs)


def render_query_value(value: Any, spec: QueryFieldSpec) -> str | None:
    if value is None:
        return None
    if isinstance(value, date):
        return format_date(value, spec.date_format or DEFAULT_DATE_FORMAT)
    text = value.name if isinstance(value, Enum) else str(value)
    if text == "":
        return None
    return text.lower()


def map_to_query_pairs(obj: Any) -> list[tuple[str, str]]:
    """Map a query object to ``(key, value)`` pairs in field order."""

    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"query object must be a dataclass instance, got {type(obj).__name__}")
    pairs: list[tuple[str, str]] = []
    for spec in describe_query_type(type(obj)):
        rendered = render_query_value(getattr(obj, spec.name), spec)
        if rendered is None:
            continue
        pairs.append((spec.key, rendered))
    return pairs


def to_query_string(obj: Any) -> str:
    """Non-encoded ``key=value&key=value`` form of :func:`map_to_query_pairs`."""

    return "&".join(f"{key}={value}" for key, value in map_to_query_pairs(obj))


class QueryObject:
    """Optional base for query dataclasses."""

    __slots__ = ()

    def to_pairs(self) -> list[tuple[str, str]]:
        return map_to_query_pairs(self)

    def to_query_string(self) -> str:
        return to_query_string(self)


__all__ = [
    "QUERY_FIELD_KEY",
    "DEFAULT_DATE_FORMAT",
    "QueryFieldSpec",
    "QueryObject",
    "query_field",
    "format_date",
    "is_allowed_type",
    "describe_query_type",
    "render_query_value",
    "map_to_query_pairs",
    "to_query_string",
]
