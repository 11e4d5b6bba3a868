from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

import pytest

from restify.core.errors import TypeNotAllowedError
from restify.query import (
    QueryObject,
    describe_query_type,
    format_date,
    map_to_query_pairs,
    query_field,
    to_query_string,
)


class Region(Enum):
    NORTH = "North"
    SOUTH = "South"


class Priority(Enum):
    HIGH = 1
    LOW = 2


@dataclass
class Address:
    street: str


@dataclass
class CustomerQuery(QueryObject):
    name: str | None = None
    since: date | None = None
    region: Region | None = None
    min_balance: Decimal | None = None
    active: bool | None = None
    page: int | None = query_field("pageNumber")
    cursor: str | None = query_field(ignore=True)


@dataclass
class TicketQuery:
    priority: Priority | None = None


@dataclass
class CompactDateQuery:
    since: date | None = query_field("from", date_format="yyyyMMdd")


@dataclass
class NestedQuery:
    name: str | None = None
    address: Address | None = None


@dataclass
class IgnoredNestedQuery:
    name: str | None = None
    address: Address | None = query_field(ignore=True)


@dataclass
class AmbiguousQuery:
    value: int | str | None = None


@dataclass
class ScalarQuery:
    ratio: float | None = None
    window: timedelta | None = None
    count: int = 0


def test_empty_query_yields_no_pairs():
    assert map_to_query_pairs(CustomerQuery()) == []
    assert to_query_string(CustomerQuery()) == ""


def test_empty_string_is_treated_as_absent():
    assert map_to_query_pairs(CustomerQuery(name="")) == []


def test_date_defaults_to_iso_day_pattern():
    pairs = map_to_query_pairs(CustomerQuery(since=date(2021, 3, 5)))
    assert pairs == [("since", "2021-03-05")]


def test_datetime_uses_day_pattern_too():
    pairs = map_to_query_pairs(CustomerQuery(since=datetime(2021, 3, 5, 13, 45)))
    assert pairs == [("since", "2021-03-05")]


def test_date_format_override_and_key_override():
    pairs = map_to_query_pairs(CompactDateQuery(since=date(2021, 3, 5)))
    assert pairs == [("from", "20210305")]


def test_unset_optional_date_is_absent_not_error():
    assert map_to_query_pairs(CompactDateQuery()) == []


def test_non_date_values_are_lowercased():
    query = CustomerQuery(name="Ada Lovelace", region=Region.NORTH, active=True)
    assert map_to_query_pairs(query) == [
        ("name", "ada lovelace"),
        ("region", "north"),
        ("active", "true"),
    ]


def test_enum_renders_member_name_not_value():
    assert map_to_query_pairs(TicketQuery(priority=Priority.HIGH)) == [("priority", "high")]


def test_pairs_follow_field_declaration_order():
    query = CustomerQuery(page=3, min_balance=Decimal("10.50"), name="X")
    assert [key for key, _ in map_to_query_pairs(query)] == ["name", "min_balance", "pageNumber"]


def test_ignored_field_is_skipped():
    query = CustomerQuery(cursor="abc", page=2)
    assert map_to_query_pairs(query) == [("pageNumber", "2")]


def test_nested_object_field_raises_type_not_allowed():
    with pytest.raises(TypeNotAllowedError) as excinfo:
        map_to_query_pairs(NestedQuery(name="a"))
    assert excinfo.value.field_name == "address"
    assert "address" in str(excinfo.value)


def test_disallowed_type_raises_even_when_value_is_unset():
    with pytest.raises(TypeNotAllowedError):
        map_to_query_pairs(NestedQuery())


def test_ignored_disallowed_field_is_accepted():
    assert map_to_query_pairs(IgnoredNestedQuery(name="a", address=Address("x"))) == [("name", "a")]


def test_union_of_two_value_types_is_not_allowed():
    with pytest.raises(TypeNotAllowedError):
        map_to_query_pairs(AmbiguousQuery(value=1))


def test_numeric_and_timespan_fields_render_with_str():
    query = ScalarQuery(ratio=0.5, window=timedelta(hours=2))
    assert map_to_query_pairs(query) == [
        ("ratio", "0.5"),
        ("window", "2:00:00"),
        ("count", "0"),
    ]


def test_query_object_base_helpers():
    query = CustomerQuery(name="Bob", page=1)
    assert query.to_pairs() == [("name", "bob"), ("pageNumber", "1")]
    assert query.to_query_string() == "name=bob&pageNumber=1"


def test_non_dataclass_query_is_rejected():
    with pytest.raises(TypeError):
        map_to_query_pairs({"name": "x"})


def test_field_table_is_cached_per_type():
    assert describe_query_type(CustomerQuery) is describe_query_type(CustomerQuery)


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("yyyy-MM-dd", "2021-03-05"),
        ("yyyyMMdd", "20210305"),
        ("dd/MM/yy", "05/03/21"),
        ("yyyy-MM-ddTHH:mm:ss", "2021-03-05T14:07:09"),
        ("hh:mm tt", "02:07 PM"),
        ("yyyy-MM-dd HH:mm:ss.fff", "2021-03-05 14:07:09.250"),
        ("'day' d", "day 5"),
        ("%Y/%m/%d", "2021/03/05"),
    ],
)
def test_format_date_patterns(pattern: str, expected: str):
    value = datetime(2021, 3, 5, 14, 7, 9, 250_000)
    assert format_date(value, pattern) == expected


def test_query_type_declared_in_function_keeps_resolvable_fields():
    @dataclass
    class Filter:
        term: str

    @dataclass
    class LocalQuery:
        name: str | None = None
        extra: Filter | None = query_field(ignore=True)

    assert map_to_query_pairs(LocalQuery(name="Ada", extra=Filter("x"))) == [("name", "ada")]


def test_unresolvable_local_field_type_is_not_allowed():
    @dataclass
    class Filter:
        term: str

    @dataclass
    class LocalQuery:
        extra: Filter | None = None

    with pytest.raises(TypeNotAllowedError) as excinfo:
        map_to_query_pairs(LocalQuery())
    assert excinfo.value.field_name == "extra"
