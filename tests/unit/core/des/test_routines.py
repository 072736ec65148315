from __future__ import annotations

import datetime
import decimal
import typing as t
import uuid

import pytest

import typtree
from typtree.core import constants
from typtree.core.des.factory import coercers
from typtree.core.des.routines import TextCoercerRoutine
from tests import objects

GUID = "AC1FC4BC-087A-4242-B8EE-C53EBE9887A5"


class Celsius(float):
    ...


class Point:
    def __init__(self, x: int, y: int):
        self.x, self.y = x, y

    def __eq__(self, other):
        return (self.x, self.y) == (other.x, other.y)


def coerce_point(text, context):
    x, y = text.split(",")
    return Point(int(x), int(y))


typtree.register(coerce_point, lambda t: t is Point)


@pytest.mark.parametrize(
    argnames=("given_annotation", "given_raw", "expected_value"),
    argvalues=[
        pytest.param(str, "John Sheehan", "John Sheehan", id="str"),
        pytest.param(str, "  padded ", "  padded ", id="str_untouched"),
        pytest.param(int, "28", 28, id="int"),
        pytest.param(int, " 28\n", 28, id="int_whitespace"),
        pytest.param(int, "9223372036854775807", 9223372036854775807, id="int_big"),
        pytest.param(int, "1,000", 1000, id="int_grouped"),
        pytest.param(float, "99.5", 99.5, id="float"),
        pytest.param(Celsius, "21.5", Celsius(21.5), id="float_subclass"),
        pytest.param(
            decimal.Decimal, "99.9999", decimal.Decimal("99.9999"), id="decimal"
        ),
        pytest.param(bool, "true", True, id="bool_true"),
        pytest.param(bool, "False", False, id="bool_false"),
        pytest.param(bool, "TRUE", True, id="bool_upper"),
        pytest.param(bool, "1", True, id="bool_one"),
        pytest.param(bool, "0", False, id="bool_zero"),
        pytest.param(uuid.UUID, GUID, uuid.UUID(GUID), id="uuid"),
        pytest.param(uuid.UUID, GUID.lower(), uuid.UUID(GUID), id="uuid_lower"),
        pytest.param(
            datetime.datetime,
            "2010-02-21 09:35:00",
            datetime.datetime(2010, 2, 21, 9, 35),
            id="datetime",
        ),
        pytest.param(
            datetime.date, "2010-02-21", datetime.date(2010, 2, 21), id="date"
        ),
        pytest.param(objects.Color, "r", objects.Color.RED, id="enum_value"),
        pytest.param(
            objects.Color, "dark_blue", objects.Color.DARK_BLUE, id="enum_name"
        ),
        pytest.param(
            objects.Color, "DarkBlue", objects.Color.DARK_BLUE, id="enum_pascal"
        ),
        pytest.param(objects.Priority, "2", objects.Priority.HIGH, id="int_enum"),
        pytest.param(Point, "1,2", Point(1, 2), id="registered"),
    ],
)
def test_coerce(given_annotation, given_raw, expected_value):
    # Given
    coerce = coercers.factory(given_annotation)
    # When
    value = coerce(given_raw)
    # Then
    assert value == expected_value
    assert type(value) is type(expected_value)


@pytest.mark.parametrize(
    argnames="given_annotation",
    argvalues=[int, float, decimal.Decimal, bool, uuid.UUID, datetime.datetime],
    ids=repr,
)
@pytest.mark.parametrize(argnames="given_raw", argvalues=[None, "", "  "], ids=repr)
def test_coerce_empty(given_annotation, given_raw):
    # Given
    coerce = coercers.factory(given_annotation)
    nullable = coercers.factory(t.Optional[given_annotation])
    # When
    value = coerce(given_raw)
    nulled = nullable(given_raw)
    # Then
    assert value is constants.empty
    assert nulled is None


@pytest.mark.parametrize(
    argnames=("given_annotation", "given_raw", "expected_value"),
    argvalues=[
        pytest.param(str, None, "", id="none"),
        pytest.param(str, "", "", id="empty"),
        pytest.param(t.Optional[str], "", None, id="nullable_empty"),
        pytest.param(t.Optional[str], None, None, id="nullable_none"),
    ],
)
def test_coerce_empty_text(given_annotation, given_raw, expected_value):
    # Given
    coerce = coercers.factory(given_annotation)
    # When
    value = coerce(given_raw)
    # Then
    assert value == expected_value


@pytest.mark.parametrize(
    argnames=("given_annotation", "given_raw"),
    argvalues=[
        pytest.param(int, "twenty", id="int"),
        pytest.param(int, "1.5", id="int_fraction"),
        pytest.param(int, "1_000", id="int_underscore"),
        pytest.param(float, "1_000.5", id="float_underscore"),
        pytest.param(decimal.Decimal, "1_000", id="decimal_underscore"),
        pytest.param(decimal.Decimal, "NaN", id="decimal_nan"),
        pytest.param(decimal.Decimal, "Infinity", id="decimal_infinity"),
        pytest.param(float, "nope", id="float"),
        pytest.param(decimal.Decimal, "nope", id="decimal"),
        pytest.param(bool, "yes", id="bool"),
        pytest.param(uuid.UUID, "not-a-guid", id="uuid"),
        pytest.param(datetime.datetime, "not a date", id="datetime"),
        pytest.param(objects.Color, "purple", id="enum"),
        pytest.param(Point, "1", id="registered"),
    ],
)
def test_coerce_failure(given_annotation, given_raw):
    # Given
    coerce = coercers.factory(given_annotation)
    # When/Then
    with pytest.raises(typtree.CoercionFailure) as info:
        coerce(given_raw)
    assert info.value.raw == given_raw
    assert info.value.target is given_annotation
    assert info.value.__cause__ is not None


@pytest.mark.parametrize(
    argnames=("given_culture", "given_annotation", "given_raw", "expected_value"),
    argvalues=[
        pytest.param("de-DE", float, "1.234,5", 1234.5, id="de-float"),
        pytest.param(
            "de-DE", decimal.Decimal, "99,9999", decimal.Decimal("99.9999"), id="de"
        ),
        pytest.param("fr-FR", int, "1 000", 1000, id="fr-int"),
        pytest.param(
            "en-GB",
            datetime.datetime,
            "02/03/2010",
            datetime.datetime(2010, 3, 2),
            id="gb-date",
        ),
    ],
)
def test_coerce_culture(given_culture, given_annotation, given_raw, expected_value):
    # Given
    coerce = coercers.factory(given_annotation)
    context = typtree.DeserializationContext(culture=given_culture)
    # When
    value = coerce(given_raw, context)
    # Then
    assert value == expected_value


def test_coerce_date_format():
    # Given
    coerce = coercers.factory(datetime.datetime)
    context = typtree.DeserializationContext(date_format="dd/MM/yyyy HH:mm")
    # When
    value = coerce("21/02/2010 09:35", context)
    # Then
    assert value == datetime.datetime(2010, 2, 21, 9, 35)


def test_factory_is_cached():
    # Then
    assert coercers.factory(int) is coercers.factory(int)
    assert coercers.factory(int) is not coercers.factory(t.Optional[int])


@pytest.mark.parametrize(
    argnames="given_annotation",
    argvalues=[objects.Friend, t.List[int], t.Dict[str, int], t.Any],
    ids=repr,
)
def test_factory_rejects_non_scalars(given_annotation):
    # When/Then
    with pytest.raises(TypeError):
        coercers.factory(given_annotation)


def test_text_routine_for_str_subclass():
    # Given
    class Name(str):
        ...

    coerce = TextCoercerRoutine(Name).coercer()
    # When
    value = coerce("Kim")
    # Then
    assert type(value) is Name
    assert coerce("") == ""
