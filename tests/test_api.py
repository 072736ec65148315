from __future__ import annotations

import datetime
import decimal
import uuid

import pytest
from lxml import etree

import typtree
from tests import objects

GUID = "AC1FC4BC-087A-4242-B8EE-C53EBE9887A5"


@pytest.fixture
def person():
    return typtree.deserialize(objects.person_elements(), objects.Person)


@pytest.mark.parametrize(
    argnames=("given_member", "expected_value"),
    argvalues=[
        ("name", objects.NAME),
        ("start_date", objects.START_DATE),
        ("age", objects.AGE),
        ("percent", objects.PERCENT),
        ("big_number", objects.BIG_NUMBER),
        ("is_cool", objects.IS_COOL),
        ("unique_id", objects.UNIQUE_ID),
    ],
)
def test_elements_populate_scalars(person, given_member, expected_value):
    # Then
    assert getattr(person, given_member) == expected_value


def test_elements_populate_nested(person):
    # Then
    assert person.best_friend.name == objects.BEST_FRIEND
    assert person.best_friend.since == objects.BEST_FRIEND_SINCE


def test_elements_populate_sequences(person):
    # Then
    assert [(f.name, f.since) for f in person.friends] == objects.FRIENDS
    assert isinstance(person.foes, objects.Foes)
    assert [f.nickname for f in person.foes] == objects.FOES
    assert person.foes.team == objects.TEAM


def test_ignored_and_readonly_members_untouched(person):
    # Then
    assert person.ignore == "untouched"
    assert person.read_only == "untouched"


def test_underscored_names_match():
    # Given
    document = objects.person_elements(underscored=True)
    # When
    underscored = typtree.deserialize(document, objects.Person)
    plain = typtree.deserialize(objects.person_elements(), objects.Person)
    # Then
    assert vars(underscored).keys() == vars(plain).keys()
    for name in ("name", "start_date", "age", "percent", "big_number", "unique_id"):
        assert getattr(underscored, name) == getattr(plain, name)
    assert underscored.best_friend.name == plain.best_friend.name


def test_attributes_match_elements(person):
    # When
    attributed = typtree.deserialize(objects.person_attributes(), objects.Person)
    # Then
    for name in (
        "name",
        "start_date",
        "age",
        "percent",
        "big_number",
        "is_cool",
        "unique_id",
        "ignore",
        "read_only",
    ):
        assert getattr(attributed, name) == getattr(person, name)
    assert attributed.best_friend.name == person.best_friend.name
    assert attributed.best_friend.since == person.best_friend.since
    assert attributed.friends == []
    assert len(attributed.foes) == 0
    assert attributed.foes.team is None


@pytest.mark.parametrize(
    argnames="given_document",
    argvalues=[
        pytest.param(
            "<NullableValues><Id/><StartDate/><UniqueId/></NullableValues>", id="empty"
        ),
        pytest.param("<NullableValues/>", id="absent"),
        pytest.param('<NullableValues Id="" StartDate=""/>', id="empty_attributes"),
    ],
)
def test_nullable_empty_values(given_document):
    # When
    values = typtree.deserialize(given_document, objects.NullableValues)
    # Then
    assert (values.id, values.start_date, values.unique_id) == (None, None, None)


def test_nullable_populated_values():
    # Given
    document = (
        "<NullableValues>"
        "<Id>123</Id>"
        "<StartDate>2010-02-21 09:35:00</StartDate>"
        f"<UniqueId>{GUID}</UniqueId>"
        "</NullableValues>"
    )
    # When
    values = typtree.deserialize(document, objects.NullableValues)
    # Then
    assert values.id == 123
    assert values.start_date == datetime.datetime(2010, 2, 21, 9, 35)
    assert values.unique_id == uuid.UUID(GUID)


def test_root_element_name_is_lenient():
    # Given
    document = "<Whatever><Name>Kim</Name><Since>1999</Since></Whatever>"
    # When
    friend = typtree.deserialize(document, objects.Friend)
    # Then
    assert (friend.name, friend.since) == ("Kim", 1999)


def test_root_element_option():
    # Given
    document = (
        "<Response><Status>ok</Status>"
        "<Friend><Name>Kim</Name><Since>1999</Since></Friend>"
        "</Response>"
    )
    # When
    friend = typtree.deserialize(document, objects.Friend, root_element="friend")
    # Then
    assert (friend.name, friend.since) == ("Kim", 1999)


def test_custom_date_format():
    # Given
    document = "<Holder><Date>08 2010 Feb, 11:11 11 AM +01:00</Date></Holder>"
    offset = datetime.timezone(datetime.timedelta(hours=1))
    # When
    holder = typtree.deserialize(
        document, objects.DateHolder, date_format="dd yyyy MMM, hh:mm ss tt zzz"
    )
    # Then
    assert holder.date == datetime.datetime(2010, 2, 8, 11, 11, 11, tzinfo=offset)


def test_deserialize_is_idempotent():
    # Given
    document = objects.person_attributes()
    # When
    first = typtree.deserialize(document, objects.Person)
    second = typtree.deserialize(document, objects.Person)
    # Then
    assert first is not second
    assert vars(first).keys() == vars(second).keys()
    for name in ("name", "start_date", "age", "percent", "unique_id", "friends"):
        assert getattr(first, name) == getattr(second, name)


def test_eventful_venue_search():
    # When
    search = typtree.deserialize(objects.eventful(), objects.VenueSearch)
    # Then
    assert search.total_items == 3
    assert search.page_size == 10
    assert search.search_time == decimal.Decimal("0.0154")
    assert search.page_items is None
    assert len(search.venues) == 3
    assert search.venues[0].name == "Tivoli"
    assert search.venues[0].id == "V0-001-000189211-1"
    assert search.venues[0].postal_code == ""
    assert (
        search.venues[1].url
        == "http://eventful.com/brisbane/venues/tivoli-/V0-001-002169294-8"
    )
    assert search.venues[2].id == "V0-001-000266914-3"


def test_culture_option():
    # Given
    document = "<Holder><Percent>99,9999</Percent><Age>1.000</Age></Holder>"
    Holder = type(
        "Holder", (), {"__annotations__": {"percent": decimal.Decimal, "age": int}}
    )
    # When
    holder = typtree.deserialize(document, Holder, culture="de-DE")
    # Then
    assert holder.percent == decimal.Decimal("99.9999")
    assert holder.age == 1000


def test_enums_and_dataclasses():
    # Given
    document = (
        "<Paint Color='DarkBlue' Priority='2'>"
        "<Tags><Tag>matte</Tag><Tag>blue</Tag></Tags>"
        "<Sizes><Size>1</Size><Size>5</Size><Size>1</Size></Sizes>"
        "</Paint>"
    )
    # When
    paint = typtree.deserialize(document, objects.Paint)
    # Then
    assert paint == objects.Paint(
        color=objects.Color.DARK_BLUE,
        priority=objects.Priority.HIGH,
        tags=("matte", "blue"),
        sizes=frozenset({1, 5}),
    )


def test_namespace_option():
    # Given
    document = (
        '<p:Friend xmlns:p="urn:people" Since="1999">'
        "<Name>Wrong</Name><p:Name>Kim</p:Name>"
        "</p:Friend>"
    )
    # When
    friend = typtree.deserialize(document, objects.Friend, namespace="urn:people")
    # Then
    assert (friend.name, friend.since) == ("Kim", 1999)


@pytest.mark.parametrize(
    argnames="given_document",
    argvalues=[
        pytest.param("", id="empty"),
        pytest.param("<Person><Name>Kim</Person>", id="unbalanced"),
        pytest.param("not xml", id="text"),
    ],
)
def test_malformed_document(given_document):
    # When/Then
    with pytest.raises(typtree.DocumentMalformed):
        typtree.deserialize(given_document, objects.Person)


def test_coercion_failure():
    # When/Then
    with pytest.raises(typtree.CoercionFailure) as info:
        typtree.deserialize("<Person><IsCool>maybe</IsCool></Person>", objects.Person)
    assert info.value.member == "is_cool"
    assert info.value.raw == "maybe"


def test_unsupported_member_type():
    # When/Then
    with pytest.raises(typtree.UnsupportedMemberType):
        typtree.deserialize("<Untyped/>", objects.Untyped)


def test_stdlib_value_type_is_unsupported():
    # When/Then
    with pytest.raises(typtree.UnsupportedMemberType) as info:
        typtree.deserialize("<Clock><At>10:30</At></Clock>", objects.Clock)
    assert info.value.member == "at"


@pytest.mark.parametrize(
    argnames="given_document",
    argvalues=[
        pytest.param(b"<Friend><Name>Kim</Name></Friend>", id="bytes"),
        pytest.param(
            etree.fromstring("<Friend><Name>Kim</Name></Friend>"), id="element"
        ),
        pytest.param(
            etree.ElementTree(etree.fromstring("<Friend><Name>Kim</Name></Friend>")),
            id="tree",
        ),
        pytest.param(
            typtree.parse("<Friend><Name>Kim</Name></Friend>"), id="document_node"
        ),
    ],
)
def test_document_inputs(given_document):
    # When
    friend = typtree.deserialize(given_document, objects.Friend)
    # Then
    assert friend.name == "Kim"


def test_response_content():
    # Given
    class Response:
        content = b"<Friend><Name>Kim</Name></Friend>"

    # When
    friend = typtree.deserialize(Response(), objects.Friend)
    # Then
    assert friend.name == "Kim"


def test_with_options_returns_new_deserializer():
    # Given
    deserializer = typtree.Deserializer()
    # When
    german = deserializer.with_options(culture="de-DE", root_element="Friend")
    # Then
    assert german is not deserializer
    assert deserializer.context == typtree.DeserializationContext()
    assert german.context.culture.name == "de-DE"
    assert german.context.root_element == "Friend"


def test_per_call_options_do_not_stick():
    # Given
    deserializer = typtree.Deserializer().with_options(culture="de-DE")
    Holder = type("Holder", (), {"__annotations__": {"price": float}})
    # When
    local = deserializer.deserialize(
        "<Holder><Price>1.5</Price></Holder>", Holder, culture="en-US"
    )
    german = deserializer.deserialize("<Holder><Price>1,5</Price></Holder>", Holder)
    # Then
    assert local.price == german.price == 1.5
    assert deserializer.context.culture.name == "de-DE"


def test_explicit_context():
    # Given
    context = typtree.DeserializationContext(root_element="Friend")
    document = "<Wrapper><Friend><Name>Kim</Name></Friend></Wrapper>"
    # When
    friend = typtree.deserialize(document, objects.Friend, context=context)
    # Then
    assert friend.name == "Kim"


def test_from_env(monkeypatch):
    # Given
    monkeypatch.setenv("TYPTREE_CULTURE", "fr-FR")
    monkeypatch.setenv("TYPTREE_DATE_FORMAT", "dd/MM/yyyy")
    # When
    deserializer = typtree.Deserializer.from_env(root_element="Holder")
    # Then
    assert deserializer.context.culture.name == "fr-FR"
    assert deserializer.context.date_format == "dd/MM/yyyy"
    assert deserializer.context.root_element == "Holder"


def test_registered_coercer():
    # Given
    class Money:
        def __init__(self, amount):
            self.amount = amount

    typtree.register(
        lambda text, context: Money(decimal.Decimal(text.strip("$"))),
        lambda t: t is Money,
    )
    Wallet = type("Wallet", (), {"__annotations__": {"cash": Money}})
    # When
    wallet = typtree.deserialize("<Wallet Cash='$12.50'/>", Wallet)
    # Then
    assert wallet.cash.amount == decimal.Decimal("12.50")
