from __future__ import annotations

from datetime import date

import pytest

from library_api.errors import InvalidInput
from library_api.utils import validators


def test_register_rules():
    assert validators.validate_register({"username": " alice ", "password": "secret1"}) == {
        "username": "alice",
        "password": "secret1",
    }
    with pytest.raises(InvalidInput) as exc:
        validators.validate_register({"username": "a!", "password": "123"})
    assert len(exc.value.details["errors"]) == 3


def test_book_rules():
    ok = validators.validate_book({"title": "X", "author": "Y", "genre": "Z", "publishedYear": "2020"})
    assert ok == {"title": "X", "author": "Y", "genre": "Z", "published_year": 2020}

    with pytest.raises(InvalidInput) as exc:
        validators.validate_book({"title": " ", "author": "Y", "genre": "g" * 101, "publishedYear": 999})
    assert len(exc.value.details["errors"]) == 3

    with pytest.raises(InvalidInput):
        validators.validate_book({"title": "X", "author": "Y", "genre": "Z", "publishedYear": date.today().year + 1})
    with pytest.raises(InvalidInput):
        validators.validate_book({"title": "X", "author": "Y", "genre": "Z", "publishedYear": True})


@pytest.mark.parametrize("payload", [
    {},
    {"bookIds": []},
    {"bookIds": "1,2"},
    {"bookIds": [1, "x"]},
    {"bookIds": [1, 1]},
    {"bookIds": [1.5]},
])
def test_id_list_rejects(payload):
    with pytest.raises(InvalidInput):
        validators.validate_id_list(payload, "bookIds", "book")


def test_id_list_accepts_numeric_strings_and_keeps_order():
    assert validators.validate_id_list({"bookIds": [3, "1", 2]}, "bookIds", "book") == [3, 1, 2]


@pytest.mark.parametrize("raw,expected", [
    (None, 10), ("", 10), ("abc", 10), ("0", 10), ("-3", 10), ("7", 7), ("500", 100),
])
def test_parse_positive_int(raw, expected):
    assert validators.parse_positive_int(raw, 10, 100) == expected


@pytest.mark.parametrize("raw,expected", [("true", True), ("false", False), (None, None), ("yes", None)])
def test_parse_returned_filter(raw, expected):
    assert validators.parse_returned_filter(raw) is expected


@pytest.mark.parametrize("value", ["--1", "²", "1.0", " ", "-"])
def test_id_list_rejects_strings_that_are_not_plain_integers(value):
    with pytest.raises(InvalidInput):
        validators.validate_id_list({"bookIds": [value]}, "bookIds", "book")


def test_id_bounds():
    assert validators.validate_id_list({"bookIds": [validators.MAX_ID]}, "bookIds", "book") == [validators.MAX_ID]
    with pytest.raises(InvalidInput):
        validators.validate_id_list({"bookIds": [validators.MAX_ID + 1]}, "bookIds", "book")


@pytest.mark.parametrize("payload", [[], "x", 3, False])
def test_json_object_rejects_non_objects(payload):
    with pytest.raises(InvalidInput):
        validators.json_object(payload)


def test_json_object_treats_missing_body_as_empty():
    assert validators.json_object(None) == {}
