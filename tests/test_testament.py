"""Tests for book name normalization and testament classification."""

import pytest

from fellowship_api.models import verse as verse_models
from fellowship_api.services.testament import (
    NEW_TESTAMENT_BOOKS,
    OLD_TESTAMENT_BOOKS,
    classify_testament,
    normalize_book_name,
)


def test_canon_sizes():
    assert len(OLD_TESTAMENT_BOOKS) == 39
    assert len(NEW_TESTAMENT_BOOKS) == 27
    assert not OLD_TESTAMENT_BOOKS & NEW_TESTAMENT_BOOKS


@pytest.mark.parametrize(
    "raw, expected",
    [("romans", "Romans"), ("1  JOHN", "1 John"), (" song of solomon ", "Song Of Solomon")],
)
def test_normalize_book_name(raw, expected):
    assert normalize_book_name(raw) == expected


@pytest.mark.parametrize(
    "book, testament",
    [
        ("romans", verse_models.Testament.NEW),
        ("Genesis", verse_models.Testament.OLD),
        ("1 samuel", verse_models.Testament.OLD),
        ("song of solomon", verse_models.Testament.OLD),
        ("REVELATION", verse_models.Testament.NEW),
    ],
)
def test_classify_known_books(book, testament):
    assert classify_testament(book) == testament


def test_unknown_book_defaults_to_new_testament():
    assert classify_testament("Unknown Book") == verse_models.Testament.NEW
