"""Tests for FieldSelector, LimitClamp and page normalisation."""

from __future__ import annotations

import pytest

from cqrs_ddd_paginator import FieldNotFoundError, FieldSelector, LimitClamp
from cqrs_ddd_paginator.limits import coerce_positive_int, normalize_page


def test_select_appends_primary_key(articles_schema) -> None:
    assert FieldSelector().select(articles_schema, "title,body") == (
        "title",
        "body",
        "id",
    )


def test_select_keeps_primary_key_position_and_dedupes(articles_schema) -> None:
    assert FieldSelector().select(articles_schema, "id, title,title") == (
        "id",
        "title",
    )


def test_select_accepts_lists(articles_schema) -> None:
    assert FieldSelector().select(articles_schema, ["title"]) == ("title", "id")


@pytest.mark.parametrize("raw", [None, "", " , ", []])
def test_select_empty_means_all_fields(articles_schema, raw) -> None:
    assert FieldSelector().select(articles_schema, raw) == ()


def test_select_unknown_field(articles_schema) -> None:
    with pytest.raises(FieldNotFoundError) as exc_info:
        FieldSelector().select(articles_schema, "titel")
    error = exc_info.value
    assert error.model == "Articles"
    assert "title" in error.suggestions
    assert error.to_dict() == {
        "error": "FIELD_NOT_FOUND",
        "message": str(error),
        "field": "titel",
        "model": "Articles",
        "suggestions": error.suggestions,
    }


def test_apply_sets_fields(articles_schema) -> None:
    options = FieldSelector().apply(articles_schema, {"fields": "title"})
    assert options["fields"] == ("title", "id")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, 5),
        ("7", 7),
        (" 3 ", 3),
        (0, 20),
        (-4, 20),
        ("abc", 20),
        ("2.5", 20),
        (None, 20),
        (True, 20),
    ],
)
def test_coerce_positive_int(value, expected: int) -> None:
    assert coerce_positive_int(value, 20) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("3", 3), ("0", 1), ("-2", 1), ("x", 1), (None, 1), ("2.5", 1), (" 4 ", 4)],
)
def test_normalize_page(value, expected: int) -> None:
    assert normalize_page(value) == expected


class TestLimitClamp:
    def test_limit_above_max_is_clamped(self) -> None:
        options = LimitClamp().clamp(
            {"limit": "500", "maxLimit": 100}, default_limit=20
        )
        assert options["limit"] == 100
        assert options["maxLimit"] == 100

    def test_limit_within_bounds(self) -> None:
        options = LimitClamp().clamp({"limit": "35", "maxLimit": 100}, default_limit=20)
        assert options["limit"] == 35

    def test_invalid_limit_falls_back_to_default(self) -> None:
        options = LimitClamp().clamp({"limit": "-1", "maxLimit": 100}, default_limit=20)
        assert options["limit"] == 20

    def test_missing_max_limit_uses_default_limit(self) -> None:
        options = LimitClamp().clamp({"limit": 50}, default_limit=20)
        assert options == {"limit": 20, "maxLimit": 20}

    def test_input_is_not_mutated(self) -> None:
        original = {"limit": "500", "maxLimit": 100}
        LimitClamp().clamp(original, default_limit=20)
        assert original == {"limit": "500", "maxLimit": 100}
