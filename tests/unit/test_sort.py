"""Tests for SortParser and SortValidator."""

from __future__ import annotations

import logging

import pytest

from cqrs_ddd_paginator import SortDirection, SortParser, SortValidator

ASC = SortDirection.ASC
DESC = SortDirection.DESC


def test_parse_mixed_directions() -> None:
    order = SortParser().parse("title,-author_id")
    assert list(order.items()) == [("title", ASC), ("author_id", DESC)]


def test_parse_skips_empty_tokens_and_whitespace() -> None:
    order = SortParser().parse(" title , ,-, - created ,")
    assert list(order.items()) == [("title", ASC), ("created", DESC)]


def test_parse_repeated_field_keeps_position_takes_last_direction() -> None:
    order = SortParser().parse("title,created,-title")
    assert list(order.items()) == [("title", DESC), ("created", ASC)]


def test_parse_empty() -> None:
    assert SortParser().parse("") == {}
    assert SortParser().parse(None) == {}


def test_apply_replaces_sort_with_order() -> None:
    options = SortParser().apply({"sort": "-title", "limit": 5})
    assert "sort" not in options
    assert options["order"] == (("title", DESC),)
    assert options["limit"] == 5


def test_apply_keeps_configured_order_without_sort_param() -> None:
    options = SortParser().apply({"order": {"created": "desc"}})
    assert options["order"] == {"created": "desc"}


def test_apply_defaults_to_empty_order() -> None:
    assert SortParser().apply({})["order"] == ()


class TestSortValidatorWhitelist:
    def test_whitelisted_primary_keeps_full_order(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema,
            {
                "order": (("title", ASC), ("computed_score", DESC)),
                "sortWhitelist": ["title"],
            },
        )
        # Secondary fields are trusted once the primary is whitelisted.
        assert options["order"] == (("title", ASC), ("computed_score", DESC))

    def test_non_whitelisted_primary_drops_order(
        self, articles_schema, caplog
    ) -> None:
        with caplog.at_level(logging.WARNING):
            options = SortValidator().validate(
                articles_schema,
                {"order": (("body", ASC), ("title", ASC)), "sortWhitelist": ["title"]},
            )
        assert options["order"] == ()
        assert "not whitelisted" in caplog.text

    def test_empty_whitelist_drops_any_order(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": (("title", ASC),), "sortWhitelist": []}
        )
        assert options["order"] == ()


class TestSortValidatorQualification:
    def test_qualifies_known_fields_with_alias(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": (("title", ASC), ("created", DESC))}
        )
        assert options["order"] == (
            ("Articles.title", ASC),
            ("Articles.created", DESC),
        )

    def test_already_qualified_field_is_kept(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": (("Articles.title", DESC),)}
        )
        assert options["order"] == (("Articles.title", DESC),)

    def test_association_field(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": (("Authors.lastname", ASC),)}
        )
        assert options["order"] == (("Authors.lastname", ASC),)

    def test_unknown_fields_pass_through(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema,
            {"order": (("nope", ASC), ("Authors.nope", ASC), ("Other.id", ASC))},
        )
        assert options["order"] == (
            ("nope", ASC),
            ("Authors.nope", ASC),
            ("Other.id", ASC),
        )

    def test_mapping_order_from_settings(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": {"created": "DESC", "id": "asc"}}
        )
        assert options["order"] == (
            ("Articles.created", DESC),
            ("Articles.id", ASC),
        )

    def test_raw_string_order_is_untouched(self, articles_schema) -> None:
        options = SortValidator().validate(
            articles_schema, {"order": "created DESC NULLS LAST"}
        )
        assert options["order"] == "created DESC NULLS LAST"


@pytest.mark.parametrize("order", [{"created": "sideways"}, 5, [("created",)]])
def test_malformed_order_setting_raises(articles_schema, order) -> None:
    with pytest.raises(ValueError, match="Invalid order setting for Articles"):
        SortValidator().validate(articles_schema, {"order": order})
