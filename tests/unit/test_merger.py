"""Tests for OptionsMerger and PaginatorConfig."""

from __future__ import annotations

import pytest

from cqrs_ddd_paginator import DEFAULT_WHITELIST, OptionsMerger, PaginatorConfig


def test_defaults_from_config() -> None:
    defaults = OptionsMerger().get_defaults("Articles")
    assert defaults["page"] == 1
    assert defaults["limit"] == 20
    assert defaults["maxLimit"] == 100
    assert defaults["whitelist"] == list(DEFAULT_WHITELIST)
    assert defaults["finder"] == "all"


def test_flat_settings_override_config() -> None:
    defaults = OptionsMerger().get_defaults(
        "Articles", {"limit": 5, "max_limit": 10, "sort_whitelist": ["title"]}
    )
    assert defaults["limit"] == 5
    assert defaults["maxLimit"] == 10
    assert defaults["sortWhitelist"] == ["title"]


def test_alias_scoped_settings() -> None:
    settings = {"limit": 50, "Articles": {"limit": 7}, "Tags": {"limit": 3}}
    merger = OptionsMerger()
    assert merger.get_defaults("Articles", settings)["limit"] == 7
    assert merger.get_defaults("Tags", settings)["limit"] == 3


def test_default_limit_is_bounded_by_max_limit() -> None:
    defaults = OptionsMerger(PaginatorConfig(limit=50, max_limit=10)).get_defaults(
        "Articles"
    )
    assert defaults["limit"] == 10


def test_request_params_override_defaults() -> None:
    merged = OptionsMerger().merge(
        "Articles", {"limit": 5}, {"limit": "15", "page": "2", "sort": "-title"}
    )
    assert merged["limit"] == "15"
    assert merged["page"] == "2"
    assert merged["sort"] == "-title"


def test_params_outside_whitelist_are_dropped() -> None:
    merged = OptionsMerger().merge(
        "Articles", {}, {"maxLimit": "1000", "finder": "secret", "limit": "10"}
    )
    assert merged["maxLimit"] == 100
    assert merged["finder"] == "all"
    assert merged["limit"] == "10"


def test_custom_whitelist() -> None:
    merged = OptionsMerger().merge(
        "Articles", {"whitelist": ["page"]}, {"page": "3", "limit": "99"}
    )
    assert merged["page"] == "3"
    assert merged["limit"] == 20


def test_non_scalar_params_are_dropped() -> None:
    merged = OptionsMerger().merge(
        "Articles",
        {},
        {"contain": {"Authors": {"fields": ["x"]}}, "fields": ["title"], "page": "2"},
    )
    assert "contain" not in merged
    assert "fields" not in merged
    assert merged["page"] == "2"


def test_scope_reads_namespaced_params() -> None:
    params = {"page": "9", "articles": {"page": "2", "limit": "5"}}
    merged = OptionsMerger().merge("Articles", {"scope": "articles"}, params)
    assert merged["page"] == "2"
    assert merged["limit"] == "5"
    assert merged["scope"] == "articles"


def test_scope_without_namespaced_params_uses_defaults() -> None:
    merged = OptionsMerger().merge("Articles", {"scope": "articles"}, {"page": "9"})
    assert merged["page"] == 1


def test_merge_is_pure() -> None:
    merger = OptionsMerger()
    settings = {"Articles": {"limit": 5}}
    params = {"page": "2"}
    first = merger.merge("Articles", settings, params)
    second = merger.merge("Articles", settings, params)
    assert first == second
    assert settings == {"Articles": {"limit": 5}}
    assert params == {"page": "2"}


def test_config_to_settings() -> None:
    config = PaginatorConfig(limit=10, whitelist=("page",))
    assert config.to_settings() == {
        "page": 1,
        "limit": 10,
        "maxLimit": 100,
        "whitelist": ["page"],
        "finder": "all",
    }


@pytest.mark.parametrize(
    "kwargs",
    [{"limit": 0}, {"max_limit": 0}, {"page": 0}, {"limit": -5}, {"limit": True}],
)
def test_config_rejects_non_positive_values(kwargs) -> None:
    with pytest.raises(ValueError, match="must be an integer >= 1"):
        PaginatorConfig(**kwargs)


def test_invalid_limit_setting_falls_back_to_config() -> None:
    defaults = OptionsMerger(PaginatorConfig(limit=5)).get_defaults(
        "Articles", {"limit": 0, "max_limit": 0}
    )
    assert defaults["limit"] == 5
    assert defaults["maxLimit"] == 100
