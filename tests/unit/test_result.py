"""Tests for ParseResult, PageResult and the response envelope."""

from __future__ import annotations

import pytest

from cqrs_ddd_paginator import (
    ErrorKind,
    FieldNotFoundError,
    OutOfRangeError,
    PageResult,
    PagingContext,
    PagingMetadata,
    ParseResult,
    QueryOptions,
    StorageError,
    build_envelope,
)


def _paging(**overrides) -> PagingMetadata:
    values = {
        "page": 1,
        "current": 2,
        "count": 2,
        "perPage": 20,
        "prevPage": False,
        "nextPage": False,
        "pageCount": 1,
    }
    values.update(overrides)
    return PagingMetadata(**values)


def test_parse_result_success() -> None:
    options = QueryOptions(page=2)
    result = ParseResult.success(options)
    assert result.is_ok
    assert bool(result)
    assert result.error_kind is None
    assert result.unwrap() is options


def test_parse_result_failure() -> None:
    error = FieldNotFoundError("titel", "Articles", ["title"])
    result = ParseResult.failure(error)
    assert not result
    assert result.error_kind is ErrorKind.BAD_REQUEST
    with pytest.raises(FieldNotFoundError):
        result.unwrap()


def test_page_result_failure_keeps_context() -> None:
    context = PagingContext().merge("Tags", _paging())
    error = OutOfRangeError(4, 3)
    result: PageResult[dict] = PageResult.failure(error, context)
    assert result.context is context
    assert result.items == []
    assert result.paging is None
    assert result.error_kind is ErrorKind.OUT_OF_RANGE
    with pytest.raises(OutOfRangeError):
        result.unwrap()


def test_error_kind_for_other_errors() -> None:
    assert ErrorKind.of(StorageError("boom")) is None
    assert ErrorKind.of(None) is None


def test_envelope() -> None:
    paging = _paging()
    context = PagingContext().merge("Articles", paging)
    result = PageResult(items=[{"id": 1}, {"id": 2}], paging=paging, context=context)
    envelope = result.to_envelope()
    assert envelope["results"] == [{"id": 1}, {"id": 2}]
    assert envelope["paging"]["Articles"]["perPage"] == 20
    assert envelope == build_envelope(result.items, context)


def test_paging_metadata_accepts_field_names() -> None:
    paging = PagingMetadata(
        page=1,
        current=0,
        count=0,
        per_page=20,
        prev_page=False,
        next_page=False,
        page_count=0,
    )
    assert paging.to_dict()["pageCount"] == 0
