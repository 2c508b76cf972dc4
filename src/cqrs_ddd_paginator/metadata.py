"""PagingMetadata, PagingContext and the builder that computes them."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import OutOfRangeError
from .options import coerce_order

if TYPE_CHECKING:
    from .options import QueryOptions

logger = logging.getLogger(__name__)


class PagingMetadata(BaseModel):
    """
    Pagination state of one alias, as exposed to the response layer.

    ``to_dict()`` uses the camelCase keys of the response envelope;
    ``limit_override`` is serialised as ``limit``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    finder: str = "all"
    page: int
    current: int
    count: int
    per_page: int = Field(alias="perPage")
    prev_page: bool = Field(alias="prevPage")
    next_page: bool = Field(alias="nextPage")
    page_count: int = Field(alias="pageCount")
    sort: str | None = None
    direction: str | None = None
    limit_override: int | None = Field(default=None, alias="limit")
    sort_default: str | None = Field(default=None, alias="sortDefault")
    direction_default: str | None = Field(default=None, alias="directionDefault")
    scope: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class PagingContext(Mapping[str, PagingMetadata]):
    """
    Request-scoped paging metadata keyed by entity alias.

    Immutable: ``merge`` returns a new context. The caller threads the
    value from one pagination call to the next within a request.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, PagingMetadata] | None = None) -> None:
        self._entries: dict[str, PagingMetadata] = dict(entries or {})

    def __getitem__(self, alias: str) -> PagingMetadata:
        return self._entries[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PagingContext({self._entries!r})"

    def merge(self, alias: str, paging: PagingMetadata) -> PagingContext:
        """Return a new context with *paging* stored under *alias* (last write wins)."""
        if alias in self._entries:
            logger.warning(
                "Overwriting paging metadata for %s (scope %r -> %r)",
                alias,
                self._entries[alias].scope,
                paging.scope,
            )
        entries = dict(self._entries)
        entries[alias] = paging
        return PagingContext(entries)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {alias: paging.to_dict() for alias, paging in self._entries.items()}


class PaginationMetadataBuilder:
    """Compute page count, clamp the effective page and flag neighbours."""

    def build(
        self,
        options: QueryOptions,
        *,
        count: int,
        current: int,
        defaults: Mapping[str, Any],
    ) -> PagingMetadata:
        limit = options.limit
        page_count = -(-count // limit) if count > 0 else 0
        page = max(min(options.page, page_count), 1)

        sort_default = direction_default = None
        default_order = coerce_order(defaults.get("order"))
        if not isinstance(default_order, str) and len(default_order) == 1:
            sort_default = default_order[0][0]
            direction_default = default_order[0][1].value

        direction = options.direction
        return PagingMetadata(
            finder=options.finder,
            page=page,
            current=current,
            count=count,
            per_page=limit,
            prev_page=page > 1,
            next_page=count > page * limit,
            page_count=page_count,
            sort=options.sort,
            direction=direction.value if direction is not None else None,
            limit_override=limit if defaults.get("limit") != limit else None,
            sort_default=sort_default,
            direction_default=direction_default,
            scope=options.scope,
        )

    def check_range(self, requested_page: int, paging: PagingMetadata) -> None:
        """Raise ``OutOfRangeError`` when *requested_page* was clamped down."""
        if requested_page > paging.page:
            raise OutOfRangeError(requested_page, paging.page_count, paging)
