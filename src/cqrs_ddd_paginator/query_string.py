"""Scoped query strings: ``articles[page]=2`` parsing and pagination links."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from .options import SortDirection

if TYPE_CHECKING:
    from .metadata import PagingMetadata
    from .options import QueryOptions

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_PART_RE = re.compile(r"\[([^\[\]]*)\]")


def parse_query_params(
    items: Iterable[tuple[str, Any]] | Mapping[str, Any],
) -> dict[str, Any]:
    """
    Turn flat query pairs into nested mappings.

    ``[("articles[page]", "2"), ("limit", "5")]`` becomes
    ``{"articles": {"page": "2"}, "limit": "5"}``. The last value of a
    repeated key wins; keys with unbalanced brackets stay flat.
    """
    pairs = items.items() if isinstance(items, Mapping) else items
    result: dict[str, Any] = {}
    for key, value in pairs:
        match = _KEY_RE.match(key)
        if match is None:
            result[key] = value
            continue
        path = [match.group(1), *_PART_RE.findall(match.group(2))]
        node = result
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = value
    return result


class QueryStringBuilder:
    """Build query strings for pagination links (prev/next, HATEOAS)."""

    def build(
        self,
        *,
        paging: PagingMetadata | None = None,
        options: QueryOptions | None = None,
        page: int | None = None,
        scope: str | None = None,
        page_key: str = "page",
        limit_key: str = "limit",
        sort_key: str = "sort",
    ) -> str:
        """Produce a query string; keys are namespaced as ``scope[key]`` when scoped."""
        params: dict[str, str | int] = {}
        if page is None and paging is not None:
            page = paging.page
        if page is not None:
            params[page_key] = page
        if paging is not None and paging.limit_override is not None:
            params[limit_key] = paging.limit_override
        sort = self._sort_value(options, paging)
        if sort:
            params[sort_key] = sort
        if scope is None and paging is not None:
            scope = paging.scope
        if scope:
            params = {f"{scope}[{key}]": value for key, value in params.items()}
        return urlencode(params) if params else ""

    def links(
        self,
        paging: PagingMetadata,
        *,
        options: QueryOptions | None = None,
        base_path: str = "",
    ) -> dict[str, str | None]:
        """Return ``prev``/``next`` links, ``None`` where no such page exists."""

        def link(page: int) -> str:
            query = self.build(paging=paging, options=options, page=page)
            return f"{base_path}?{query}"

        return {
            "prev": link(paging.page - 1) if paging.prev_page else None,
            "next": link(paging.page + 1) if paging.next_page else None,
        }

    @staticmethod
    def _sort_value(
        options: QueryOptions | None, paging: PagingMetadata | None
    ) -> str | None:
        if options is not None and options.order and not isinstance(options.order, str):
            return ",".join(
                f"-{name}" if direction is SortDirection.DESC else name
                for name, direction in options.order
            )
        if paging is not None and paging.sort:
            if paging.direction == SortDirection.DESC.value:
                return f"-{paging.sort}"
            return paging.sort
        return None
