"""
Query options for one pagination call.

``QueryOptions`` is the validated, bounded result of the parsing pipeline.
It is built fresh for every call and handed to the repository's finder;
the paginator itself never executes it.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

OrderSpec = tuple[tuple[str, "SortDirection"], ...]


class SortDirection(str, Enum):
    """Direction of one ordered field."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def coerce(cls, value: Any) -> SortDirection:
        """Accept ``"asc"``/``"desc"`` in any case, or a member."""
        if isinstance(value, SortDirection):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid sort direction: {value!r}") from None


@dataclass(frozen=True)
class EmbedSpec:
    """
    One embedded association.

    ``fields`` is ``None`` for "all fields"; otherwise it always holds the
    association's foreign key.
    """

    association: str
    fields: tuple[str, ...] | None = None

    @property
    def restricted(self) -> bool:
        return self.fields is not None

    def to_dict(self) -> dict[str, Any]:
        if self.fields is None:
            return {}
        return {"fields": list(self.fields)}


def coerce_order(value: Any) -> OrderSpec | str:
    """
    Normalise an ``order`` setting.

    Accepts a mapping ``{field: direction}``, a sequence of
    ``(field, direction)`` pairs or bare field names (``"-created"`` for
    descending). A plain string is a raw order expression and is returned
    untouched.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        pairs = list(value.items())
    else:
        pairs = []
        for item in value:
            if isinstance(item, str):
                if item.startswith("-"):
                    pairs.append((item[1:], SortDirection.DESC))
                else:
                    pairs.append((item, SortDirection.ASC))
            else:
                name, direction = item
                pairs.append((name, direction))
    seen: dict[str, SortDirection] = {}
    for name, direction in pairs:
        seen[str(name)] = SortDirection.coerce(direction)
    return tuple(seen.items())


_KNOWN_KEYS = frozenset(
    {
        "page",
        "limit",
        "maxLimit",
        "order",
        "contain",
        "fields",
        "finder",
        "finderOptions",
        "scope",
        "sortWhitelist",
        "whitelist",
    }
)


@dataclass(frozen=True)
class QueryOptions:
    """
    Immutable container for the finalized pagination parameters.

    Attributes:
        page: Requested page, ``>= 1``.
        limit: Page size, ``1 <= limit <= max_limit``.
        max_limit: Upper bound for ``limit``.
        order: Ordered ``(field, direction)`` pairs, or a raw order string
            passed through from settings.
        contain: Embeds keyed by association name. Structured values supplied
            programmatically are kept as given.
        fields: Projection; empty means all fields.
        finder: Name of the repository finder to run.
        finder_options: Extra options declared with the finder.
        scope: Request-parameter namespace of this pagination.
        sort_whitelist: Fields permitted as the primary sort key.
        extra: Any other caller setting, forwarded to the finder.
    """

    page: int = 1
    limit: int = 20
    max_limit: int = 100
    order: OrderSpec | str = ()
    contain: Mapping[str, EmbedSpec] | Any = field(default_factory=dict)
    fields: tuple[str, ...] = ()
    finder: str = "all"
    finder_options: Mapping[str, Any] = field(default_factory=dict)
    scope: str | None = None
    sort_whitelist: frozenset[str] | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def sort(self) -> str | None:
        """Primary sort field, if any."""
        if isinstance(self.order, str) or not self.order:
            return None
        return self.order[0][0]

    @property
    def direction(self) -> SortDirection | None:
        if isinstance(self.order, str) or not self.order:
            return None
        return self.order[0][1]

    def replace(self, **changes: Any) -> QueryOptions:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> QueryOptions:
        """Build from the pipeline's working mapping."""
        whitelist = data.get("sortWhitelist")
        return cls(
            page=int(data.get("page", 1)),
            limit=int(data.get("limit", 20)),
            max_limit=int(data.get("maxLimit", 100)),
            order=coerce_order(data.get("order")),
            contain=data.get("contain") or {},
            fields=tuple(data.get("fields") or ()),
            finder=str(data.get("finder", "all")),
            finder_options=dict(data.get("finderOptions") or {}),
            scope=data.get("scope"),
            sort_whitelist=frozenset(whitelist) if whitelist is not None else None,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {
            "page": self.page,
            "limit": self.limit,
            "maxLimit": self.max_limit,
            "finder": self.finder,
        }
        if isinstance(self.order, str):
            result["order"] = self.order
        elif self.order:
            result["order"] = {name: d.value for name, d in self.order}
        if isinstance(self.contain, Mapping) and all(
            isinstance(v, EmbedSpec) for v in self.contain.values()
        ):
            if self.contain:
                result["contain"] = {
                    name: spec.to_dict() for name, spec in self.contain.items()
                }
        elif self.contain:
            result["contain"] = self.contain
        if self.fields:
            result["fields"] = list(self.fields)
        if self.scope is not None:
            result["scope"] = self.scope
        if self.sort_whitelist is not None:
            result["sortWhitelist"] = sorted(self.sort_whitelist)
        return result
