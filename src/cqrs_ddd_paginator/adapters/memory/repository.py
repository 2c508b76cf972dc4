"""InMemoryRepository — list-backed fake for unit tests and prototypes."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ...exceptions import StorageError
from ...options import EmbedSpec, QueryOptions, SortDirection

if TYPE_CHECKING:
    from .schema import InMemoryAssociationGraph, InMemorySchema

Row = dict[str, Any]
Finder = Callable[[list[Row], QueryOptions], Iterable[Row]]


def _find_all(rows: list[Row], options: QueryOptions) -> Iterable[Row]:  # noqa: ARG001
    return rows


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is None, value)


def _project(data: Any, fields: tuple[str, ...] | None) -> Any:
    if fields is None or data is None:
        return data
    if isinstance(data, Mapping):
        return {k: v for k, v in data.items() if k in fields}
    return [{k: v for k, v in item.items() if k in fields} for item in data]


def _embed_fields(contain: Any) -> dict[str, tuple[str, ...] | None]:
    if isinstance(contain, Mapping):
        embeds: dict[str, tuple[str, ...] | None] = {}
        for name, spec in contain.items():
            if isinstance(spec, EmbedSpec):
                embeds[name] = spec.fields
            elif isinstance(spec, Mapping) and spec.get("fields"):
                embeds[name] = tuple(spec["fields"])
            else:
                embeds[name] = None
        return embeds
    if isinstance(contain, (list, tuple)):
        return {str(name): None for name in contain}
    return {}


class InMemoryRepository:
    """
    Rows are plain dicts. Association data is attached to a row under the
    association name (a dict for to-one, a list of dicts for to-many) and
    only returned when the association is contained.

    Custom finders are callables ``(rows, options) -> rows``.
    """

    def __init__(
        self,
        schema: InMemorySchema,
        rows: Iterable[Row] = (),
        *,
        finders: Mapping[str, Finder] | None = None,
    ) -> None:
        self._schema = schema
        self._rows: list[Row] = [dict(row) for row in rows]
        self._finders: dict[str, Finder] = {"all": _find_all, **dict(finders or {})}

    # -- ISchemaDescriptor --------------------------------------------------

    @property
    def alias(self) -> str:
        return self._schema.alias

    @property
    def schema(self) -> InMemorySchema:
        return self._schema

    def primary_key(self) -> str:
        return self._schema.primary_key()

    def has_field(self, name: str) -> bool:
        return self._schema.has_field(name)

    def field_names(self) -> list[str]:
        return self._schema.field_names()

    def associations(self) -> InMemoryAssociationGraph:
        return self._schema.associations()

    # -- querying -----------------------------------------------------------

    def find(
        self, finder: str = "all", options: QueryOptions | None = None
    ) -> InMemoryPageQuery:
        if finder not in self._finders:
            raise StorageError(f"Unknown finder {finder!r} on {self.alias}")
        return InMemoryPageQuery(self, self._finders[finder], options or QueryOptions())

    def rows(self) -> list[Row]:
        return [dict(row) for row in self._rows]

    # ── Test helpers ─────────────────────────────────────────────

    def add(self, row: Row) -> None:
        self._rows.append(dict(row))

    def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryPageQuery:
    """Applies order, page window, projection and embeds to the finder's rows."""

    def __init__(
        self,
        repository: InMemoryRepository,
        finder: Finder,
        options: QueryOptions,
    ) -> None:
        self._repository = repository
        self._finder = finder
        self._options = options

    def repository(self) -> InMemoryRepository:
        return self._repository

    def apply_options(self, options: QueryOptions) -> None:
        self._options = options

    async def all(self) -> list[Row]:
        rows = self._sorted(self._matching())
        start = self._options.offset
        window = rows[start : start + self._options.limit]
        return [self._shape(row) for row in window]

    async def count(self) -> int:
        return len(self._matching())

    def _matching(self) -> list[Row]:
        return list(self._finder(self._repository.rows(), self._options))

    def _sorted(self, rows: list[Row]) -> list[Row]:
        order = self._options.order
        if isinstance(order, str):
            raise StorageError("Raw order expressions are not supported in memory")
        # Stable sorts applied from the least significant key upwards.
        for name, direction in reversed(order):
            getter = self._value_getter(name)
            rows.sort(
                key=lambda row, get=getter: _sort_key(get(row)),  # type: ignore[misc]
                reverse=direction is SortDirection.DESC,
            )
        return rows

    def _value_getter(self, name: str) -> Callable[[Row], Any]:
        repo = self._repository
        column = name
        if "." in name:
            model, _, column = name.partition(".")
            if model != repo.alias:
                if not repo.associations().has(model):
                    raise StorageError(f"Unknown sort field {name!r} on {repo.alias}")
                return lambda row: (row.get(model) or {}).get(column)
        if not repo.has_field(column):
            raise StorageError(f"Unknown sort field {name!r} on {repo.alias}")
        return lambda row: row.get(column)

    def _shape(self, row: Row) -> Row:
        associations = set(self._repository.associations().names())
        fields = self._options.fields
        shaped = {
            key: value
            for key, value in row.items()
            if key not in associations and (not fields or key in fields)
        }
        for name, embed_fields in _embed_fields(self._options.contain).items():
            shaped[name] = _project(row.get(name), embed_fields)
        return shaped
