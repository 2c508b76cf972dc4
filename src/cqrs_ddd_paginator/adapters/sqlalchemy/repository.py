"""
SQLAlchemyRepository — async page queries over a declarative model.

``find(finder, options)`` returns a :class:`SQLAlchemyPageQuery`; nothing
is executed until ``all()`` or ``count()`` is awaited::

    repo = SQLAlchemyRepository(ArticleModel, session, alias="Articles")
    result = await paginator.paginate(repo, settings, params)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.orm import load_only, selectinload

from ...exceptions import StorageError
from ...options import EmbedSpec, QueryOptions, SortDirection
from .schema import SQLAlchemyAssociationGraph, SQLAlchemySchema

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

Finder = Callable[["Select[Any]", QueryOptions], "Select[Any]"]


def _find_all(stmt: Select[Any], options: QueryOptions) -> Select[Any]:  # noqa: ARG001
    return stmt


class SQLAlchemyRepository:
    """
    Paginatable repository bound to one ``AsyncSession``.

    Custom finders are callables ``(select_stmt, options) -> select_stmt``
    that narrow the base ``select(model)``.
    """

    def __init__(
        self,
        model: type[Any],
        session: AsyncSession,
        *,
        alias: str | None = None,
        finders: Mapping[str, Finder] | None = None,
    ) -> None:
        self._schema = SQLAlchemySchema(model, alias=alias)
        self._session = session
        self._finders: dict[str, Finder] = {"all": _find_all, **dict(finders or {})}

    @property
    def alias(self) -> str:
        return self._schema.alias

    @property
    def model(self) -> type[Any]:
        return self._schema.model

    @property
    def session(self) -> AsyncSession:
        return self._session

    def primary_key(self) -> str:
        return self._schema.primary_key()

    def has_field(self, name: str) -> bool:
        return self._schema.has_field(name)

    def field_names(self) -> list[str]:
        return self._schema.field_names()

    def associations(self) -> SQLAlchemyAssociationGraph:
        return self._schema.associations()

    def find(
        self, finder: str = "all", options: QueryOptions | None = None
    ) -> SQLAlchemyPageQuery:
        if finder not in self._finders:
            raise StorageError(f"Unknown finder {finder!r} on {self.alias}")
        return SQLAlchemyPageQuery(
            self, self._finders[finder], options or QueryOptions()
        )


class SQLAlchemyPageQuery:
    def __init__(
        self,
        repository: SQLAlchemyRepository,
        finder: Finder,
        options: QueryOptions,
    ) -> None:
        self._repository = repository
        self._finder = finder
        self._options = options

    def repository(self) -> SQLAlchemyRepository:
        return self._repository

    def apply_options(self, options: QueryOptions) -> None:
        self._options = options

    async def all(self) -> list[Any]:
        result = await self._repository.session.execute(self.statement())
        return list(result.scalars().all())

    async def count(self) -> int:
        subquery = self._base_statement().order_by(None).subquery()
        stmt = select(func.count()).select_from(subquery)
        result = await self._repository.session.execute(stmt)
        return int(result.scalar_one())

    def _base_statement(self) -> Select[Any]:
        return self._finder(select(self._repository.model), self._options)

    def statement(self) -> Select[Any]:
        """The compiled page ``SELECT`` (order, projection, embeds, window)."""
        options = self._options
        stmt = self._base_statement()
        stmt = self._apply_order(stmt, options)
        stmt = self._apply_fields(stmt, options)
        stmt = self._apply_contain(stmt, options)
        return stmt.limit(options.limit).offset(options.offset)

    def _apply_order(self, stmt: Select[Any], options: QueryOptions) -> Select[Any]:
        if isinstance(options.order, str):
            raise StorageError("Raw order expressions are not supported")
        model = self._repository.model
        joined: set[str] = set()
        for name, direction in options.order:
            column, relation = self._resolve_column(name)
            if relation is not None and relation not in joined:
                stmt = stmt.outerjoin(getattr(model, relation))
                joined.add(relation)
            stmt = stmt.order_by(
                column.desc() if direction is SortDirection.DESC else column.asc()
            )
        return stmt

    def _resolve_column(self, name: str) -> tuple[Any, str | None]:
        repo = self._repository
        column = name
        if "." in name:
            prefix, _, column = name.partition(".")
            if prefix != repo.alias:
                graph = repo.associations()
                if not graph.has(prefix):
                    raise StorageError(f"Unknown sort field {name!r} on {repo.alias}")
                association = graph.get(prefix)
                target = association.target_schema()
                if association.uselist or not target.has_field(column):
                    raise StorageError(f"Cannot sort {repo.alias} by {name!r}")
                return getattr(target.model, column), prefix
        if not repo.has_field(column):
            raise StorageError(f"Unknown sort field {name!r} on {repo.alias}")
        return getattr(repo.model, column), None

    def _apply_fields(self, stmt: Select[Any], options: QueryOptions) -> Select[Any]:
        if not options.fields:
            return stmt
        model = self._repository.model
        return stmt.options(load_only(*(getattr(model, f) for f in options.fields)))

    def _apply_contain(self, stmt: Select[Any], options: QueryOptions) -> Select[Any]:
        contain = options.contain
        if not contain:
            return stmt
        model = self._repository.model
        graph = self._repository.associations()
        embeds = (
            contain.items()
            if isinstance(contain, Mapping)
            else ((name, None) for name in contain)
        )
        for name, spec in embeds:
            if not graph.has(name):
                raise StorageError(
                    f"Unknown association {name!r} on {self._repository.alias}"
                )
            loader = selectinload(getattr(model, name))
            fields = spec.fields if isinstance(spec, EmbedSpec) else None
            if fields:
                target = graph.get(name).target_schema().model
                loader = loader.load_only(*(getattr(target, f) for f in fields))
            stmt = stmt.options(loader)
        return stmt
