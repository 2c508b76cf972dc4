"""Data-access protocols: repositories and prepared page queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .schema import ISchemaDescriptor

if TYPE_CHECKING:
    from ..options import QueryOptions


@runtime_checkable
class IPageQuery(Protocol):
    """
    A prepared query for one page of records.

    Nothing is executed until ``all()`` or ``count()`` is awaited.
    ``count()`` ignores ``limit``/``page`` and returns the total number of
    rows matching the query.
    """

    def repository(self) -> IPaginatableRepository: ...

    def apply_options(self, options: QueryOptions) -> None: ...

    async def all(self) -> list[Any]: ...

    async def count(self) -> int: ...


@runtime_checkable
class IPaginatableRepository(ISchemaDescriptor, Protocol):
    """Repository the paginator can build queries against."""

    def find(self, finder: str, options: QueryOptions) -> IPageQuery: ...
