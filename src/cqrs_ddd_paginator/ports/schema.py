"""Schema introspection protocols consumed by the validation pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


@runtime_checkable
class ISchemaDescriptor(Protocol):
    """
    Field and association metadata of one entity.

    Implemented by an adapter over the chosen storage layer; the parsers
    depend only on this protocol.
    """

    @property
    def alias(self) -> str:
        """Name identifying the entity within a request."""
        ...

    def primary_key(self) -> str: ...

    def has_field(self, name: str) -> bool: ...

    def field_names(self) -> Iterable[str]:
        """All field names; used for error suggestions only."""
        ...

    def associations(self) -> IAssociationGraph: ...


@runtime_checkable
class IAssociationGraph(Protocol):
    """Named associations of one entity."""

    def has(self, name: str) -> bool: ...

    def get(self, name: str) -> IAssociation:
        """Return the association or raise ``KeyError``."""
        ...

    def names(self) -> Iterable[str]: ...


@runtime_checkable
class IAssociation(Protocol):
    """One association from a source entity to a target entity."""

    @property
    def name(self) -> str: ...

    def foreign_key(self) -> str:
        """Field on the target schema relating its rows back to the parent."""
        ...

    def target_schema(self) -> ISchemaDescriptor: ...
