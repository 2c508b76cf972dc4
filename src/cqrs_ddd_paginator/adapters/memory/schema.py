"""InMemorySchema — declared fields and associations, no storage behind them."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class InMemoryAssociation:
    """Association to another in-memory schema."""

    def __init__(self, name: str, target: InMemorySchema, foreign_key: str) -> None:
        self._name = name
        self._target = target
        self._foreign_key = foreign_key

    @property
    def name(self) -> str:
        return self._name

    def foreign_key(self) -> str:
        return self._foreign_key

    def target_schema(self) -> InMemorySchema:
        return self._target


class InMemoryAssociationGraph:
    def __init__(self) -> None:
        self._associations: dict[str, InMemoryAssociation] = {}

    def add(self, association: InMemoryAssociation) -> None:
        self._associations[association.name] = association

    def has(self, name: str) -> bool:
        return name in self._associations

    def get(self, name: str) -> InMemoryAssociation:
        return self._associations[name]

    def names(self) -> list[str]:
        return list(self._associations)


class InMemorySchema:
    """
    Schema declared in code.

    Usage::

        authors = InMemorySchema("Authors", ["id", "firstname", "lastname"])
        articles = InMemorySchema("Articles", ["id", "title", "author_id"])
        articles.associate("Authors", authors, foreign_key="id")
    """

    def __init__(
        self,
        alias: str,
        fields: Iterable[str],
        *,
        primary_key: str = "id",
    ) -> None:
        self._alias = alias
        self._fields = frozenset(fields)
        if primary_key not in self._fields:
            raise ValueError(f"Primary key {primary_key!r} is not a field of {alias}")
        self._primary_key = primary_key
        self._associations = InMemoryAssociationGraph()

    @property
    def alias(self) -> str:
        return self._alias

    def primary_key(self) -> str:
        return self._primary_key

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def field_names(self) -> list[str]:
        return sorted(self._fields)

    def associations(self) -> InMemoryAssociationGraph:
        return self._associations

    def associate(
        self, name: str, target: InMemorySchema, *, foreign_key: str
    ) -> InMemorySchema:
        """Register an association; returns ``self`` for chaining."""
        self._associations.add(InMemoryAssociation(name, target, foreign_key))
        return self
