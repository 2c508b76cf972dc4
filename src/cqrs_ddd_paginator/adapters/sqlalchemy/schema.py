"""
SQLAlchemySchema — ISchemaDescriptor over a declarative model.

Fields are the mapper's column attributes; associations are its
relationships. An association's foreign key is the column on the
*target* side that relates target rows back to the parent:

- one-to-many (``Author.articles``): ``Article.author_id``
- many-to-one (``Article.author``): the referenced ``Author.id``
- many-to-many: the target column joined through the secondary table
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect

if TYPE_CHECKING:
    from sqlalchemy.orm import Mapper, RelationshipProperty


class SQLAlchemyAssociation:
    def __init__(self, relationship: RelationshipProperty[Any]) -> None:
        self._relationship = relationship

    @property
    def name(self) -> str:
        return self._relationship.key

    @property
    def uselist(self) -> bool:
        return bool(self._relationship.uselist)

    def foreign_key(self) -> str:
        rel = self._relationship
        if rel.secondary is not None:
            column = rel.secondary_synchronize_pairs[0][0]
        else:
            column = rel.local_remote_pairs[0][1]
        return rel.mapper.get_property_by_column(column).key

    def target_schema(self) -> SQLAlchemySchema:
        return SQLAlchemySchema(self._relationship.mapper.class_)


class SQLAlchemyAssociationGraph:
    def __init__(self, mapper: Mapper[Any]) -> None:
        self._relationships = {rel.key: rel for rel in mapper.relationships}

    def has(self, name: str) -> bool:
        return name in self._relationships

    def get(self, name: str) -> SQLAlchemyAssociation:
        return SQLAlchemyAssociation(self._relationships[name])

    def names(self) -> list[str]:
        return list(self._relationships)


class SQLAlchemySchema:
    """Introspects *model* once at construction."""

    def __init__(self, model: type[Any], *, alias: str | None = None) -> None:
        mapper: Mapper[Any] = sa_inspect(model)
        primary_key = mapper.primary_key
        if len(primary_key) != 1:
            raise ValueError(
                f"{model.__name__} must have a single-column primary key for pagination"
            )
        self._model = model
        self._mapper = mapper
        self._alias = alias or model.__name__
        self._primary_key = mapper.get_property_by_column(primary_key[0]).key
        self._fields = frozenset(attr.key for attr in mapper.column_attrs)

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def model(self) -> type[Any]:
        return self._model

    def primary_key(self) -> str:
        return self._primary_key

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def field_names(self) -> list[str]:
        return sorted(self._fields)

    def associations(self) -> SQLAlchemyAssociationGraph:
        return SQLAlchemyAssociationGraph(self._mapper)
