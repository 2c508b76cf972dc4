"""Projection of ``fields=title,content`` with the primary key always kept."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import FieldNotFoundError

if TYPE_CHECKING:
    from .ports.schema import ISchemaDescriptor


class FieldSelector:
    """Parse the projection list and validate it against the schema."""

    def select(self, schema: ISchemaDescriptor, raw: Any) -> tuple[str, ...]:
        """Return the projection; an empty tuple means all fields."""
        if not raw:
            return ()
        if isinstance(raw, str):
            requested = [f.strip() for f in raw.split(",") if f.strip()]
        else:
            requested = [str(f) for f in raw]
        if not requested:
            return ()

        primary_key = schema.primary_key()
        if primary_key not in requested:
            requested.append(primary_key)

        for field in requested:
            if not schema.has_field(field):
                raise FieldNotFoundError(field, schema.alias, schema.field_names())
        return tuple(dict.fromkeys(requested))

    def apply(
        self, schema: ISchemaDescriptor, options: dict[str, Any]
    ) -> dict[str, Any]:
        return {**options, "fields": self.select(schema, options.get("fields"))}
