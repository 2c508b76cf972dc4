"""SortParser / SortValidator — ``sort=title,-author_id`` to ordered pairs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .options import SortDirection, coerce_order

if TYPE_CHECKING:
    from .ports.schema import ISchemaDescriptor

logger = logging.getLogger(__name__)


class SortParser:
    """Parse a comma-separated sort string; ``-`` prefix means descending."""

    def parse(self, raw: str | None) -> dict[str, SortDirection]:
        """
        Return an ordered mapping of field to direction.

        A field listed twice keeps its first position and takes the last
        direction. Empty tokens are skipped.
        """
        order: dict[str, SortDirection] = {}
        if not raw:
            return order
        for token in str(raw).split(","):
            name = token.strip()
            direction = SortDirection.ASC
            if name.startswith("-"):
                name = name[1:].strip()
                direction = SortDirection.DESC
            if not name:
                continue
            order[name] = direction
        return order

    def apply(self, options: dict[str, Any]) -> dict[str, Any]:
        """Replace ``sort`` with ``order``; ``sort`` is removed either way."""
        result = dict(options)
        raw = result.pop("sort", None)
        if raw is not None:
            result["order"] = tuple(self.parse(raw).items())
        if not result.get("order"):
            result["order"] = ()
        return result


class SortValidator:
    """
    Enforce the sort whitelist and qualify fields against the schema.

    With a whitelist only the primary sort field is checked: if it is not
    listed the whole order is discarded, otherwise every field is trusted
    as given (virtual or computed columns included). Without a whitelist
    known fields are qualified as ``Alias.field`` and unknown ones pass
    through for the storage layer to reject.
    """

    def validate(
        self, schema: ISchemaDescriptor, options: dict[str, Any]
    ) -> dict[str, Any]:
        order = options.get("order")
        if isinstance(order, str):
            return options
        try:
            pairs = coerce_order(order)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Invalid order setting for {schema.alias}: {order!r}"
            ) from exc

        whitelist = options.get("sortWhitelist")
        if whitelist is not None:
            primary = pairs[0][0] if pairs else None
            if primary not in set(whitelist):
                if primary is not None:
                    logger.warning(
                        "Sort field %r is not whitelisted for %s; ignoring order",
                        primary,
                        schema.alias,
                    )
                return {**options, "order": ()}
            return {**options, "order": pairs}

        return {**options, "order": self._prefix(schema, pairs)}

    def _prefix(
        self, schema: ISchemaDescriptor, pairs: tuple[tuple[str, SortDirection], ...]
    ) -> tuple[tuple[str, SortDirection], ...]:
        qualified: dict[str, SortDirection] = {}
        for name, direction in pairs:
            key = self._qualify(schema, name)
            if key is None:
                logger.debug(
                    "Sort field %r not resolvable on %s; passing through",
                    name,
                    schema.alias,
                )
                key = name
            qualified[key] = direction
        return tuple(qualified.items())

    @staticmethod
    def _qualify(schema: ISchemaDescriptor, name: str) -> str | None:
        alias = schema.alias
        if "." not in name:
            return f"{alias}.{name}" if schema.has_field(name) else None
        model, _, column = name.partition(".")
        if model == alias:
            return name if schema.has_field(column) else None
        associations = schema.associations()
        if not associations.has(model):
            return None
        target = associations.get(model).target_schema()
        return name if target.has_field(column) else None
