"""
EmbedParser — ``contain=authors[firstname,lastname],category`` to embeds.

Grammar::

    contain  := item ("," item)*
    item     := NAME [ "[" field ("," field)* "]" ]
    NAME     := \\w+

The raw string is first scanned into ``NAME`` and ``FIELDS`` tokens
(commas and whitespace between items are separators). The parser then
walks the tokens with one token of lookahead: a ``FIELDS`` token binds
to the ``NAME`` immediately before it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import (
    ContainSyntaxError,
    FieldNotFoundError,
    ModelNotAssociatedError,
)
from .options import EmbedSpec

if TYPE_CHECKING:
    from .ports.schema import IAssociation, ISchemaDescriptor

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"\w+")


class TokenKind(str, Enum):
    NAME = "name"
    FIELDS = "fields"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    position: int


def tokenize(raw: str) -> list[Token]:
    """Split a contain string into ``NAME`` and bracketed ``FIELDS`` tokens."""
    tokens: list[Token] = []
    index = 0
    length = len(raw)
    while index < length:
        char = raw[index]
        if char == "," or char.isspace():
            index += 1
            continue
        if char == "[":
            end = raw.find("]", index + 1)
            if end == -1:
                raise ContainSyntaxError("Unterminated field list", raw, index)
            body = raw[index + 1 : end]
            if "[" in body:
                raise ContainSyntaxError("Nested field list", raw, index)
            tokens.append(Token(TokenKind.FIELDS, body, index))
            index = end + 1
            continue
        if char == "]":
            raise ContainSyntaxError("Unmatched ']'", raw, index)
        match = _NAME_RE.match(raw, index)
        if match is None:
            raise ContainSyntaxError(f"Unexpected character {char!r}", raw, index)
        tokens.append(Token(TokenKind.NAME, match.group(), index))
        index = match.end()
    return tokens


class EmbedParser:
    """Parse and validate the ``contain`` request parameter."""

    def parse(self, schema: ISchemaDescriptor, raw: str) -> dict[str, EmbedSpec]:
        """
        Return embeds keyed by association name.

        Raises:
            ContainSyntaxError: The string does not follow the grammar.
            ModelNotAssociatedError: A name is not an association of *schema*.
            FieldNotFoundError: A restricted field is missing on the target.
        """
        tokens = tokenize(raw)
        contain: dict[str, EmbedSpec] = {}
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token.kind is TokenKind.FIELDS:
                raise ContainSyntaxError(
                    "Field list must follow an association name", raw, token.position
                )
            name = token.value
            if name in contain:
                raise ContainSyntaxError(
                    f"Duplicate association '{name}'", raw, token.position
                )
            association = self._association(schema, name)
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is not None and following.kind is TokenKind.FIELDS:
                fields = self._restrict(association, name, following, raw)
                contain[name] = EmbedSpec(name, fields)
                index += 2
            else:
                contain[name] = EmbedSpec(name)
                index += 1
        logger.debug("Parsed contain %r for %s: %r", raw, schema.alias, contain)
        return contain

    def apply(
        self, schema: ISchemaDescriptor, options: dict[str, Any]
    ) -> dict[str, Any]:
        """Parse raw string ``contain``; structured values pass through as given."""
        raw = options.get("contain")
        if not raw or not isinstance(raw, str):
            return options
        return {**options, "contain": self.parse(schema, raw)}

    @staticmethod
    def _association(schema: ISchemaDescriptor, name: str) -> IAssociation:
        graph = schema.associations()
        if not graph.has(name):
            raise ModelNotAssociatedError(name, schema.alias, graph.names())
        return graph.get(name)

    @staticmethod
    def _restrict(
        association: IAssociation, name: str, token: Token, raw: str
    ) -> tuple[str, ...]:
        requested = [f.strip() for f in token.value.split(",") if f.strip()]
        if not requested:
            raise ContainSyntaxError(
                f"Empty field list for association '{name}'", raw, token.position
            )
        foreign_key = association.foreign_key()
        if foreign_key not in requested:
            requested.append(foreign_key)

        target = association.target_schema()
        for field in requested:
            if not target.has_field(field):
                raise FieldNotFoundError(field, name, target.field_names())
        return tuple(dict.fromkeys(requested))
