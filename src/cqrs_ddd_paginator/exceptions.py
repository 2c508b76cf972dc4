"""
Paginator exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``PaginatorError`` and provide ``to_dict()``
for API-friendly error responses. ``status_code`` carries the HTTP
equivalent of the failure.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .metadata import PagingMetadata


class PaginatorError(Exception):
    """Base exception for all paginator errors."""

    status_code: int = 500

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class BadRequestError(PaginatorError):
    """The request parameters reference something that does not exist.

    Raised before any storage query executes.
    """

    status_code = 400

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "BAD_REQUEST",
            "message": str(self),
        }


class FieldNotFoundError(BadRequestError):
    """
    Unknown field on the paginated or embedded model.

    Example error message::

        Field 'titel' is not in model 'Articles' fields list.
        Did you mean: title?
    """

    def __init__(
        self,
        field: str,
        model: str,
        available_fields: Iterable[str] = (),
        cutoff: float = 0.6,
    ) -> None:
        self.field = field
        self.model = model
        self.suggestions = get_close_matches(
            field, sorted(available_fields), n=3, cutoff=cutoff
        )
        message = f"Field '{field}' is not in model '{model}' fields list."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "message": str(self),
            "field": self.field,
            "model": self.model,
            "suggestions": self.suggestions,
        }


class ModelNotAssociatedError(BadRequestError):
    """The requested embed is not an association of the paginated model."""

    def __init__(
        self,
        association: str,
        model: str,
        available_associations: Iterable[str] = (),
    ) -> None:
        self.association = association
        self.model = model
        self.suggestions = get_close_matches(
            association, sorted(available_associations), n=3, cutoff=0.6
        )
        message = f"Model '{association}' is not associated with model '{model}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MODEL_NOT_ASSOCIATED",
            "message": str(self),
            "association": self.association,
            "model": self.model,
            "suggestions": self.suggestions,
        }


class ContainSyntaxError(BadRequestError):
    """The ``contain`` parameter could not be tokenized or parsed."""

    def __init__(self, message: str, raw: str, position: int) -> None:
        self.message = message
        self.raw = raw
        self.position = position
        super().__init__(f"{message} at position {position} in {raw!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONTAIN_SYNTAX_ERROR",
            "message": self.message,
            "contain": self.raw,
            "position": self.position,
        }


class OutOfRangeError(PaginatorError):
    """The requested page lies beyond the last available page."""

    status_code = 404

    def __init__(
        self,
        requested_page: int,
        page_count: int,
        paging: PagingMetadata | None = None,
    ) -> None:
        self.requested_page = requested_page
        self.page_count = page_count
        self.paging = paging
        super().__init__(
            f"Page {requested_page} is out of range ({page_count} pages available)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OUT_OF_RANGE",
            "message": str(self),
            "requested_page": self.requested_page,
            "page_count": self.page_count,
        }


class StorageError(PaginatorError):
    """Raised by repository adapters when the backend cannot run the query."""
