"""Tagged outcomes returned by the paginator facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .exceptions import BadRequestError, OutOfRangeError, PaginatorError
from .metadata import PagingContext

if TYPE_CHECKING:
    from .metadata import PagingMetadata
    from .options import QueryOptions

T = TypeVar("T")


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    OUT_OF_RANGE = "out_of_range"

    @classmethod
    def of(cls, error: PaginatorError | None) -> ErrorKind | None:
        if isinstance(error, OutOfRangeError):
            return cls.OUT_OF_RANGE
        if isinstance(error, BadRequestError):
            return cls.BAD_REQUEST
        return None


@dataclass(frozen=True)
class ParseResult:
    """Either validated ``QueryOptions`` or the ``BadRequestError`` that stopped them.

    Usage::

        result = paginator.parse(repo, settings, params)
        if result.is_ok:
            query = repo.find(result.options.finder, result.options)
    """

    options: QueryOptions | None = None
    error: BadRequestError | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return ErrorKind.of(self.error)

    @classmethod
    def success(cls, options: QueryOptions) -> ParseResult:
        return cls(options=options)

    @classmethod
    def failure(cls, error: BadRequestError) -> ParseResult:
        return cls(error=error)

    def unwrap(self) -> QueryOptions:
        """Return the options or raise the carried error."""
        if self.error is not None:
            raise self.error
        assert self.options is not None
        return self.options

    def __bool__(self) -> bool:
        return self.is_ok


def _empty_items() -> list[Any]:
    return []


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """
    One fetched page, its metadata and the updated request context.

    On failure ``items`` is empty, ``paging`` is ``None`` and ``context``
    is the context the call started with.
    """

    items: list[T] = field(default_factory=_empty_items)
    paging: PagingMetadata | None = None
    context: PagingContext = field(default_factory=PagingContext)
    error: PaginatorError | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return ErrorKind.of(self.error)

    @classmethod
    def failure(cls, error: PaginatorError, context: PagingContext) -> PageResult[T]:
        return cls(error=error, context=context)

    def unwrap(self) -> list[T]:
        """Return the items or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.items

    def to_envelope(self) -> dict[str, Any]:
        """``{"results": [...], "paging": {alias: {...}}}`` for the response body."""
        return build_envelope(self.unwrap(), self.context)

    def __bool__(self) -> bool:
        return self.is_ok


def build_envelope(results: list[Any], context: PagingContext) -> dict[str, Any]:
    return {"results": list(results), "paging": context.to_dict()}
