"""Paginate repositories from untrusted request parameters."""

from __future__ import annotations

from .embed import EmbedParser, tokenize
from .exceptions import (
    BadRequestError,
    ContainSyntaxError,
    FieldNotFoundError,
    ModelNotAssociatedError,
    OutOfRangeError,
    PaginatorError,
    StorageError,
)
from .fields import FieldSelector
from .limits import LimitClamp, normalize_page
from .merger import DEFAULT_WHITELIST, OptionsMerger, PaginatorConfig
from .metadata import PaginationMetadataBuilder, PagingContext, PagingMetadata
from .options import EmbedSpec, QueryOptions, SortDirection
from .paginator import Paginator
from .ports import (
    IAssociation,
    IAssociationGraph,
    IPageQuery,
    IPaginatableRepository,
    ISchemaDescriptor,
)
from .query_string import QueryStringBuilder, parse_query_params
from .result import ErrorKind, PageResult, ParseResult, build_envelope
from .sort import SortParser, SortValidator

__all__ = [
    "DEFAULT_WHITELIST",
    "BadRequestError",
    "ContainSyntaxError",
    "EmbedParser",
    "EmbedSpec",
    "ErrorKind",
    "FieldNotFoundError",
    "FieldSelector",
    "IAssociation",
    "IAssociationGraph",
    "IPageQuery",
    "IPaginatableRepository",
    "ISchemaDescriptor",
    "LimitClamp",
    "ModelNotAssociatedError",
    "OptionsMerger",
    "OutOfRangeError",
    "PageResult",
    "PaginationMetadataBuilder",
    "Paginator",
    "PaginatorConfig",
    "PaginatorError",
    "PagingContext",
    "PagingMetadata",
    "ParseResult",
    "QueryOptions",
    "QueryStringBuilder",
    "SortDirection",
    "SortParser",
    "SortValidator",
    "StorageError",
    "build_envelope",
    "normalize_page",
    "parse_query_params",
    "tokenize",
]
