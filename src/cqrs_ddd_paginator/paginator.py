"""Paginator — request parameters -> validated QueryOptions -> page + metadata."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .embed import EmbedParser
from .exceptions import BadRequestError, OutOfRangeError
from .fields import FieldSelector
from .limits import LimitClamp, normalize_page
from .merger import OptionsMerger, PaginatorConfig
from .metadata import PagingContext, PaginationMetadataBuilder
from .options import QueryOptions
from .ports.repository import IPageQuery
from .result import PageResult, ParseResult
from .sort import SortParser, SortValidator

if TYPE_CHECKING:
    from .ports.repository import IPaginatableRepository
    from .ports.schema import ISchemaDescriptor

logger = logging.getLogger("cqrs_ddd.paginator")


def _extract_finder(options: dict[str, Any]) -> dict[str, Any]:
    """Split ``finder`` given as ``{name: finder_options}`` into name + options."""
    finder = options.get("finder") or "all"
    if isinstance(finder, Mapping):
        if len(finder) != 1:
            raise ValueError("finder mapping must hold exactly one finder name")
        name, finder_options = next(iter(finder.items()))
        return {
            **options,
            "finder": name,
            "finderOptions": {
                **dict(options.get("finderOptions") or {}),
                **dict(finder_options or {}),
            },
        }
    return {**options, "finder": str(finder)}


class Paginator:
    """
    Translate raw query parameters into a bounded page request.

    Pipeline::

        OptionsMerger -> SortParser -> SortValidator -> LimitClamp
            -> EmbedParser -> FieldSelector -> (repository count + fetch)
            -> PaginationMetadataBuilder

    ``parse`` stops before any storage access. ``paginate`` runs the
    repository query and returns a ``PageResult`` carrying the page, its
    metadata and the request context with that metadata merged in.

    Example:
        ```python
        paginator = Paginator(PaginatorConfig(limit=10))
        result = await paginator.paginate(
            articles, {"sortWhitelist": ["title"]}, request_params, context=ctx
        )
        if not result.is_ok:
            ...
        ctx = result.context
        ```
    """

    def __init__(
        self,
        config: PaginatorConfig | None = None,
        *,
        merger: OptionsMerger | None = None,
        sort_parser: SortParser | None = None,
        sort_validator: SortValidator | None = None,
        limit_clamp: LimitClamp | None = None,
        embed_parser: EmbedParser | None = None,
        field_selector: FieldSelector | None = None,
        metadata_builder: PaginationMetadataBuilder | None = None,
    ) -> None:
        self._merger = merger or OptionsMerger(config)
        self._sort_parser = sort_parser or SortParser()
        self._sort_validator = sort_validator or SortValidator()
        self._limit_clamp = limit_clamp or LimitClamp()
        self._embed_parser = embed_parser or EmbedParser()
        self._field_selector = field_selector or FieldSelector()
        self._metadata_builder = metadata_builder or PaginationMetadataBuilder()

    @property
    def config(self) -> PaginatorConfig:
        return self._merger.config

    def build_options(
        self,
        schema: ISchemaDescriptor,
        settings: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> QueryOptions:
        """Run the validation pipeline; raises ``BadRequestError`` on bad input."""
        alias = schema.alias
        defaults = self._merger.get_defaults(alias, settings)
        options = self._merger.merge(alias, settings, params)
        options = self._sort_parser.apply(options)
        options = self._sort_validator.validate(schema, options)
        options = self._limit_clamp.clamp(options, default_limit=defaults["limit"])
        options = self._embed_parser.apply(schema, options)
        options = self._field_selector.apply(schema, options)
        options["page"] = normalize_page(options.get("page"))
        return QueryOptions.from_mapping(_extract_finder(options))

    def parse(
        self,
        schema: ISchemaDescriptor,
        settings: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ParseResult:
        """Like ``build_options`` but returns a ``ParseResult`` instead of raising."""
        try:
            return ParseResult.success(self.build_options(schema, settings, params))
        except BadRequestError as exc:
            logger.info("Rejected pagination request for %s: %s", schema.alias, exc)
            return ParseResult.failure(exc)

    async def paginate(
        self,
        target: IPaginatableRepository | IPageQuery,
        settings: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        *,
        context: PagingContext | None = None,
    ) -> PageResult[Any]:
        """
        Fetch one page from *target* (a repository or a prepared query).

        On an out-of-range page the fetched rows are discarded and the
        returned context is left unchanged; the computed metadata is kept
        on the ``OutOfRangeError`` for diagnostics.
        """
        context = context if context is not None else PagingContext()
        query: IPageQuery | None = None
        if isinstance(target, IPageQuery):
            query = target
            repository = query.repository()
        else:
            repository = target

        parsed = self.parse(repository, settings, params)
        if not parsed.is_ok:
            assert parsed.error is not None
            return PageResult.failure(parsed.error, context)
        options = parsed.unwrap()

        if query is None:
            query = repository.find(options.finder, options)
        else:
            query.apply_options(options)

        items = list(await query.all())
        count = await query.count() if items else 0

        defaults = self._merger.get_defaults(repository.alias, settings)
        paging = self._metadata_builder.build(
            options, count=count, current=len(items), defaults=defaults
        )
        try:
            self._metadata_builder.check_range(options.page, paging)
        except OutOfRangeError as exc:
            logger.warning(
                "Page %d out of range for %s (%d pages)",
                exc.requested_page,
                repository.alias,
                exc.page_count,
            )
            return PageResult.failure(exc, context)

        logger.info(
            "Paginated %s: page=%d perPage=%d count=%d pageCount=%d",
            repository.alias,
            paging.page,
            paging.per_page,
            paging.count,
            paging.page_count,
        )
        return PageResult(
            items=items,
            paging=paging,
            context=context.merge(repository.alias, paging),
        )
