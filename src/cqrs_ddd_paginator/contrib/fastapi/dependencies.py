"""FastAPI dependencies for paginated endpoints.

Provides Depends functions for reading (possibly scoped) paging
parameters and for turning paginator results into HTTP errors.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from fastapi import Depends, HTTPException, Request

from ...query_string import parse_query_params

if TYPE_CHECKING:
    from ...result import PageResult, ParseResult

R = TypeVar("R", "PageResult[Any]", "ParseResult")


def get_paging_params(request: Request) -> dict[str, Any]:
    """Return the request's query parameters as nested mappings.

    ``?articles[page]=2&tags[page]=1`` becomes
    ``{"articles": {"page": "2"}, "tags": {"page": "1"}}`` so each scoped
    pagination reads its own namespace.

    Example:
        ```python
        @router.get("/articles")
        async def list_articles(
            params: dict[str, Any] = Depends(get_paging_params),
            session: AsyncSession = Depends(get_session),
        ):
            repo = SQLAlchemyRepository(ArticleModel, session, alias="Articles")
            result = raise_for_result(await paginator.paginate(repo, None, params))
            return result.to_envelope()
        ```
    """
    return parse_query_params(request.query_params.multi_items())


def paging_params(scope: str | None = None) -> Callable[..., dict[str, Any]]:
    """Create a dependency returning the parameters of one scope namespace.

    Args:
        scope: Namespace to read (``articles`` for ``?articles[page]=2``).
            ``None`` returns every parameter, like ``get_paging_params``.

    Returns:
        Dependency function.

    Example:
        ```python
        @router.get("/articles")
        async def list_articles(
            params: dict[str, Any] = Depends(paging_params("articles")),
        ):
            return (await paginator.paginate(repo, None, params)).to_envelope()
        ```
    """

    def dependency(
        params: dict[str, Any] = Depends(get_paging_params),  # noqa: B008
    ) -> dict[str, Any]:
        if scope is None:
            return params
        scoped = params.get(scope)
        return dict(scoped) if isinstance(scoped, dict) else {}

    return dependency


def raise_for_result(result: R) -> R:
    """Return *result* unchanged, or raise ``HTTPException`` for its error.

    Raises:
        HTTPException: 400 for bad request parameters, 404 for a page out of
            range.
    """
    error = result.error
    if error is None:
        return result
    raise HTTPException(
        status_code=error.status_code, detail=error.to_dict()
    ) from error


__all__: list[str] = [
    "get_paging_params",
    "paging_params",
    "raise_for_result",
]
