"""OptionsMerger — defaults < alias settings < whitelisted request params."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .limits import coerce_positive_int

logger = logging.getLogger(__name__)

DEFAULT_WHITELIST: tuple[str, ...] = ("limit", "sort", "page", "contain", "fields")

_SETTING_ALIASES = {
    "max_limit": "maxLimit",
    "sort_whitelist": "sortWhitelist",
    "finder_options": "finderOptions",
}


@dataclass(frozen=True)
class PaginatorConfig:
    """
    Framework-level defaults.

    Attributes:
        page: Default page.
        limit: Default page size.
        max_limit: Largest page size a request may ask for.
        whitelist: Request parameter names callers may set.
        finder: Finder used when settings name none.
    """

    page: int = 1
    limit: int = 20
    max_limit: int = 100
    whitelist: tuple[str, ...] = DEFAULT_WHITELIST
    finder: str = "all"

    def __post_init__(self) -> None:
        for name in ("page", "limit", "max_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")

    def to_settings(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "maxLimit": self.max_limit,
            "whitelist": list(self.whitelist),
            "finder": self.finder,
        }


def _normalize_keys(settings: Mapping[str, Any]) -> dict[str, Any]:
    return {_SETTING_ALIASES.get(key, key): value for key, value in settings.items()}


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


class OptionsMerger:
    """
    Merge framework defaults, per-alias settings and request parameters.

    Settings are either flat (``{"limit": 5}``) or keyed by entity alias
    (``{"Articles": {"limit": 5}}``). Request parameters outside the
    whitelist are dropped, as are non-scalar request values so that a
    query string can never inject a structured ``contain`` or ``order``.
    The merge is pure: the same input always yields the same output.
    """

    def __init__(self, config: PaginatorConfig | None = None) -> None:
        self._config = config or PaginatorConfig()

    @property
    def config(self) -> PaginatorConfig:
        return self._config

    def get_defaults(
        self, alias: str, settings: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Return the defaults layer for *alias* (config + alias settings)."""
        scoped: Mapping[str, Any] = settings or {}
        if isinstance(scoped.get(alias), Mapping):
            scoped = scoped[alias]
        defaults = {**self._config.to_settings(), **_normalize_keys(scoped)}

        max_limit = coerce_positive_int(
            defaults.get("maxLimit"), self._config.max_limit
        )
        limit = coerce_positive_int(defaults.get("limit"), self._config.limit)
        defaults["maxLimit"] = max_limit
        defaults["limit"] = min(limit, max_limit)
        defaults["whitelist"] = list(defaults.get("whitelist") or ())
        return defaults

    def merge(
        self,
        alias: str,
        settings: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return one flattened options mapping for *alias*."""
        defaults = self.get_defaults(alias, settings)
        request: Any = params or {}
        scope = defaults.get("scope")
        if scope:
            request = request.get(scope) or {}
            if not isinstance(request, Mapping):
                request = {}

        whitelist = set(defaults["whitelist"])
        accepted: dict[str, Any] = {}
        for key, value in request.items():
            if key not in whitelist:
                continue
            if not _is_scalar(value):
                logger.debug("Dropping non-scalar request parameter %r", key)
                continue
            accepted[key] = value

        merged = {**defaults, **accepted}
        logger.debug("Merged options for %s: %r", alias, merged)
        return merged
