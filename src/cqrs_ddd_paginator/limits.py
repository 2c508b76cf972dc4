"""LimitClamp — bound the page size; normalise the requested page."""

from __future__ import annotations

from typing import Any


def coerce_positive_int(value: Any, default: int) -> int:
    """Return *value* as an ``int >= 1`` or *default* when it is not one."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value if value >= 1 else default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def normalize_page(value: Any) -> int:
    """Non-numeric and non-positive pages become page 1.

    Only whole numbers count: ``"2.5"`` is not truncated to 2.
    """
    return coerce_positive_int(value, 1)


class LimitClamp:
    """Bound the requested ``limit`` to ``maxLimit``."""

    def clamp(self, options: dict[str, Any], *, default_limit: int) -> dict[str, Any]:
        max_limit = coerce_positive_int(options.get("maxLimit"), default_limit)
        limit = coerce_positive_int(options.get("limit"), default_limit)
        return {**options, "limit": min(limit, max_limit), "maxLimit": max_limit}
