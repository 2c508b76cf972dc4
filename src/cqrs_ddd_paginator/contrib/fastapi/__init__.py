"""FastAPI integration (requires the ``fastapi`` extra)."""

from .dependencies import get_paging_params, paging_params, raise_for_result

__all__ = ["get_paging_params", "paging_params", "raise_for_result"]
