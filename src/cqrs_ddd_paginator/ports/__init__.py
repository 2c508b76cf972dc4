"""Protocols implemented by storage adapters."""

from __future__ import annotations

from .repository import IPageQuery, IPaginatableRepository
from .schema import IAssociation, IAssociationGraph, ISchemaDescriptor

__all__ = [
    "IAssociation",
    "IAssociationGraph",
    "IPageQuery",
    "IPaginatableRepository",
    "ISchemaDescriptor",
]
