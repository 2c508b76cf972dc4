"""In-memory adapters for unit tests and prototypes."""

from .repository import InMemoryPageQuery, InMemoryRepository
from .schema import InMemoryAssociation, InMemoryAssociationGraph, InMemorySchema

__all__ = [
    "InMemoryAssociation",
    "InMemoryAssociationGraph",
    "InMemoryPageQuery",
    "InMemoryRepository",
    "InMemorySchema",
]
