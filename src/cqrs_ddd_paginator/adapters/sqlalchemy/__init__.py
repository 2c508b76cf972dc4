"""SQLAlchemy adapters (requires the ``sqlalchemy`` extra)."""

from .repository import SQLAlchemyPageQuery, SQLAlchemyRepository
from .schema import SQLAlchemyAssociation, SQLAlchemyAssociationGraph, SQLAlchemySchema

__all__ = [
    "SQLAlchemyAssociation",
    "SQLAlchemyAssociationGraph",
    "SQLAlchemyPageQuery",
    "SQLAlchemyRepository",
    "SQLAlchemySchema",
]
