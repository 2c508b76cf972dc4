"""Shared fixtures: a small Articles / Authors / Tags schema in memory."""

from __future__ import annotations

import pytest

from cqrs_ddd_paginator import Paginator, PaginatorConfig
from cqrs_ddd_paginator.adapters.memory import InMemoryRepository, InMemorySchema


@pytest.fixture
def authors_schema() -> InMemorySchema:
    return InMemorySchema("Authors", ["id", "firstname", "lastname"])


@pytest.fixture
def tags_schema() -> InMemorySchema:
    return InMemorySchema("Tags", ["id", "label", "article_id"])


@pytest.fixture
def articles_schema(authors_schema, tags_schema) -> InMemorySchema:
    schema = InMemorySchema(
        "Articles", ["id", "title", "body", "author_id", "published", "created"]
    )
    schema.associate("Authors", authors_schema, foreign_key="id")
    schema.associate("Tags", tags_schema, foreign_key="article_id")
    return schema


def make_articles(count: int) -> list[dict]:
    authors = [
        {"id": 1, "firstname": "Ada", "lastname": "Lovelace"},
        {"id": 2, "firstname": "Alan", "lastname": "Turing"},
    ]
    rows = []
    for number in range(1, count + 1):
        author = authors[number % 2]
        rows.append(
            {
                "id": number,
                "title": f"Article {number:02d}",
                "body": f"Body {number}",
                "author_id": author["id"],
                "published": number % 3 != 0,
                "created": f"2024-01-{(number % 28) + 1:02d}",
                "Authors": dict(author),
                "Tags": [
                    {"id": number * 10, "label": "news", "article_id": number},
                    {"id": number * 10 + 1, "label": "tech", "article_id": number},
                ],
            }
        )
    return rows


@pytest.fixture
def articles(articles_schema) -> InMemoryRepository:
    """Forty-five articles: three pages of twenty."""
    return InMemoryRepository(
        articles_schema,
        make_articles(45),
        finders={
            "published": lambda rows, options: [r for r in rows if r["published"]],
        },
    )


@pytest.fixture
def paginator() -> Paginator:
    return Paginator(PaginatorConfig(limit=20, max_limit=100))
