"""
Ranked patient search, delegated to PostgreSQL full-text search.

The patients table carries text_searchable, a weighted tsvector generated by the
database (migration 0002). This module only builds the tsquery and asks the
engine to match and rank; tokenization and scoring stay in PostgreSQL.
"""
from __future__ import annotations

import re

from django.contrib.postgres.search import SearchQuery, SearchRank, SearchVectorField
from django.db import NotSupportedError, connections
from django.db.models import F, QuerySet
from django.db.models.expressions import RawSQL

SEARCH_CONFIG = "simple"

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def build_prefix_query(text: str | None) -> str | None:
    """
    "Jo  Do" -> "jo:* & do:*" (every word must prefix-match a lexeme).
    Returns None when the text has no word characters at all.
    """
    tokens = _TOKEN_RE.findall((text or "").lower())
    if not tokens:
        return None
    return " & ".join(f"{token}:*" for token in tokens)


def rank_by_relevance(queryset: QuerySet, text: str) -> QuerySet:
    """
    Keep only rows whose search vector matches the text and order them by
    ts_rank descending (ties by id, so pages are stable).
    """
    raw_query = build_prefix_query(text)
    if raw_query is None:
        return queryset

    if not _is_postgresql(queryset):
        raise NotSupportedError("ranked search requires PostgreSQL")

    table = queryset.model._meta.db_table
    query = SearchQuery(raw_query, search_type="raw", config=SEARCH_CONFIG)
    return (
        queryset.alias(
            search_vector=RawSQL(f'"{table}"."text_searchable"', [], output_field=SearchVectorField()),
        )
        .filter(search_vector=query)
        .annotate(rank=SearchRank(F("search_vector"), query))
        .order_by("-rank", "id")
    )


def _is_postgresql(queryset: QuerySet) -> bool:
    return connections[queryset.db].vendor == "postgresql"
