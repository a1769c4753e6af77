from __future__ import annotations

import logging
from typing import Iterable

from site_search.core.models import Record, ScoredResult, type_priority

logger = logging.getLogger(__name__)


FIELD_WEIGHTS: dict[str, int] = {
    "title": 10,
    "category": 7,
    "tag": 6,
    "summary": 5,
    "section": 4,
    "content": 3,
}


def _contains(value: str | None, query_lower: str) -> bool:
    return value is not None and query_lower in value.lower()


def _any_contains(values: tuple[str, ...], query_lower: str) -> bool:
    return any(query_lower in v.lower() for v in values)


def score_record(query_lower: str, record: Record) -> tuple[int, tuple[str, ...]]:
    """Score one record against an already lower-cased query.

    Fields are tested independently in provenance order; a missing field never
    matches.
    """
    score = 0
    matches: list[str] = []

    if _contains(record.title, query_lower):
        score += FIELD_WEIGHTS["title"]
        matches.append("title")

    if _contains(record.summary, query_lower):
        score += FIELD_WEIGHTS["summary"]
        matches.append("summary")

    if _contains(record.content, query_lower):
        score += FIELD_WEIGHTS["content"]
        matches.append("content")

    if record.categories and _any_contains(record.categories, query_lower):
        score += FIELD_WEIGHTS["category"]
        matches.append("category")

    if record.tags and _any_contains(record.tags, query_lower):
        score += FIELD_WEIGHTS["tag"]
        matches.append("tag")

    if _contains(record.section, query_lower):
        score += FIELD_WEIGHTS["section"]
        matches.append("section")

    return score, tuple(matches)


def search(query: str, records: Iterable[Record]) -> list[ScoredResult]:
    """Rank every record containing `query` in at least one scored field.

    The caller passes a trimmed, non-empty query. Results are ordered by score,
    then type priority, then their position in `records`.
    """
    q = query.lower()
    results: list[ScoredResult] = []
    for record in records:
        score, matches = score_record(q, record)
        if score > 0:
            results.append(ScoredResult(record=record, score=score, matched_fields=matches))

    # list.sort is stable, so equal keys keep index order.
    results.sort(key=lambda r: (r.score, type_priority(r.record.type)), reverse=True)
    logger.debug("search %r matched %d records", query, len(results))
    return results
