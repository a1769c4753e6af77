from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Sequence

from site_search.core.models import ScoredResult, type_icon, type_label

EXCERPT_LENGTH = 150
ELLIPSIS = "..."

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def truncate_text(text: str | None, max_length: int = EXCERPT_LENGTH) -> str:
    if not text:
        return ""
    # Lengths count code points, so an emoji is one character.
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def display_excerpt(result: ScoredResult, max_length: int = EXCERPT_LENGTH) -> str:
    """Summary if present, else content, cut to `max_length` characters."""
    text = result.record.summary or result.record.content or ""
    return truncate_text(text, max_length)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def type_breakdown(results: Sequence[ScoredResult]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for r in results:
        counts[r.record.raw_type] = counts.get(r.record.raw_type, 0) + 1
    return counts


def breakdown_text(results: Sequence[ScoredResult]) -> str:
    return ", ".join(_plural(count, t) for t, count in type_breakdown(results).items())


def results_count_text(results: Sequence[ScoredResult]) -> str:
    return f"{_plural(len(results), 'result')} ({breakdown_text(results)})"


def escape_pattern(query: str) -> str:
    return re.escape(query)


def highlight_text(text: str | None, query: str | None, *, tag: str = "mark") -> str:
    """Wrap each case-insensitive occurrence of `query` in `<tag>` markup."""
    if not text or not query:
        return text or ""
    rx = re.compile(f"({escape_pattern(query)})", flags=re.IGNORECASE)
    return rx.sub(lambda m: f"<{tag}>{m.group(1)}</{tag}>", text)


def _parse_date(value: str) -> date | None:
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def format_date(value: str | None) -> str:
    """ISO date to the short US form, e.g. "Mar 7, 2024"."""
    if not value:
        return ""
    d = _parse_date(value)
    if d is None:
        return value
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year}"


def found_in_text(result: ScoredResult) -> str:
    return "Found in: " + ", ".join(result.matched_fields)


def _number_text(value: float | int | None, suffix: str) -> str:
    if not value:
        return ""
    n = int(value) if float(value).is_integer() else value
    return f"{n} {suffix}"


@dataclass(frozen=True)
class ResultView:
    permalink: str
    type: str
    icon: str
    label: str
    title_html: str
    excerpt_html: str
    date: str
    post_count: str
    reading_time: str
    categories: str
    found_in: str


def result_view(result: ScoredResult, query: str, *, excerpt_length: int = EXCERPT_LENGTH) -> ResultView:
    rec = result.record
    return ResultView(
        permalink=rec.permalink,
        type=rec.raw_type,
        icon=type_icon(rec.type),
        label=type_label(rec.type),
        title_html=highlight_text(rec.title, query),
        excerpt_html=highlight_text(display_excerpt(result, excerpt_length), query),
        date=format_date(rec.date),
        post_count=_number_text(rec.post_count, "posts"),
        reading_time=_number_text(rec.reading_time, "min read"),
        categories=", ".join(rec.categories[:2]),
        found_in=found_in_text(result) if result.matched_fields else "",
    )
