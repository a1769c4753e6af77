from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SiteSearchError(RuntimeError):
    pass


class MalformedRecordError(SiteSearchError):
    def __init__(self, reason: str, data: Any = None) -> None:
        super().__init__(f"Malformed record: {reason}")
        self.reason = reason
        self.data = data


class RecordType(str, Enum):
    POST = "post"
    PAGE = "page"
    CATEGORY = "category"
    TAG = "tag"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> RecordType:
        s = value if isinstance(value, str) else ""
        for t in cls:
            if t is not cls.UNKNOWN and t.value == s:
                return t
        return cls.UNKNOWN


def type_priority(t: RecordType) -> int:
    """Tie-break rank used when two results share a score; higher sorts first."""
    if t is RecordType.POST:
        return 4
    if t is RecordType.PAGE:
        return 3
    if t is RecordType.CATEGORY:
        return 2
    if t is RecordType.TAG:
        return 1
    return 0


def type_icon(t: RecordType) -> str:
    if t is RecordType.PAGE:
        return "📝"
    if t is RecordType.CATEGORY:
        return "📁"
    if t is RecordType.TAG:
        return "🏷️"
    # post and anything unrecognized
    return "📄"


def type_label(t: RecordType) -> str:
    if t is RecordType.POST:
        return "Post"
    if t is RecordType.PAGE:
        return "Page"
    if t is RecordType.CATEGORY:
        return "Category"
    if t is RecordType.TAG:
        return "Tag"
    return "Content"


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value)
    return s if s else None


def _str_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value if v is not None)


def _opt_number(value: Any) -> float | int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        f = float(str(value).strip())
    except ValueError:
        return None
    return int(f) if f.is_integer() else f


@dataclass(frozen=True)
class Record:
    permalink: str
    type: RecordType = RecordType.UNKNOWN
    raw_type: str = ""
    title: str | None = None
    summary: str | None = None
    content: str | None = None
    categories: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    section: str | None = None
    date: str | None = None
    post_count: float | int | None = None
    reading_time: float | int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Record:
        """Build a record from one object of the index document.

        Optional fields may be missing or null. Only a non-mapping object or a
        missing permalink/id is rejected.
        """
        if not isinstance(data, Mapping):
            raise MalformedRecordError("expected an object", data)

        permalink = _opt_str(data.get("permalink")) or _opt_str(data.get("id"))
        if not permalink:
            raise MalformedRecordError("missing permalink", data)

        raw_type = str(data.get("type") or "")
        return cls(
            permalink=permalink,
            type=RecordType.parse(raw_type),
            raw_type=raw_type,
            title=_opt_str(data.get("title")),
            summary=_opt_str(data.get("summary")),
            content=_opt_str(data.get("content")),
            categories=_str_tuple(data.get("categories")),
            tags=_str_tuple(data.get("tags")),
            section=_opt_str(data.get("section")),
            date=_opt_str(data.get("date")),
            post_count=_opt_number(data.get("postCount", data.get("post_count"))),
            reading_time=_opt_number(data.get("readingTime", data.get("reading_time"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "permalink": self.permalink,
            "type": self.raw_type,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "section": self.section,
            "date": self.date,
            "postCount": self.post_count,
            "readingTime": self.reading_time,
        }


@dataclass(frozen=True)
class ScoredResult:
    record: Record
    score: int
    matched_fields: tuple[str, ...]

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on the result itself.
        if name == "record":
            raise AttributeError(name)
        return getattr(self.record, name)

    def to_dict(self) -> dict[str, Any]:
        out = self.record.to_dict()
        out["score"] = self.score
        out["matchedFields"] = list(self.matched_fields)
        return out
