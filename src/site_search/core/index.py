from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import aiohttp

from site_search.core.models import MalformedRecordError, Record, ScoredResult, SiteSearchError
from site_search.core.ranker import search

logger = logging.getLogger(__name__)


class IndexLoadError(SiteSearchError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Index unavailable: {source} ({reason})")
        self.source = source
        self.reason = reason


@dataclass(frozen=True)
class SearchIndex:
    records: tuple[Record, ...] = ()

    @classmethod
    def empty(cls) -> SearchIndex:
        return cls(records=())

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def type_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for r in self.records:
            counts[r.raw_type] = counts.get(r.raw_type, 0) + 1
        return counts


def parse_index_document(data: Any, *, source: str = "<memory>") -> SearchIndex:
    if not isinstance(data, list):
        raise IndexLoadError(source, f"expected a JSON array, got {type(data).__name__}")

    records: list[Record] = []
    for i, item in enumerate(data):
        try:
            records.append(Record.from_dict(item))
        except MalformedRecordError as e:
            logger.warning("Skipping index entry %d from %s: %s", i, source, e.reason)
    return SearchIndex(records=tuple(records))


def load_index_file(path: Path) -> SearchIndex:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IndexLoadError(str(path), str(e)) from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise IndexLoadError(str(path), f"invalid JSON: {e}") from e
    return parse_index_document(data, source=str(path))


async def fetch_index(
    session: aiohttp.ClientSession,
    url: str,
    *,
    user_agent: str | None = None,
    timeout_seconds: float = 20.0,
) -> SearchIndex:
    headers = {"Accept": "application/json"}
    if user_agent:
        headers["User-Agent"] = user_agent
    try:
        async with session.get(url, headers=headers, timeout=aiohttp.ClientTimeout(total=timeout_seconds)) as resp:
            if resp.status >= 400:
                raise IndexLoadError(url, f"status={resp.status}")
            body = await resp.text(errors="replace")
    except aiohttp.ClientError as e:
        raise IndexLoadError(url, str(e)) from e
    except asyncio.TimeoutError as e:
        raise IndexLoadError(url, "timed out") from e

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise IndexLoadError(url, f"invalid JSON: {e}") from e
    return parse_index_document(data, source=url)


class IndexStore:
    """Owns the process-wide index.

    Readers always see either the empty index or a complete one: a loaded
    index is published by a single reference assignment and never mutated.
    """

    def __init__(self) -> None:
        self._index = SearchIndex.empty()
        self._loaded = False

    @property
    def index(self) -> SearchIndex:
        return self._index

    @property
    def loaded(self) -> bool:
        return self._loaded

    def publish(self, index: SearchIndex) -> None:
        self._index = index
        self._loaded = True
        logger.info("Loaded %d searchable items", len(index))
        logger.info("Search index contains: %s", index.type_counts())

    async def load(
        self,
        session: aiohttp.ClientSession,
        url: str,
        *,
        user_agent: str | None = None,
        timeout_seconds: float = 20.0,
    ) -> bool:
        try:
            index = await fetch_index(session, url, user_agent=user_agent, timeout_seconds=timeout_seconds)
        except IndexLoadError as e:
            logger.error("Search data not found: %s", e)
            return False
        self.publish(index)
        return True

    def load_file(self, path: Path) -> bool:
        try:
            index = load_index_file(path)
        except IndexLoadError as e:
            logger.error("Search data not found: %s", e)
            return False
        self.publish(index)
        return True

    def search(self, query: str) -> list[ScoredResult]:
        return search(query, self._index.records)
