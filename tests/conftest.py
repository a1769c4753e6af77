from __future__ import annotations

from pathlib import Path

import pytest

from site_search.core.models import Record


@pytest.fixture()
def site_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("SITE_SEARCH_HOME", str(home))
    return home


@pytest.fixture()
def index_rows() -> list[dict]:
    return [
        {
            "permalink": "/posts/rust-guide/",
            "type": "post",
            "title": "Rust Guide",
            "summary": "Getting started with ownership.",
            "content": "Borrowing and lifetimes explained.",
            "categories": ["Programming"],
            "tags": ["rust", "systems"],
            "section": "posts",
            "date": "2024-03-07",
            "readingTime": 6,
        },
        {"permalink": "/tags/rust/", "type": "tag", "title": "rust", "postCount": 3},
        {"permalink": "/about/", "type": "page", "title": "About", "summary": "Who writes this blog."},
        {"permalink": "/categories/programming/", "type": "category", "title": "Programming", "postCount": 12},
    ]


@pytest.fixture()
def records(index_rows: list[dict]) -> list[Record]:
    return [Record.from_dict(r) for r in index_rows]
