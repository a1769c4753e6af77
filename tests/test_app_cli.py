from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from site_search.app import main


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def index_file(tmp_path: Path, index_rows: list[dict]) -> Path:
    p = tmp_path / "index.json"
    p.write_text(json.dumps(index_rows), encoding="utf-8")
    return p


def test_query_prints_ranked_results(site_home: Path, index_file: Path) -> None:
    result = CliRunner().invoke(main, ["query", "rust", "--index", str(index_file)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "2 results (1 post, 1 tag)"
    assert "Rust Guide [Post] score=16" in lines[1]
    assert "Found in: title, tag" in result.output


def test_query_json(site_home: Path, index_file: Path) -> None:
    result = CliRunner().invoke(main, ["query", "RUST", "--index", str(index_file), "--json", "-n", "1"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert len(data) == 1
    assert data[0]["permalink"] == "/posts/rust-guide/"
    assert data[0]["score"] == 16
    assert data[0]["matchedFields"] == ["title", "tag"]


def test_query_no_results(site_home: Path, index_file: Path) -> None:
    result = CliRunner().invoke(main, ["query", "haskell", "--index", str(index_file)])
    assert result.exit_code == 0
    assert result.output.strip() == "No results found"


def test_unreadable_index_degrades_to_no_results(site_home: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["query", "rust", "--index", str(tmp_path / "missing.json")])
    assert result.exit_code == 0
    assert result.output.strip() == "No results found"


def test_stats(site_home: Path, index_file: Path) -> None:
    result = CliRunner().invoke(main, ["stats", "--index", str(index_file)])
    assert result.exit_code == 0
    assert "4 searchable items" in result.output
    assert "  post: 1" in result.output


def test_config_command(site_home: Path) -> None:
    result = CliRunner().invoke(main, ["config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["app_dir"] == str(site_home)
    assert data["search"]["excerpt_length"] == 150


def test_query_survives_mistyped_excerpt_length(site_home: Path, index_file: Path) -> None:
    site_home.mkdir(parents=True)
    (site_home / "config.json").write_text(json.dumps({"search": {"excerpt_length": "eighty"}}), encoding="utf-8")
    result = CliRunner().invoke(main, ["query", "rust", "--index", str(index_file)])
    assert result.exit_code == 0, result.output
    assert "2 results (1 post, 1 tag)" in result.output
