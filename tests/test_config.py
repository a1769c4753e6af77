from __future__ import annotations

import json
from pathlib import Path

from site_search.core.config import AppConfig, Paths, SearchSettings


def test_defaults_when_missing(site_home: Path) -> None:
    config = AppConfig.load()
    assert config.paths.app_dir == site_home
    assert config.search.debounce_seconds == 0.3
    assert config.search.excerpt_length == 150
    assert config.search.resolved_index_url() == "http://localhost:1313/index.json"


def test_save_and_load_round_trip(site_home: Path) -> None:
    config = AppConfig(
        paths=Paths.default(),
        search=SearchSettings(base_url="https://blog.example.com/", index_path="/srv/index.json"),
    )
    config.save()
    loaded = AppConfig.load()
    assert loaded.search.base_url == "https://blog.example.com/"
    assert loaded.search.index_path == "/srv/index.json"
    assert loaded.search.resolved_index_url() == "https://blog.example.com/index.json"


def test_unknown_keys_ignored_and_bad_json_falls_back(site_home: Path) -> None:
    site_home.mkdir(parents=True)
    p = site_home / "config.json"
    p.write_text(json.dumps({"search": {"excerpt_length": 80, "colour": "blue"}}), encoding="utf-8")
    assert AppConfig.load().search.excerpt_length == 80

    p.write_text("{oops", encoding="utf-8")
    assert AppConfig.load().search == SearchSettings()


def test_wrongly_typed_values_are_coerced_or_defaulted(site_home: Path) -> None:
    site_home.mkdir(parents=True)
    (site_home / "config.json").write_text(
        json.dumps(
            {
                "search": {
                    "excerpt_length": "80",
                    "debounce_seconds": "fast",
                    "fetch_timeout_seconds": 5,
                    "base_url": 42,
                    "index_path": None,
                }
            }
        ),
        encoding="utf-8",
    )
    search = AppConfig.load().search
    assert search.excerpt_length == 80
    assert search.debounce_seconds == 0.3
    assert search.fetch_timeout_seconds == 5.0
    assert search.base_url == SearchSettings().base_url
    assert search.index_path is None
