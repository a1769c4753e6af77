from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

from site_search.core.utils import atomic_write_text

logger = logging.getLogger(__name__)


HOME_ENV_VAR = "SITE_SEARCH_HOME"


def default_app_dir() -> Path:
    override = os.environ.get(HOME_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".site_search"


@dataclass(frozen=True)
class Paths:
    app_dir: Path

    @property
    def config_path(self) -> Path:
        return self.app_dir / "config.json"

    @property
    def log_path(self) -> Path:
        return self.app_dir / "site_search.log"

    @classmethod
    def default(cls) -> Paths:
        return cls(app_dir=default_app_dir())


@dataclass(frozen=True)
class SearchSettings:
    base_url: str = "http://localhost:1313/"
    index_url: str = "/index.json"
    index_path: str | None = None
    debounce_seconds: float = 0.3
    excerpt_length: int = 150
    fetch_timeout_seconds: float = 20.0
    user_agent: str = "site-search/0.1"

    def resolved_index_url(self) -> str:
        return urljoin(self.base_url, self.index_url)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchSettings:
        """Unknown keys are ignored; a value that does not fit its field keeps the default."""
        defaults = cls()
        out: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            default = getattr(defaults, f.name)
            try:
                out[f.name] = _coerce(data[f.name], default, optional=f.name in _OPTIONAL_FIELDS)
            except (TypeError, ValueError):
                logger.warning("Ignoring config value search.%s=%r; using %r", f.name, data[f.name], default)
        return cls(**out)


_OPTIONAL_FIELDS = {"index_path"}


def _coerce(value: Any, default: Any, *, optional: bool = False) -> Any:
    if value is None:
        if optional:
            return None
        raise TypeError("null")
    if isinstance(value, bool):
        raise TypeError("bool")
    if isinstance(default, int):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("not an integer")
        n = int(value)
        if n <= 0:
            raise ValueError("must be positive")
        return n
    if isinstance(default, float):
        f = float(value)
        if f < 0:
            raise ValueError("must not be negative")
        return f
    if not isinstance(value, str):
        raise TypeError("not a string")
    return value


@dataclass(frozen=True)
class AppConfig:
    paths: Paths = field(default_factory=Paths.default)
    search: SearchSettings = field(default_factory=SearchSettings)

    @classmethod
    def load(cls, paths: Paths | None = None) -> AppConfig:
        paths = paths or Paths.default()
        p = paths.config_path
        if not p.exists():
            return cls(paths=paths)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
            search = SearchSettings.from_dict(dict(data.get("search") or {}))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", p, e)
            return cls(paths=paths)
        return cls(paths=paths, search=search)

    def to_dict(self) -> dict[str, Any]:
        return {"app_dir": str(self.paths.app_dir), "search": asdict(self.search)}

    def save(self) -> None:
        payload = {"search": asdict(self.search)}
        atomic_write_text(self.paths.config_path, json.dumps(payload, indent=2, sort_keys=True))
