from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from site_search.core.config import AppConfig


def configure_logging(config: AppConfig, *, level: int = logging.INFO, console: bool = True) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    config.paths.app_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        config.paths.log_path,
        maxBytes=2_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(file_handler)

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)
