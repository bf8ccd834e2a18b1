"""Logging helpers."""
from __future__ import annotations

import logging
from pathlib import Path

_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def configure_logging(level: str, log_dir: Path, *, filename: str = "watcher.log") -> None:
    """Configure stream + file logging for CLI usage."""
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / filename, encoding="utf-8"),
        ],
    )
    # Request lines from the webhook client drown out the per-check summary.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
