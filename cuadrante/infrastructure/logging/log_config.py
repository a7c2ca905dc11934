"""Logging setup for the API process and client scripts.

Each ``log_level_<category>`` setting controls one group of loggers, so SQL
echo, outbound HTTP or sync traffic can be turned up without flooding the
rest of the output.

Usage:
    from cuadrante.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan or a script's main()
"""

import logging
import sys

from cuadrante.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

CATEGORY_LOGGERS: dict[str, tuple[str, ...]] = {
    "sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "http": ("httpx", "httpcore"),
    "uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "sync": (
        "cuadrante.application.services.sync_bus",
        "cuadrante.client.sync_listener",
    ),
}


def resolve_level(raw: str, default: int = logging.INFO) -> int:
    """Level name to logging constant; unknown names fall back to *default*."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def category_levels(settings: Settings) -> dict[str, int]:
    return {
        category: resolve_level(getattr(settings, f"log_level_{category}"))
        for category in CATEGORY_LOGGERS
    }


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root and per-category levels. Safe to call more than once."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(resolve_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    levels = category_levels(settings)
    for category, names in CATEGORY_LOGGERS.items():
        for name in names:
            logging.getLogger(name).setLevel(levels[category])

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{c}={logging.getLevelName(lvl)}" for c, lvl in levels.items()),
    )
