"""Process-wide logging configuration."""

import logging

from whattowatch.core.settings import settings


def setup_logging(level: str | None = None) -> None:
    """Configure a single console handler via ``logging.basicConfig``.

    Falls back to INFO when the configured level name is not recognised.
    """
    level_name = (level or settings.log_level or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
