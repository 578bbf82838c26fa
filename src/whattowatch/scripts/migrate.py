# src/whattowatch/scripts/migrate.py
from __future__ import annotations
import os
from alembic import command
from alembic.config import Config

from whattowatch.core.settings import settings

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")


def _alembic_config() -> Config:
    cfg = Config(os.path.join(_MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    cfg.set_main_option("script_location", os.path.abspath(_MIGRATIONS_DIR))
    return cfg


def run_upgrade_head() -> None:
    command.upgrade(_alembic_config(), "head")


if __name__ == "__main__":
    run_upgrade_head()
