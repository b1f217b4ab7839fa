"""Apply Alembic migrations up to head."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from confession_wall.core.settings import settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def build_alembic_config(
    database_url: str | None = None,
    *,
    configure_logging: bool = True,
) -> Config:
    """Return an Alembic config pointing at the project's migrations folder.

    With ``configure_logging=False`` the logging section of ``alembic.ini`` is
    not applied, leaving the caller's logging setup untouched.
    """
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url or settings.database_url)
    cfg.attributes["configure_logger"] = configure_logging
    return cfg


def run_upgrade_head(database_url: str | None = None, *, configure_logging: bool = True) -> None:
    cfg = build_alembic_config(database_url, configure_logging=configure_logging)
    command.upgrade(cfg, "head")


def stamp_head(database_url: str | None = None, *, configure_logging: bool = True) -> None:
    """Mark a database whose tables were created directly as fully migrated."""
    cfg = build_alembic_config(database_url, configure_logging=configure_logging)
    command.stamp(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
