"""Create the database tables without running migrations (local use)."""

from confession_wall.core.settings import settings
from confession_wall.db.session import build_engine, create_tables
from confession_wall.scripts.migrate import stamp_head


def init_db(database_url: str | None = None, *, configure_logging: bool = True) -> None:
    """Create all tables and stamp the Alembic head so later upgrades apply cleanly."""
    url = database_url or settings.database_url
    engine = build_engine(url)
    try:
        create_tables(engine)
    finally:
        engine.dispose()
    stamp_head(url, configure_logging=configure_logging)


if __name__ == "__main__":
    init_db()
    print("Database initialized.")
