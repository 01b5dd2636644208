"""Database initialization utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Type

from sqlalchemy.engine import Engine
from loguru import logger

from config import Settings, settings
from database.models import CasbinRule, CasbinRuleMixin
from database.session import check_database_connection, create_policy_engine


def ensure_sqlite_directory(engine: Engine) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = engine.url
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_rule_table(engine: Engine, rule_class: Optional[Type[CasbinRuleMixin]] = None) -> None:
    """Create the policy rule table if it does not exist yet."""
    rule_class = rule_class or CasbinRule
    table = rule_class.__table__  # type: ignore[attr-defined]

    ensure_sqlite_directory(engine)
    table.metadata.create_all(engine, tables=[table], checkfirst=True)

    logger.debug(f"Policy table '{table.name}' is ready")


def init_database(config: Optional[Settings] = None) -> None:
    """Verify the database is reachable and create the policy rule table."""
    config = config or settings
    engine = create_policy_engine(config=config)
    try:
        logger.info(f"Initializing policy database at {engine.url}")
        ensure_sqlite_directory(engine)
        check_database_connection(engine)
        create_rule_table(engine)
        logger.info("Policy database initialization completed")
    finally:
        engine.dispose()
