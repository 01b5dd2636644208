"""数据库引擎与会话管理。"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import Settings, settings as default_settings


def _engine_kwargs(database_url: str, config: Settings, echo: Optional[bool]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "echo": config.db_echo if echo is None else echo,
        "pool_pre_ping": True,
    }
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {})
        kwargs["connect_args"].setdefault("timeout", config.sqlite_busy_timeout_seconds)
    return kwargs


def _install_sqlite_pragmas(engine: Engine, config: Settings) -> None:
    journal_mode = config.sqlite_journal_mode
    synchronous = config.sqlite_synchronous
    busy_timeout_ms = max(config.sqlite_busy_timeout_seconds, 1) * 1000

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:  # pragma: no cover - connection setup
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
        if journal_mode:
            cursor.execute(f"PRAGMA journal_mode={journal_mode}")
        if synchronous:
            cursor.execute(f"PRAGMA synchronous={synchronous}")
        cursor.close()


def create_policy_engine(
    database_url: Optional[str] = None,
    *,
    config: Optional[Settings] = None,
    echo: Optional[bool] = None,
) -> Engine:
    """按配置创建同步引擎，SQLite 连接会附加 PRAGMA 设置。"""

    config = config or default_settings
    url = database_url or config.database_url
    engine = create_engine(url, **_engine_kwargs(url, config, echo))
    if url.startswith("sqlite"):
        _install_sqlite_pragmas(engine, config)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def check_database_connection(engine: Engine) -> None:
    """验证数据库连接可用性。"""

    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


__all__ = [
    "create_policy_engine",
    "create_session_factory",
    "check_database_connection",
]
