"""数据库会话与基类导出模块。"""

from .base import Base
from .session import check_database_connection, create_policy_engine, create_session_factory

# 导入模型确保元数据完整
from . import models  # noqa: F401

__all__ = [
    "Base",
    "create_policy_engine",
    "create_session_factory",
    "check_database_connection",
]
