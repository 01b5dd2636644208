"""策略存储统一的 SQLAlchemy 基类。"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """项目实体的统一基类。"""


__all__ = ["Base"]
