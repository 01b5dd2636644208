"""Casbin 策略模型定义。"""

from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from database.base import Base

RULE_SLOT_COUNT = 6
RULE_SLOT_NAMES = tuple(f"v{index}" for index in range(RULE_SLOT_COUNT))


class CasbinRuleMixin:
    """策略表的公共列定义，可用于声明自定义表名的规则表。

    所有值列均为非空字符串，默认 ``""`` 表示未使用；
    ``(ptype, v0..v5)`` 整体唯一，防止重复规则。
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ptype: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v0: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v1: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v2: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v3: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v4: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    v5: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    @declared_attr.directive
    def __table_args__(cls):
        return (
            UniqueConstraint(
                "ptype",
                *RULE_SLOT_NAMES,
                name=f"uq_{cls.__tablename__}_rule",
            ),
        )

    def __repr__(self) -> str:
        values = ", ".join(getattr(self, name) or "" for name in RULE_SLOT_NAMES)
        return f"<{type(self).__name__} {self.id}: {self.ptype}, {values}>"


class CasbinRule(CasbinRuleMixin, Base):
    """Casbin 策略表结构，与 casbin-sqlalchemy-adapter 保持一致。"""

    __tablename__ = "casbin_rule"
