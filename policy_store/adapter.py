"""Casbin 策略持久化适配器（SQLAlchemy 实现）。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Type, Union

from casbin import persist
from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings
from database.init_db import create_rule_table
from database.models import CasbinRule, CasbinRuleMixin
from database.session import create_policy_engine, create_session_factory
from policy_store.codec import line_from_record, record_from_tuple, slot_values, tuple_from_record
from policy_store.exceptions import (
    AdapterInitError,
    InvalidFilterError,
    RuleMismatchError,
    SchemaCreationError,
)
from policy_store.query import field_predicates, filter_predicates, rule_predicates
from policy_store.transaction import transaction

# save_policy 按此顺序写入：先策略规则，再角色继承规则
SAVED_SECTIONS = ("p", "g")


@dataclass
class Filter:
    """过滤加载条件；空列表表示该列不限制。"""

    ptype: List[str] = field(default_factory=list)
    v0: List[str] = field(default_factory=list)
    v1: List[str] = field(default_factory=list)
    v2: List[str] = field(default_factory=list)
    v3: List[str] = field(default_factory=list)
    v4: List[str] = field(default_factory=list)
    v5: List[str] = field(default_factory=list)


class Adapter(persist.Adapter):
    """把 casbin 模型与 ``casbin_rule`` 表同步的适配器。

    所有写操作都在单个事务中完成，失败即回滚。``sec`` 参数仅为兼容
    casbin 适配器接口而保留，路由只依赖 ``ptype``。
    """

    def __init__(
        self,
        engine: Union[Engine, str],
        rule_class: Type[CasbinRuleMixin] = CasbinRule,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self._owns_engine = isinstance(engine, str)
        if isinstance(engine, str):
            try:
                engine = create_policy_engine(engine, config=settings)
            except (SQLAlchemyError, ImportError) as exc:
                raise AdapterInitError(f"cannot open policy database: {exc}") from exc

        self._engine: Engine = engine
        self._rule_class = rule_class
        self._session_factory = create_session_factory(engine)
        self._filtered = False

        try:
            create_rule_table(engine, rule_class)
        except (SQLAlchemyError, OSError) as exc:
            raise SchemaCreationError(f"cannot create policy table: {exc}") from exc

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "Adapter":
        return cls(settings.database_url, settings=settings, **kwargs)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """释放由适配器自行创建的引擎。"""
        if self._owns_engine:
            self._engine.dispose()

    # ------------------------------------------------------------------
    # 加载
    # ------------------------------------------------------------------

    def load_policy(self, model) -> None:
        """按插入顺序加载全部策略。"""
        rule_class = self._rule_class
        with self._session_factory() as session:
            rules = session.scalars(select(rule_class).order_by(rule_class.id)).all()

        for rule in rules:
            persist.load_policy_line(line_from_record(rule), model)
        logger.debug(f"Loaded {len(rules)} policy rules")

    def load_filtered_policy(self, model, filter) -> None:  # noqa: A002 - casbin interface name
        """只加载满足过滤条件的策略。"""
        if not isinstance(filter, Filter):
            raise InvalidFilterError(f"invalid filter type: {type(filter).__name__}")

        rule_class = self._rule_class
        stmt = (
            select(rule_class)
            .where(*filter_predicates(rule_class, filter))
            .order_by(rule_class.id)
        )
        with self._session_factory() as session:
            rules = session.scalars(stmt).all()

        for rule in rules:
            persist.load_policy_line(line_from_record(rule), model)
        self._filtered = True
        logger.debug(f"Loaded {len(rules)} policy rules with filter {filter}")

    def is_filtered(self) -> bool:
        return self._filtered

    # ------------------------------------------------------------------
    # 写入
    # ------------------------------------------------------------------

    def save_policy(self, model) -> None:
        """清空表后整体写入模型中的全部规则。"""
        with transaction(self._session_factory) as session:
            session.execute(delete(self._rule_class))
            count = 0
            for sec in SAVED_SECTIONS:
                for ptype, assertion in model.model.get(sec, {}).items():
                    count += self._insert_rules(session, ptype, assertion.policy)
        logger.info(f"Saved {count} policy rules")

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        with transaction(self._session_factory) as session:
            self._insert_rules(session, ptype, [rule])
        logger.debug(f"Added policy {sec}/{ptype}: {list(rule)}")

    def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> None:
        with transaction(self._session_factory) as session:
            count = self._insert_rules(session, ptype, rules)
        logger.debug(f"Added {count} policies to {sec}/{ptype}")

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        with transaction(self._session_factory) as session:
            removed = self._delete_rule(session, ptype, rule)
        logger.debug(f"Removed {removed} row(s) for policy {sec}/{ptype}: {list(rule)}")

    def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> None:
        with transaction(self._session_factory) as session:
            removed = sum(self._delete_rule(session, ptype, rule) for rule in rules)
        logger.debug(f"Removed {removed} row(s) from {sec}/{ptype}")

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> None:
        rule_class = self._rule_class
        stmt = delete(rule_class).where(
            *field_predicates(rule_class, ptype, field_index, field_values)
        )
        with transaction(self._session_factory) as session:
            removed = session.execute(stmt).rowcount
        logger.debug(
            f"Removed {removed} row(s) from {sec}/{ptype} "
            f"matching {list(field_values)} at index {field_index}"
        )

    def update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> None:
        """改写匹配旧规则的记录；没有匹配行时静默成功。"""
        rule_class = self._rule_class
        stmt = (
            update(rule_class)
            .where(*rule_predicates(rule_class, ptype, old_rule))
            .values(**slot_values(new_rule))
        )
        with transaction(self._session_factory) as session:
            updated = session.execute(stmt).rowcount
        logger.debug(f"Updated {updated} row(s) in {sec}/{ptype}")

    def update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        """逐条删除旧规则并写入新规则，两组长度必须一致。"""
        if len(old_rules) != len(new_rules):
            raise RuleMismatchError(
                f"cannot update {len(old_rules)} rules with {len(new_rules)} replacements"
            )

        with transaction(self._session_factory) as session:
            for rule in old_rules:
                self._delete_rule(session, ptype, rule)
            self._insert_rules(session, ptype, new_rules)
        logger.debug(f"Replaced {len(old_rules)} policies in {sec}/{ptype}")

    def update_filtered_policies(
        self,
        sec: str,
        ptype: str,
        new_rules: Sequence[Sequence[str]],
        field_index: int,
        *field_values: str,
    ) -> List[List[str]]:
        """替换匹配过滤条件的规则，返回被替换掉的旧规则。"""
        rule_class = self._rule_class
        stmt = (
            select(rule_class)
            .where(*field_predicates(rule_class, ptype, field_index, field_values))
            .order_by(rule_class.id)
        )
        with transaction(self._session_factory) as session:
            matched = session.scalars(stmt).all()
            old_rules = [tuple_from_record(rule) for rule in matched]
            for rule_id in [rule.id for rule in matched]:
                session.execute(delete(rule_class).where(rule_class.id == rule_id))
            self._insert_rules(session, ptype, new_rules)

        logger.debug(
            f"Replaced {len(old_rules)} filtered policies in {sec}/{ptype} "
            f"with {len(new_rules)} new rules"
        )
        return old_rules

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    def _insert_rules(
        self, session: Session, ptype: str, rules: Sequence[Sequence[str]]
    ) -> int:
        records = [record_from_tuple(ptype, rule, self._rule_class) for rule in rules]
        session.add_all(records)
        session.flush()
        return len(records)

    def _delete_rule(self, session: Session, ptype: str, rule: Sequence[str]) -> int:
        rule_class = self._rule_class
        result = session.execute(
            delete(rule_class).where(*rule_predicates(rule_class, ptype, rule))
        )
        return result.rowcount


__all__ = ["Adapter", "Filter", "SAVED_SECTIONS"]
