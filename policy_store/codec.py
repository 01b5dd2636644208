"""策略规则与数据库行之间的编解码。

规则元组（``["alice", "data1", "read"]``）按顺序写入 ``v0..v5``，
多于六个的值会被丢弃；解码时在第一个空槽处截断。
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Type, TypeVar

from database.models import RULE_SLOT_COUNT, RULE_SLOT_NAMES, CasbinRule, CasbinRuleMixin

RuleT = TypeVar("RuleT", bound=CasbinRuleMixin)

LINE_SEPARATOR = ", "


def slot_values(values: Sequence[str]) -> Dict[str, str]:
    """把规则元组展开为 ``{"v0": ..., "v5": ...}``，未使用的槽为空字符串。"""
    return {
        name: (values[index] if index < len(values) else "")
        for index, name in enumerate(RULE_SLOT_NAMES)
    }


def record_values(record: CasbinRuleMixin) -> Tuple[str, ...]:
    return tuple(getattr(record, name) or "" for name in RULE_SLOT_NAMES)


def record_from_tuple(
    ptype: str,
    values: Sequence[str],
    rule_class: Type[RuleT] = CasbinRule,  # type: ignore[assignment]
) -> RuleT:
    """由 ptype 与规则元组构造一条待写入的记录。"""
    return rule_class(ptype=ptype, **slot_values(values))


def tuple_from_record(record: CasbinRuleMixin) -> List[str]:
    """还原规则元组，遇到第一个空槽即停止。"""
    rule: List[str] = []
    for value in record_values(record):
        if not value:
            break
        rule.append(value)
    return rule


def line_from_record(record: CasbinRuleMixin) -> str:
    """渲染为 ``ptype, v0, v1, ...`` 形式的策略行。

    字段数由最后一个非空槽决定（从 v5 向前扫描）；所有槽都为空时返回空串，
    casbin 的行解析器会忽略空行。
    """
    values = record_values(record)
    for count in range(RULE_SLOT_COUNT, 0, -1):
        if values[count - 1]:
            return LINE_SEPARATOR.join((record.ptype, *values[:count]))
    return ""


__all__ = [
    "LINE_SEPARATOR",
    "line_from_record",
    "record_from_tuple",
    "record_values",
    "slot_values",
    "tuple_from_record",
]
