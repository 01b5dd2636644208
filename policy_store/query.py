"""Predicate builders for policy rule queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Type

from sqlalchemy import ColumnElement

from database.models import RULE_SLOT_COUNT, RULE_SLOT_NAMES, CasbinRuleMixin
from policy_store.codec import slot_values

if TYPE_CHECKING:
    from policy_store.adapter import Filter

FILTER_FIELDS = ("ptype", *RULE_SLOT_NAMES)


def filter_predicates(
    rule_class: Type[CasbinRuleMixin], rule_filter: "Filter"
) -> List[ColumnElement[bool]]:
    """One ``IN`` predicate per populated filter field; empty fields match anything."""
    predicates: List[ColumnElement[bool]] = []
    for name in FILTER_FIELDS:
        accepted = getattr(rule_filter, name)
        if accepted:
            predicates.append(getattr(rule_class, name).in_(list(accepted)))
    return predicates


def field_predicates(
    rule_class: Type[CasbinRuleMixin],
    ptype: Optional[str],
    field_index: int,
    field_values: Sequence[str],
) -> List[ColumnElement[bool]]:
    """Match ``field_values`` against the slots starting at ``field_index``.

    Slot ``i`` is constrained to ``field_values[i - field_index]`` when
    ``field_index <= i < field_index + len(field_values)``. An index outside
    ``0..5`` constrains no slot at all, leaving a ptype-only match.
    """
    predicates: List[ColumnElement[bool]] = []
    if ptype is not None:
        predicates.append(rule_class.ptype == ptype)
    if field_index < 0 or field_index >= RULE_SLOT_COUNT:
        return predicates

    for index, name in enumerate(RULE_SLOT_NAMES):
        if field_index <= index < field_index + len(field_values):
            predicates.append(getattr(rule_class, name) == field_values[index - field_index])
    return predicates


def rule_predicates(
    rule_class: Type[CasbinRuleMixin], ptype: str, rule: Sequence[str]
) -> List[ColumnElement[bool]]:
    """Exact match on ptype and all six slots, empty ones included."""
    predicates: List[ColumnElement[bool]] = [rule_class.ptype == ptype]
    for name, value in slot_values(rule).items():
        predicates.append(getattr(rule_class, name) == value)
    return predicates


__all__ = ["FILTER_FIELDS", "field_predicates", "filter_predicates", "rule_predicates"]
