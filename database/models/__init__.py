"""数据库模型导出。"""

from .casbin import RULE_SLOT_COUNT, RULE_SLOT_NAMES, CasbinRule, CasbinRuleMixin

__all__ = [
    "CasbinRule",
    "CasbinRuleMixin",
    "RULE_SLOT_COUNT",
    "RULE_SLOT_NAMES",
]
