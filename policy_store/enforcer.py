"""Casbin 执行器的懒加载。"""

from __future__ import annotations

from typing import Optional

import casbin
from loguru import logger

from config import Settings, settings as default_settings
from policy_store.adapter import Adapter

# Global variables for lazy initialization
_adapter: Optional[Adapter] = None
_enforcer: Optional[casbin.Enforcer] = None


def build_enforcer(adapter: Adapter, config: Optional[Settings] = None) -> casbin.Enforcer:
    """基于给定适配器创建执行器并加载策略。"""
    config = config or default_settings
    enforcer = casbin.Enforcer(config.casbin_model_path, adapter, enable_log=False)
    enforcer.enable_auto_save(config.casbin_auto_save)
    return enforcer


def get_enforcer(config: Optional[Settings] = None) -> casbin.Enforcer:
    """获取Casbin执行器（懒加载）。"""
    global _adapter, _enforcer

    if _enforcer is None:
        logger.info("Initializing Casbin enforcer...")
        _adapter = Adapter.from_settings(config or default_settings)
        _enforcer = build_enforcer(_adapter, config)
        logger.info("Casbin enforcer initialized successfully")

    return _enforcer


def reset_enforcer() -> None:
    """丢弃缓存的执行器并释放其引擎。"""
    global _adapter, _enforcer

    if _adapter is not None:
        _adapter.close()
    _adapter = None
    _enforcer = None


__all__ = ["build_enforcer", "get_enforcer", "reset_enforcer"]
