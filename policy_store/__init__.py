"""SQLAlchemy 持久化的 Casbin 策略存储。"""

from .adapter import Adapter, Filter
from .exceptions import (
    AdapterInitError,
    CommitError,
    InvalidFilterError,
    PolicyStoreError,
    RollbackError,
    RuleMismatchError,
    SchemaCreationError,
    TransactionError,
)
from .transaction import transaction

__all__ = [
    "Adapter",
    "Filter",
    "transaction",
    "PolicyStoreError",
    "AdapterInitError",
    "SchemaCreationError",
    "InvalidFilterError",
    "RuleMismatchError",
    "TransactionError",
    "RollbackError",
    "CommitError",
]
