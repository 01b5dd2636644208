"""事务包装：保证每个写操作全部成功或全部回滚。"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from policy_store.exceptions import CommitError, PolicyStoreError, RollbackError

# 可恢复的业务/存储错误；其余异常视为程序缺陷，回滚后原样抛出
RECOVERABLE_ERRORS = (SQLAlchemyError, PolicyStoreError)


@contextmanager
def transaction(session_factory: Callable[[], Session]) -> Iterator[Session]:
    """在单个事务中执行 ``with`` 块。

    - 块内抛出存储/业务错误：回滚后原样抛出；回滚也失败时抛出
      :class:`RollbackError`，同时保留两个异常。
    - 块内抛出其它异常：回滚后抛出同一个异常对象。
    - 正常结束：提交；提交失败抛出 :class:`CommitError`。
    """

    session = session_factory()
    try:
        session.begin()
        try:
            yield session
        except RECOVERABLE_ERRORS as exc:
            logger.warning(f"Rolling back policy transaction: {exc}")
            try:
                session.rollback()
            except SQLAlchemyError as rollback_exc:
                logger.error(f"Rollback failed: {rollback_exc}")
                raise RollbackError(exc, rollback_exc) from exc
            raise
        except BaseException:
            try:
                session.rollback()
            except SQLAlchemyError as rollback_exc:
                logger.error(f"Rollback after unexpected fault failed: {rollback_exc}")
            raise

        try:
            session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc}")
            raise CommitError(f"committing transaction: {exc}") from exc
    finally:
        session.close()


__all__ = ["RECOVERABLE_ERRORS", "transaction"]
