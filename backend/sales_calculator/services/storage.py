# Overview: Session/transaction helpers shared by the write paths of every service.

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(operation: str) -> Iterator:
    """
    Run a unit of work and commit it, or roll everything back.

    Domain errors raised inside the block propagate unchanged after the
    rollback; database failures are wrapped in StorageError naming the
    operation ("Failed to <operation>").
    """
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Storage failure during %s: %s", operation, exc)
        raise StorageError(f"Failed to {operation}", details={"operation": operation}) from exc
    except Exception:
        db.session.rollback()
        raise


def begin_write_lock() -> None:
    """
    Take the database write lock before a multi-statement write.

    NOTE: Only SQLite needs this (BEGIN IMMEDIATE); a transaction already in
    progress on the connection keeps its own lock.
    """
    if db.engine.dialect.name != "sqlite":
        return
    raw = db.session.connection().connection
    if not raw.in_transaction:
        db.session.execute(text("BEGIN IMMEDIATE"))
