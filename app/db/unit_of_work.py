"""One commit per ledger operation.

Every manager operation writes a transaction record and adjusts an item's
stock. Both writes go through the same session and are committed together, so
a failure in either leaves neither behind.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import LedgerError, PersistenceError

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, db: Session, operation: str) -> None:
        self.db = db
        self.operation = operation
        self.current_stage = "start"

    def stage(self, name: str) -> None:
        self.current_stage = name


@contextmanager
def unit_of_work(db: Session, operation: str) -> Iterator[UnitOfWork]:
    """Run the block as a single transaction and translate store failures.

    Ledger errors raised inside the block roll back and propagate untouched;
    SQLAlchemy errors roll back and surface as ``PersistenceError`` naming the
    stage that failed.
    """

    uow = UnitOfWork(db, operation)
    try:
        yield uow
        uow.stage("commit")
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "ledger.unit_failed",
            extra={"extra_data": {"operation": operation, "stage": uow.current_stage}},
        )
        raise PersistenceError(operation, uow.current_stage, completed=()) from exc
    except BaseException:
        db.rollback()
        raise
