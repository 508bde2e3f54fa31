"""Atomic counters behind the ``PUR0001``/``SALE0001`` style identifiers."""

from __future__ import annotations

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import PersistenceError
from ..models.sequence import Sequence

logger = logging.getLogger(__name__)

PURCHASE_SEQUENCE = "purchaseId"
SALE_SEQUENCE = "saleId"

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def next_id(db: Session, name: str) -> int:
    """Increment the named counter and return its new value in one statement.

    The counter is created at ``1`` the first time it is used. The increment
    runs inside the caller's transaction, so a rolled back creation gives its
    number back instead of leaving a gap.
    """

    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is None:
        raise PersistenceError("allocate id", f"unsupported dialect {db.get_bind().dialect.name}")

    table = Sequence.__table__
    stmt = (
        insert(table)
        .values(name=name, value=1)
        .on_conflict_do_update(index_elements=[table.c.name], set_={"value": table.c.value + 1})
        .returning(table.c.value)
    )
    try:
        value = db.execute(stmt).scalar_one()
    except SQLAlchemyError as exc:
        logger.exception("sequence.increment_failed", extra={"extra_data": {"sequence": name}})
        raise PersistenceError("allocate id", f"sequence {name}") from exc
    return value


def format_id(prefix: str, value: int, width: int | None = None) -> str:
    """Render ``value`` zero-padded behind ``prefix``; wider numbers are never truncated."""

    pad = width if width is not None else settings.ID_PAD_WIDTH
    return f"{prefix}{value:0{pad}d}"


def next_purchase_id(db: Session) -> str:
    return format_id(settings.PURCHASE_ID_PREFIX, next_id(db, PURCHASE_SEQUENCE))


def next_sale_id(db: Session) -> str:
    return format_id(settings.SALE_ID_PREFIX, next_id(db, SALE_SEQUENCE))
