"""Item stock ledger: the only code that changes ``Item.stock``.

Purchases and sales call into here as part of their own unit of work; nothing
else adjusts stock. Adjustments are applied store-side (``stock = stock +
delta``) so two concurrent deltas cannot overwrite one another.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from ..core.errors import InsufficientStockError, NotFoundError
from ..models.item import Item
from ..models.purchase import Purchase
from ..models.sale import Sale

logger = logging.getLogger(__name__)


def get_item(db: Session, item_number: int) -> Item | None:
    stmt = select(Item).where(Item.item_number == item_number)
    return db.execute(stmt).scalars().first()


def require_item(db: Session, item_number: int) -> Item:
    item = get_item(db, item_number)
    if item is None:
        raise NotFoundError("Item", item_number)
    return item


def check_availability(item: Item, requested: int) -> None:
    """Raise ``InsufficientStockError`` when ``requested`` exceeds on-hand stock.

    This reads the stock value already loaded on ``item``; with the default
    guard two concurrent sales can both pass it. See ``apply_delta`` for the
    conditional variant.
    """

    available = item.stock or 0
    if available < requested:
        raise InsufficientStockError(available=available, requested=requested, item_number=item.item_number)


def apply_delta(
    db: Session,
    item_number: int,
    delta: int,
    *,
    item: Item | None = None,
    guard: bool = False,
) -> int | None:
    """Add ``delta`` to the item's stock and return the new value.

    Returns ``None`` when the item no longer exists so reversals (deleting a
    purchase or sale whose item was removed) can carry on. With ``guard`` set,
    a negative delta is only applied while the result stays at or above zero;
    otherwise ``InsufficientStockError`` reports what is actually on hand.
    """

    table = Item.__table__
    stmt = (
        update(table)
        .where(table.c.item_number == item_number)
        .values(stock=table.c.stock + delta)
        .returning(table.c.stock)
    )
    if guard and delta < 0:
        stmt = stmt.where(table.c.stock + delta >= 0)
    new_stock = db.execute(stmt).scalar_one_or_none()

    if new_stock is None:
        current = db.execute(select(table.c.stock).where(table.c.item_number == item_number)).scalar_one_or_none()
        if current is None:
            logger.warning(
                "stock.item_missing",
                extra={"extra_data": {"item_number": item_number, "delta": delta}},
            )
            return None
        raise InsufficientStockError(available=current, requested=-delta, item_number=item_number)

    if item is not None:
        set_committed_value(item, "stock", new_stock)
    logger.info(
        "stock.adjusted",
        extra={"extra_data": {"item_number": item_number, "delta": delta, "stock": new_stock}},
    )
    return new_stock


def reconcile_item(db: Session, item_number: int) -> dict[str, int]:
    """Compare stored stock with the net quantity recorded in the ledger.

    ``difference`` is non-zero when the item carries an opening balance that
    predates its purchase history, or when an interrupted write needs repair.
    """

    item = require_item(db, item_number)
    purchased = db.execute(
        select(func.coalesce(func.sum(Purchase.quantity), 0)).where(Purchase.item_number == item_number)
    ).scalar_one()
    sold = db.execute(
        select(func.coalesce(func.sum(Sale.quantity), 0)).where(Sale.item_number == item_number)
    ).scalar_one()
    ledger_quantity = int(purchased) - int(sold)
    return {
        "item_number": item.item_number,
        "stock": item.stock,
        "purchased": int(purchased),
        "sold": int(sold),
        "ledger_quantity": ledger_quantity,
        "difference": item.stock - ledger_quantity,
    }
