"""Purchase manager: record stock received and keep item stock in step."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import delete, desc, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.errors import ConflictError, NotFoundError
from ..core.parsing import MAX_QUANTITY, parse_amount, parse_date, require_int, utc_timestamp
from ..db.unit_of_work import unit_of_work
from ..models.purchase import Purchase
from ..models.vendor import Vendor
from .items import apply_delta, require_item
from .sequences import next_purchase_id

logger = logging.getLogger(__name__)


def get_purchase(db: Session, purchase_id: str) -> Purchase | None:
    stmt = select(Purchase).where(Purchase.purchase_id == purchase_id)
    return db.execute(stmt).scalars().first()


def require_purchase(db: Session, purchase_id: str) -> Purchase:
    purchase = get_purchase(db, purchase_id)
    if purchase is None:
        raise NotFoundError("Purchase", purchase_id)
    return purchase


def list_purchases(
    db: Session,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    vendor_id: int | None = None,
    limit: int | None = None,
) -> list[Purchase]:
    """Return purchases newest first, optionally bounded by date and vendor."""

    stmt = select(Purchase)
    if start_date is not None:
        stmt = stmt.where(Purchase.purchase_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Purchase.purchase_date <= end_date)
    if vendor_id is not None:
        stmt = stmt.where(Purchase.vendor_id == vendor_id)
    stmt = stmt.order_by(desc(Purchase.purchase_date), desc(Purchase.id))
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def create_purchase(
    db: Session,
    *,
    item_number: object,
    vendor_id: object,
    purchase_date: object,
    quantity: object,
    unit_price: object,
    actor: str | None = None,
) -> Purchase:
    """Record a purchase and add its quantity to the item's stock."""

    number = require_int("item_number", item_number)
    vendor_key = require_int("vendor_id", vendor_id)
    when = parse_date("purchase_date", purchase_date)
    qty = require_int("quantity", quantity, minimum=1, maximum=MAX_QUANTITY)
    price = parse_amount("unit_price", unit_price)

    with unit_of_work(db, "create purchase") as uow:
        uow.stage("resolve references")
        item = require_item(db, number)
        vendor = db.get(Vendor, vendor_key)
        if vendor is None:
            raise NotFoundError("Vendor", vendor_key)

        uow.stage("allocate purchase id")
        purchase_id = next_purchase_id(db)

        uow.stage("insert purchase")
        purchase = Purchase(
            purchase_id=purchase_id,
            purchase_date=when,
            item_number=item.item_number,
            item_name=item.item_name,
            vendor_id=vendor.id,
            vendor_name=vendor.full_name,
            quantity=qty,
            unit_price=price,
            total_cost=qty * price,
            created_by=actor,
            created_at=utc_timestamp(),
        )
        db.add(purchase)
        db.flush()

        uow.stage("adjust stock")
        apply_delta(db, item.item_number, qty, item=item)

    db.refresh(purchase)
    logger.info(
        "purchase.created",
        extra={"extra_data": {"purchase_id": purchase_id, "item_number": number, "quantity": qty, "actor": actor}},
    )
    return purchase


def update_purchase(
    db: Session,
    purchase_id: str,
    *,
    quantity: object,
    unit_price: object | None = None,
    actor: str | None = None,
) -> Purchase:
    """Change a purchase's quantity (and optionally price), moving stock by the difference.

    Leaving ``unit_price`` out keeps the recorded price. The stock change is a
    single ``new - old`` delta; it is not checked against availability, so
    shrinking a purchase whose units were already sold can take stock below
    zero.
    """

    qty = require_int("quantity", quantity, minimum=1, maximum=MAX_QUANTITY)
    price = parse_amount("unit_price", unit_price) if unit_price is not None else None

    with unit_of_work(db, "update purchase") as uow:
        uow.stage("load purchase")
        purchase = require_purchase(db, purchase_id)
        new_price = price if price is not None else purchase.unit_price
        delta = qty - purchase.quantity

        uow.stage("adjust stock")
        if delta:
            apply_delta(db, purchase.item_number, delta)

        uow.stage("update purchase")
        purchase.quantity = qty
        purchase.unit_price = new_price
        purchase.total_cost = qty * new_price
        purchase.updated_by = actor
        purchase.updated_at = utc_timestamp()
        try:
            db.flush()
        except StaleDataError as exc:
            raise ConflictError("Purchase", purchase_id) from exc

    db.refresh(purchase)
    logger.info(
        "purchase.updated",
        extra={"extra_data": {"purchase_id": purchase_id, "delta": delta, "actor": actor}},
    )
    return purchase


def delete_purchase(db: Session, purchase_id: str, *, actor: str | None = None) -> str:
    """Remove a purchase and take its units back out of stock.

    A missing item is tolerated: the purchase is still deleted.
    """

    with unit_of_work(db, "delete purchase") as uow:
        uow.stage("load purchase")
        purchase = require_purchase(db, purchase_id)

        uow.stage("adjust stock")
        apply_delta(db, purchase.item_number, -purchase.quantity)

        uow.stage("delete purchase")
        removed = db.execute(delete(Purchase).where(Purchase.id == purchase.id))
        if removed.rowcount == 0:
            raise ConflictError("Purchase", purchase_id)

    logger.info(
        "purchase.deleted",
        extra={"extra_data": {"purchase_id": purchase_id, "actor": actor}},
    )
    return purchase_id
