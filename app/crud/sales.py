"""Sale manager: record stock sold, refusing sales that exceed what is on hand."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import delete, desc, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.config import StockGuard, settings
from ..core.errors import ConflictError, NotFoundError
from ..core.parsing import MAX_QUANTITY, parse_amount, parse_date, parse_flag, require_int, require_text, utc_timestamp
from ..db.unit_of_work import unit_of_work
from ..models.customer import Customer
from ..models.item import Item
from ..models.sale import Sale
from .items import apply_delta, check_availability, require_item
from .sequences import next_sale_id

logger = logging.getLogger(__name__)


def _guarded() -> bool:
    return settings.STOCK_GUARD == StockGuard.CONDITIONAL


def _discounted(list_price: float, discount_percent: float) -> float:
    if not discount_percent:
        return list_price
    return list_price * (1 - discount_percent / 100)


def _item_discount(item: Item) -> float:
    percent = float(item.discount_percent or 0)
    # Directory edits are not validated here; clamp so a bad row cannot
    # produce a negative price.
    return min(max(percent, 0.0), 100.0)


def get_sale(db: Session, sale_id: str) -> Sale | None:
    stmt = select(Sale).where(Sale.sale_id == sale_id)
    return db.execute(stmt).scalars().first()


def require_sale(db: Session, sale_id: str) -> Sale:
    sale = get_sale(db, sale_id)
    if sale is None:
        raise NotFoundError("Sale", sale_id)
    return sale


def list_sales(
    db: Session,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    customer_id: str | None = None,
    limit: int | None = None,
) -> list[Sale]:
    stmt = select(Sale)
    if start_date is not None:
        stmt = stmt.where(Sale.sale_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Sale.sale_date <= end_date)
    if customer_id:
        stmt = stmt.where(Sale.customer_id == customer_id)
    stmt = stmt.order_by(desc(Sale.sale_date), desc(Sale.id))
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def create_sale(
    db: Session,
    *,
    item_number: object,
    customer_id: object,
    sale_date: object,
    quantity: object,
    unit_price: object,
    apply_discount: object = False,
    actor: str | None = None,
) -> Sale:
    """Record a sale and take its quantity out of the item's stock.

    With ``apply_discount`` the item's current ``discount_percent`` is taken
    off ``unit_price`` and stored on the sale as a snapshot.
    """

    number = require_int("item_number", item_number)
    customer_key = require_text("customer_id", customer_id)
    when = parse_date("sale_date", sale_date)
    qty = require_int("quantity", quantity, minimum=1, maximum=MAX_QUANTITY)
    list_price = parse_amount("unit_price", unit_price)
    use_discount = parse_flag(apply_discount)

    with unit_of_work(db, "create sale") as uow:
        uow.stage("resolve references")
        item = require_item(db, number)
        customer = db.execute(select(Customer).where(Customer.customer_id == customer_key)).scalars().first()
        if customer is None:
            raise NotFoundError("Customer", customer_key)

        check_availability(item, qty)

        discount = _item_discount(item) if use_discount else 0.0
        final_price = _discounted(list_price, discount)

        uow.stage("allocate sale id")
        sale_id = next_sale_id(db)

        uow.stage("insert sale")
        sale = Sale(
            sale_id=sale_id,
            sale_date=when,
            item_number=item.item_number,
            item_name=item.item_name,
            customer_id=customer.customer_id,
            customer_name=customer.full_name,
            quantity=qty,
            list_unit_price=list_price,
            unit_price=final_price,
            discount_percent=discount,
            total=qty * final_price,
            created_by=actor,
            created_at=utc_timestamp(),
        )
        db.add(sale)
        db.flush()

        uow.stage("adjust stock")
        apply_delta(db, item.item_number, -qty, item=item, guard=_guarded())

    db.refresh(sale)
    logger.info(
        "sale.created",
        extra={"extra_data": {"sale_id": sale_id, "item_number": number, "quantity": qty, "actor": actor}},
    )
    return sale


def update_sale(
    db: Session,
    sale_id: str,
    *,
    quantity: object,
    unit_price: object | None = None,
    actor: str | None = None,
) -> Sale:
    """Change a sale's quantity (and optionally its quoted price).

    Stock moves by ``old - new``. Growing a sale re-checks availability for the
    extra units and fails without touching anything when they are not on hand.
    ``unit_price`` is the quoted price; the discount captured when the sale was
    created is applied to it again.
    """

    qty = require_int("quantity", quantity, minimum=1, maximum=MAX_QUANTITY)
    list_price = parse_amount("unit_price", unit_price) if unit_price is not None else None

    with unit_of_work(db, "update sale") as uow:
        uow.stage("load sale")
        sale = require_sale(db, sale_id)
        item = require_item(db, sale.item_number)

        extra = qty - sale.quantity
        if extra > 0:
            check_availability(item, extra)

        uow.stage("adjust stock")
        if extra:
            apply_delta(db, item.item_number, -extra, item=item, guard=_guarded())

        uow.stage("update sale")
        quoted = list_price if list_price is not None else sale.list_unit_price
        final_price = _discounted(quoted, sale.discount_percent or 0)
        sale.quantity = qty
        sale.list_unit_price = quoted
        sale.unit_price = final_price
        sale.total = qty * final_price
        sale.updated_by = actor
        sale.updated_at = utc_timestamp()
        try:
            db.flush()
        except StaleDataError as exc:
            raise ConflictError("Sale", sale_id) from exc

    db.refresh(sale)
    logger.info(
        "sale.updated",
        extra={"extra_data": {"sale_id": sale_id, "delta": -extra, "actor": actor}},
    )
    return sale


def delete_sale(db: Session, sale_id: str, *, actor: str | None = None) -> str:
    """Remove a sale and return its units to stock; a missing item is tolerated."""

    with unit_of_work(db, "delete sale") as uow:
        uow.stage("load sale")
        sale = require_sale(db, sale_id)

        uow.stage("adjust stock")
        apply_delta(db, sale.item_number, sale.quantity)

        uow.stage("delete sale")
        removed = db.execute(delete(Sale).where(Sale.id == sale.id))
        if removed.rowcount == 0:
            raise ConflictError("Sale", sale_id)

    logger.info(
        "sale.deleted",
        extra={"extra_data": {"sale_id": sale_id, "actor": actor}},
    )
    return sale_id
