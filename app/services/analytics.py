"""Profit and loss figures derived from a window of purchases and sales.

Nothing here writes to the database. ``summarize`` works on whatever records
the caller hands it; ``dashboard_snapshot`` picks the most recent window the
way the dashboard does.

Cost basis: units sold are costed at the average purchase price of the
item's purchases inside the same window.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Iterator

from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud.purchases import list_purchases
from ..crud.sales import list_sales
from ..models.purchase import Purchase
from ..models.sale import Sale

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ItemProfitSummary:
    item_number: int
    item_name: str
    purchased_qty: int
    total_purchase_cost: Decimal
    avg_purchase_price: Decimal
    sold_qty: int
    total_sale_revenue: Decimal
    avg_sale_price: Decimal
    cost_of_sold_items: Decimal
    profit: Decimal
    profit_percentage: Decimal


def summarize(purchases: Iterable[Purchase], sales: Iterable[Sale]) -> Iterator[ItemProfitSummary]:
    """Yield one summary per item purchased within the window, by item number.

    Items that were only sold inside the window have no cost basis and are
    left out. Money figures are rounded to cents only on output.
    """

    bought: Dict[int, Dict[str, Any]] = {}
    for purchase in purchases:
        entry = bought.setdefault(
            purchase.item_number,
            {"item_name": purchase.item_name, "qty": 0, "cost": ZERO},
        )
        entry["qty"] += purchase.quantity
        entry["cost"] += _to_decimal(purchase.unit_price) * purchase.quantity

    sold: Dict[int, Dict[str, Any]] = {}
    for sale in sales:
        entry = sold.setdefault(sale.item_number, {"qty": 0, "revenue": ZERO})
        entry["qty"] += sale.quantity
        entry["revenue"] += _to_decimal(sale.unit_price) * sale.quantity

    for item_number in sorted(bought):
        purchase_data = bought[item_number]
        sale_data = sold.get(item_number, {"qty": 0, "revenue": ZERO})

        avg_purchase = purchase_data["cost"] / purchase_data["qty"]
        sold_qty = sale_data["qty"]
        revenue = sale_data["revenue"]
        avg_sale = revenue / sold_qty if sold_qty else ZERO
        cost_of_sold = avg_purchase * sold_qty
        profit = revenue - cost_of_sold
        percentage = profit / cost_of_sold * HUNDRED if cost_of_sold > 0 else ZERO

        yield ItemProfitSummary(
            item_number=item_number,
            item_name=purchase_data["item_name"],
            purchased_qty=purchase_data["qty"],
            total_purchase_cost=_quantize(purchase_data["cost"]),
            avg_purchase_price=_quantize(avg_purchase),
            sold_qty=sold_qty,
            total_sale_revenue=_quantize(revenue),
            avg_sale_price=_quantize(avg_sale),
            cost_of_sold_items=_quantize(cost_of_sold),
            profit=_quantize(profit),
            profit_percentage=_quantize(percentage),
        )


def dashboard_snapshot(db: Session, window: int | None = None) -> Dict[str, Any]:
    """Totals and per-item profit for the most recent purchases and sales."""

    size = window or settings.DASHBOARD_WINDOW
    recent_purchases = list_purchases(db, limit=size)
    recent_sales = list_sales(db, limit=size)

    total_cost = sum((_to_decimal(p.unit_price) * p.quantity for p in recent_purchases), ZERO)
    total_revenue = sum((_to_decimal(s.unit_price) * s.quantity for s in recent_sales), ZERO)

    return {
        "window": size,
        "recent_purchases": recent_purchases,
        "recent_sales": recent_sales,
        "total_cost": _quantize(total_cost),
        "total_revenue": _quantize(total_revenue),
        "profit": _quantize(total_revenue - total_cost),
        "items": list(summarize(recent_purchases, recent_sales)),
    }
