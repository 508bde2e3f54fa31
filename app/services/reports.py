from __future__ import annotations

from datetime import date
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import ValidationError
from ..core.parsing import parse_date
from ..crud.purchases import list_purchases
from ..crud.sales import list_sales
from ..models.item import Item, ItemStatus

REPORT_TYPES = ("Sales", "Purchases", "Inventory")


def _report_range(start: object, end: object) -> tuple[date, date]:
    start_date = parse_date("start_date", start)
    end_date = parse_date("end_date", end)
    if start_date > end_date:
        raise ValidationError("end_date", "must not be before start_date")
    return start_date, end_date


def build_report(db: Session, report_type: str, start: object = None, end: object = None) -> Dict[str, Any]:
    """Collect the rows behind a printable report.

    ``Sales`` and ``Purchases`` cover an inclusive date range. ``Inventory``
    lists active items by name and ignores any dates given.
    """

    normalized = (report_type or "").strip().capitalize()
    if normalized not in REPORT_TYPES:
        raise ValidationError("report_type", f"must be one of {', '.join(REPORT_TYPES)}")

    if normalized == "Inventory":
        stmt = select(Item).where(Item.status == ItemStatus.ACTIVE).order_by(Item.item_name)
        return {"report_type": normalized, "start_date": None, "end_date": None, "rows": db.execute(stmt).scalars().all()}

    start_date, end_date = _report_range(start, end)
    if normalized == "Sales":
        rows = list_sales(db, start_date=start_date, end_date=end_date)
    else:
        rows = list_purchases(db, start_date=start_date, end_date=end_date)
    return {"report_type": normalized, "start_date": start_date, "end_date": end_date, "rows": rows}
