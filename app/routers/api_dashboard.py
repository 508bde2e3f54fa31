from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..crud.items import reconcile_item
from ..db.session import get_db
from ..deps.auth import require_actor
from ..schemas.analytics import DashboardOut, ReportOut
from ..schemas.item import ItemOut, StockReconciliation
from ..schemas.purchase import PurchaseOut
from ..schemas.sale import SaleOut
from ..services.analytics import dashboard_snapshot
from ..services.reports import build_report

router = APIRouter(prefix="/api/v1", tags=["analytics"], dependencies=[Depends(require_actor)])

_ROW_SCHEMAS = {"Sales": SaleOut, "Purchases": PurchaseOut, "Inventory": ItemOut}


@router.get("/dashboard", response_model=DashboardOut)
def api_dashboard(window: int | None = Query(default=None, ge=1), db: Session = Depends(get_db)):
    snapshot = dashboard_snapshot(db, window=window)
    return DashboardOut.model_validate(snapshot, from_attributes=True)


@router.get("/reports/{report_type}", response_model=ReportOut)
def api_report(
    report_type: str,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    report = build_report(db, report_type, start_date, end_date)
    schema = _ROW_SCHEMAS[report["report_type"]]
    rows = [schema.model_validate(row).model_dump(mode="json") for row in report["rows"]]
    return ReportOut(
        report_type=report["report_type"],
        start_date=report["start_date"],
        end_date=report["end_date"],
        rows=rows,
    )


@router.get("/items/{item_number}/reconcile", response_model=StockReconciliation)
def api_reconcile_item(item_number: int, db: Session = Depends(get_db)):
    return reconcile_item(db, item_number)
