from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .purchase import PurchaseOut
from .sale import SaleOut


class ItemProfitSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_number: int
    item_name: str
    purchased_qty: int
    total_purchase_cost: float
    avg_purchase_price: float
    sold_qty: int
    total_sale_revenue: float
    avg_sale_price: float
    cost_of_sold_items: float
    profit: float
    profit_percentage: float


class DashboardOut(BaseModel):
    window: int
    total_cost: float
    total_revenue: float
    profit: float
    items: list[ItemProfitSummaryOut]
    recent_purchases: list[PurchaseOut]
    recent_sales: list[SaleOut]


class ReportOut(BaseModel):
    report_type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rows: list[dict[str, Any]]
