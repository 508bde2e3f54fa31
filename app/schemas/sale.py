from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SaleCreate(BaseModel):
    item_number: int
    customer_id: str
    sale_date: date
    quantity: int
    unit_price: float
    apply_discount: bool = False


class SaleUpdate(BaseModel):
    quantity: int
    unit_price: Optional[float] = None


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sale_id: str
    sale_date: date
    item_number: int
    item_name: str
    customer_id: str
    customer_name: str
    quantity: int
    list_unit_price: float
    unit_price: float
    discount_percent: float
    total: float
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None
