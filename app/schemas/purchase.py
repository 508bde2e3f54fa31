from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PurchaseCreate(BaseModel):
    item_number: int
    vendor_id: int
    purchase_date: date
    quantity: int
    unit_price: float


class PurchaseUpdate(BaseModel):
    quantity: int
    unit_price: Optional[float] = None


class PurchaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    purchase_id: str
    purchase_date: date
    item_number: int
    item_name: str
    vendor_id: int
    vendor_name: str
    quantity: int
    unit_price: float
    total_cost: float
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None
