from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..models.item import ItemStatus


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_number: int
    item_name: str
    description: Optional[str] = None
    discount_percent: float
    stock: int
    unit_price: float
    status: ItemStatus


class StockReconciliation(BaseModel):
    item_number: int
    stock: int
    purchased: int
    sold: int
    ledger_quantity: int
    difference: int
