"""Beginner-friendly overview for this module.

WHAT: Declares the ``Item`` table that owns each product's on-hand ``stock``.
WHEN: Loaded whenever the ledger resolves an item by its item number.
WHY: Purchases and sales only ever reference items by ``item_number``; the
     ``stock`` column is the single shared counter they adjust.
HOW: Read the inline comments below; stock is changed only via
     ``app.crud.items.apply_delta``.

File: app/models/item.py
"""


from __future__ import annotations

import enum

from sqlalchemy import Column, Enum, Float, Integer, Text

from ..db.session import Base


class ItemStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    item_number = Column(Integer, nullable=False, unique=True, index=True)
    item_name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    # Percentage (0-100) applied to a sale when the caller asks for the discount.
    discount_percent = Column(Float, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False, default=0)
    status = Column(
        Enum(ItemStatus, values_callable=lambda members: [m.value for m in members], native_enum=False),
        nullable=False,
        default=ItemStatus.ACTIVE,
    )
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)
