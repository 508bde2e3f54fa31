"""Beginner-friendly overview for this module.

WHAT: Declares the ``Purchase`` table: stock received from a vendor.
WHEN: Written by ``app.crud.purchases``; read by listings and analytics.
WHY: Each row adds ``quantity`` units to the referenced item's stock.
HOW: ``item_name`` and ``vendor_name`` are snapshots taken at creation time and
     are not kept in sync with later directory edits.

File: app/models/purchase.py
"""


from __future__ import annotations

from sqlalchemy import Column, Date, Float, Integer, Text

from ..db.session import Base


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Text, nullable=False, unique=True, index=True)
    purchase_date = Column(Date, nullable=False, index=True)
    # Business key of the item, not an owning foreign key: items can be removed
    # from the directory while their purchase history survives.
    item_number = Column(Integer, nullable=False, index=True)
    item_name = Column(Text, nullable=False)
    vendor_id = Column(Integer, nullable=False, index=True)
    vendor_name = Column(Text, nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    created_by = Column(Text, nullable=True)
    updated_by = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)
