from __future__ import annotations

from sqlalchemy import Column, Date, Float, Integer, Text

from ..db.session import Base


class Sale(Base):
    """Stock sold to a customer.

    ``unit_price`` is the realised price after any discount; ``list_unit_price``
    is what the caller quoted and ``discount_percent`` is the item's discount
    captured when the sale was recorded (``0`` when no discount was applied).
    """

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Text, nullable=False, unique=True, index=True)
    sale_date = Column(Date, nullable=False, index=True)
    item_number = Column(Integer, nullable=False, index=True)
    item_name = Column(Text, nullable=False)
    customer_id = Column(Text, nullable=False, index=True)
    customer_name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    list_unit_price = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    discount_percent = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False)
    created_by = Column(Text, nullable=True)
    updated_by = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)
