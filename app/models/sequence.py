from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class Sequence(Base):
    """One named counter per human-readable id family (``purchaseId``, ``saleId``)."""

    __tablename__ = "sequences"

    name = Column(Text, primary_key=True)
    value = Column(Integer, nullable=False, default=0)
