from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="Active")
    phone_mobile = Column(Text, nullable=False, default="")
    # Secondary contact fields are optional in the directory forms.
    phone2 = Column(Text, nullable=False, default="")
    email = Column(Text, nullable=False, default="")
    address = Column(Text, nullable=False, default="")
    address2 = Column(Text, nullable=False, default="")
    city = Column(Text, nullable=False, default="")
    district = Column(Text, nullable=False, default="")
    created_at = Column(Text, nullable=False)
