# app/models/rejects/reject_items.py
import uuid
from sqlalchemy import Column, DateTime, String, Numeric, func
from shared.core.database import Base


class RejectItem(Base):
    """Master data for goods that can be logged as rejected.

    Kept apart from inventory_items; logging a reject never touches stock.
    """
    __tablename__ = "reject_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sku = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    base_unit = Column(String(16), nullable=False, default="Pcs")

    unit2 = Column(String(16))
    ratio2 = Column(Numeric(14, 6))
    op2 = Column(String(16), default="multiply")

    unit3 = Column(String(16))
    ratio3 = Column(Numeric(14, 6))
    op3 = Column(String(16), default="multiply")

    last_updated = Column(DateTime(timezone=True),
                          server_default=func.now(), onupdate=func.now())
