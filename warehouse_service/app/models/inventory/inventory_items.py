# app/models/inventory/inventory_items.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Numeric, Text, func
from shared.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sku = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    category = Column(String(128))
    location = Column(String(64))
    unit = Column(String(16), nullable=False, default="Pcs")
    price = Column(Numeric(16, 2), nullable=False, default=0)
    # always in base unit
    stock = Column(Numeric(14, 3), nullable=False, default=0)
    min_level = Column(Numeric(14, 3), nullable=False, default=0)
    image_url = Column(Text)
    active = Column(Boolean, default=True, nullable=False)

    # 1 conversion_unit = conversion_ratio base units
    conversion_unit = Column(String(16))
    conversion_ratio = Column(Numeric(14, 6))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
