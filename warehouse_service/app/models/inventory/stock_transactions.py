# app/models/inventory/stock_transactions.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Numeric, Text, JSON, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from shared.core.database import Base


class StockTransaction(Base):
    __tablename__ = "stock_transactions"

    # TRX-yyyymmdd-hhmmss-NNN
    id = Column(String(32), primary_key=True)
    type = Column(String(16), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    total_value = Column(Numeric(18, 2), nullable=False, default=0)
    user_id = Column(String(36), nullable=False)
    notes = Column(Text)

    # inbound only
    supplier = Column(String(200))
    po_number = Column(String(64))
    delivery_note = Column(String(64))
    documents = Column(JSON().with_variant(JSONB(), "postgresql"))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    lines = relationship(
        "StockTransactionLine",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="StockTransactionLine.position"
    )


class StockTransactionLine(Base):
    __tablename__ = "stock_transaction_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(32), ForeignKey(
        "stock_transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # weak reference: no FK so the line survives item deletion
    item_id = Column(String(36), nullable=False, index=True)
    sku = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)

    # base unit, this is what the ledger applies
    qty = Column(Numeric(14, 3), nullable=False)
    uom = Column(String(16), nullable=False)
    uom_qty = Column(Numeric(14, 3), nullable=False)
    unit_price = Column(Numeric(16, 4), nullable=False)
    total = Column(Numeric(18, 2), nullable=False)

    transaction = relationship("StockTransaction", back_populates="lines")
