# app/models/rejects/reject_logs.py
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Numeric, Text, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RejectLog(Base):
    __tablename__ = "reject_logs"

    # REJ-yyyymmdd-hhmmss-NNN
    id = Column(String(32), primary_key=True)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text)
    user_id = Column(String(36))
    timestamp = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    lines = relationship(
        "RejectLogLine",
        back_populates="log",
        cascade="all, delete-orphan",
        order_by="RejectLogLine.position"
    )


class RejectLogLine(Base):
    """Resolved snapshot of one rejected item, written once."""
    __tablename__ = "reject_log_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    log_id = Column(String(32), ForeignKey(
        "reject_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    item_id = Column(String(36), nullable=False)
    item_name = Column(String(200), nullable=False)
    sku = Column(String(64), nullable=False)
    base_unit = Column(String(16), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(16), nullable=False)
    ratio = Column(Numeric(14, 6), nullable=False)
    operation = Column(String(16), nullable=False)
    total_base_quantity = Column(Numeric(14, 6), nullable=False)
    reason = Column(Text)

    log = relationship("RejectLog", back_populates="lines")
