from __future__ import annotations
from typing import Any, Dict, List
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, BigInteger, DateTime, JSON
from .database import Base

# ----------------------------
# Scored receipts
# ----------------------------
class ReceiptRecord(Base):
    __tablename__ = "receipts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    retailer: Mapped[str] = mapped_column(String, nullable=False)
    purchase_date: Mapped[str] = mapped_column(String(32), nullable=False)
    purchase_time: Mapped[str] = mapped_column(String(32), nullable=False)
    items: Mapped[List[Dict[str, str]]] = mapped_column(JSON, nullable=False)   # [{shortDescription, price}]
    total: Mapped[str] = mapped_column(String(32), nullable=False)
    points: Mapped[int] = mapped_column(BigInteger, nullable=False)
    rules: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False)          # per-rule points
    skipped: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)        # rule -> reason
    created_at: Mapped[Any] = mapped_column(DateTime(timezone=True), nullable=False)
