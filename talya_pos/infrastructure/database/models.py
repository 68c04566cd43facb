# pylint: disable=too-few-public-methods
"""
SQLAlchemy database models for the Talya POS engine
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()


class OrderRecord(Base):
    """Persisted order"""
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    table_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    client_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    served_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    items: Mapped[List["OrderItemRecord"]] = relationship(
        "OrderItemRecord",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemRecord.position",
    )


class OrderItemRecord(Base):
    """Line of a persisted order"""
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    item_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    emoji: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    portion_label: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    composed_details: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    order: Mapped["OrderRecord"] = relationship("OrderRecord", back_populates="items")
