"""Reservation: one table held for the half-open interval [start_time, end_time).

No two active (pending/confirmed) reservations on a table may overlap. On PostgreSQL that is
enforced by the exclusion constraint from migration 001; the ledger re-checks it under a row lock.
"""
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func

from tablebook.db.base import Base


class ReservationStatus(str, Enum):
    """Lifecycle status of a reservation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Reservation(Base):
    __tablename__ = "reservations"

    # Booking outcome tag: a booking returns either a Reservation or a WaitlistEntry
    on_waitlist = False

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    table_id = Column(Integer, ForeignKey("restaurant_tables.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)
    party_size = Column(Integer, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(16), nullable=False, default=ReservationStatus.PENDING.value)
    notified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_reservations_window"),
        Index("ix_reservations_table_window", "table_id", "start_time", "end_time"),
        Index("ix_reservations_restaurant_start", "restaurant_id", "start_time"),
    )
