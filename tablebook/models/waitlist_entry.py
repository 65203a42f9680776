"""Overflow demand recorded when no table fits. Removed only by an operator; never auto-promoted."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func

from tablebook.db.base import Base


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"

    on_waitlist = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)
    party_size = Column(Integer, nullable=False)
    preferred_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_waitlist_entries_restaurant_date", "restaurant_id", "preferred_date"),)
