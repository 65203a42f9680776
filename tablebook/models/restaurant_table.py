"""Physical table owned by a restaurant. table_number is the human-facing label, unique per restaurant."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from tablebook.db.base import Base


class RestaurantTable(Base):
    __tablename__ = "restaurant_tables"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    table_number = Column(String(32), nullable=False)
    capacity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="uq_restaurant_tables_restaurant_number"),
        CheckConstraint("capacity > 0", name="ck_restaurant_tables_capacity_positive"),
    )
