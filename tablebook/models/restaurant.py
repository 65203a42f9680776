"""Restaurant: fixed daily operating window and optional peak-hour duration cap.

open_time / close_time / peak_hour_* are wall-clock "HH:MM" strings (no date), compared in UTC.
"""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from tablebook.db.base import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    open_time = Column(String(5), nullable=False)
    close_time = Column(String(5), nullable=False)
    total_tables = Column(Integer, nullable=False, default=0)
    peak_hour_start = Column(String(5), nullable=True)
    peak_hour_end = Column(String(5), nullable=True)
    max_peak_duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
