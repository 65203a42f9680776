"""
Restaurants: create, inspect, tables, availability and time slots.
"""
import logging
from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tablebook.api.deps import get_deps
from tablebook.api.errors import raise_http
from tablebook.config import settings
from tablebook.core.errors import ReservationError
from tablebook.services import (
    ReservationDeps,
    add_table,
    available_time_slots,
    cached_available_tables,
    create_restaurant,
    list_tables,
)
from tablebook.services.restaurant_service import get_restaurant
from tablebook.services.serializers import restaurant_to_dict, table_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)

HHMM = r"^\d{2}:\d{2}$"


class CreateRestaurantBody(BaseModel):
    name: str = Field(..., min_length=1)
    open_time: str = Field(..., pattern=HHMM)
    close_time: str = Field(..., pattern=HHMM)
    total_tables: int = Field(0, ge=0)
    peak_hour_start: str | None = Field(None, pattern=HHMM)
    peak_hour_end: str | None = Field(None, pattern=HHMM)
    max_peak_duration_minutes: int | None = Field(None, gt=0)


class AddTableBody(BaseModel):
    table_number: str = Field(..., min_length=1, max_length=32)
    capacity: int = Field(..., gt=0)


@router.post("", status_code=201)
def create_restaurant_route(body: CreateRestaurantBody, deps: ReservationDeps = Depends(get_deps)) -> dict[str, Any]:
    try:
        row = create_restaurant(
            deps.db,
            body.name,
            body.open_time,
            body.close_time,
            body.total_tables,
            peak_hour_start=body.peak_hour_start,
            peak_hour_end=body.peak_hour_end,
            max_peak_duration_minutes=body.max_peak_duration_minutes,
        )
    except ReservationError as e:
        raise_http(e)
    return restaurant_to_dict(row)


@router.get("/{restaurant_id}")
def get_restaurant_route(
    restaurant_id: int,
    start_time: datetime | None = Query(None),
    duration_minutes: int | None = Query(None, gt=0),
    party_size: int | None = Query(None, gt=0),
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    """Restaurant, its tables, and (when start_time, duration_minutes and party_size are all given) free tables."""
    try:
        restaurant = get_restaurant(deps.db, restaurant_id)
        tables = list_tables(deps.db, restaurant_id)
        available: list[dict[str, Any]] = []
        if start_time is not None and duration_minutes and party_size:
            available = cached_available_tables(deps, restaurant_id, start_time, duration_minutes, party_size)
    except ReservationError as e:
        raise_http(e)
    return {
        "restaurant": restaurant_to_dict(restaurant),
        "tables": [table_to_dict(t) for t in tables],
        "available_tables": available,
    }


@router.post("/{restaurant_id}/tables", status_code=201)
def add_table_route(
    restaurant_id: int, body: AddTableBody, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    try:
        row = add_table(deps, restaurant_id, body.table_number, body.capacity)
    except ReservationError as e:
        raise_http(e)
    return table_to_dict(row)


@router.get("/{restaurant_id}/tables")
def list_tables_route(restaurant_id: int, deps: ReservationDeps = Depends(get_deps)) -> list[dict[str, Any]]:
    try:
        return [table_to_dict(t) for t in list_tables(deps.db, restaurant_id)]
    except ReservationError as e:
        raise_http(e)


@router.get("/{restaurant_id}/availability")
def availability_route(
    restaurant_id: int,
    start_time: datetime = Query(...),
    duration_minutes: int = Query(..., gt=0),
    party_size: int = Query(..., gt=0),
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    """Free tables for the window, smallest first."""
    try:
        tables = cached_available_tables(deps, restaurant_id, start_time, duration_minutes, party_size)
    except ReservationError as e:
        raise_http(e)
    return {"available_tables": tables}


@router.get("/{restaurant_id}/time-slots")
def time_slots_route(
    restaurant_id: int,
    day: date = Query(..., alias="date"),
    party_size: int = Query(..., gt=0),
    duration_minutes: int = Query(..., gt=0),
    interval_minutes: int = Query(settings.timeslot_interval_minutes, gt=0),
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    """Start times on date with at least one table free for the party."""
    try:
        slots = available_time_slots(deps, restaurant_id, day, party_size, duration_minutes, interval_minutes)
    except ReservationError as e:
        raise_http(e)
    return {"slots": slots}
