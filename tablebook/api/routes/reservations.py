"""
Reservations: book (or waitlist), list by date, modify, confirm, cancel.
"""
import logging
from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tablebook.api.deps import get_deps
from tablebook.api.errors import raise_http
from tablebook.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tablebook.core.errors import ReservationError
from tablebook.services import (
    ReservationDeps,
    cancel_reservation,
    confirm_reservation,
    create_reservation,
    list_reservations_for_date,
    modify_reservation,
)
from tablebook.services.serializers import booking_to_dict, reservation_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateReservationBody(BaseModel):
    customer_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=3, max_length=32)
    party_size: int = Field(..., gt=0)
    start_time: datetime
    duration_minutes: int = Field(..., gt=0)
    table_id: int | None = Field(None, gt=0)


class ModifyReservationBody(BaseModel):
    start_time: datetime | None = None
    duration_minutes: int | None = Field(None, gt=0)


@router.get("/{restaurant_id}/reservations")
def list_reservations_route(
    restaurant_id: int,
    day: date = Query(..., alias="date"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    try:
        return list_reservations_for_date(deps, restaurant_id, day, page, page_size)
    except ReservationError as e:
        raise_http(e)


@router.post("/{restaurant_id}/reservations", status_code=201)
def create_reservation_route(
    restaurant_id: int, body: CreateReservationBody, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    """Book a table. When nothing fits, the party is waitlisted and the entry comes back with on_waitlist=true."""
    try:
        outcome = create_reservation(
            deps,
            restaurant_id,
            customer_name=body.customer_name,
            phone=body.phone,
            party_size=body.party_size,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
            table_id=body.table_id,
        )
    except ReservationError as e:
        raise_http(e)
    return booking_to_dict(outcome)


@router.patch("/{restaurant_id}/reservations/{reservation_id}")
def modify_reservation_route(
    restaurant_id: int,
    reservation_id: int,
    body: ModifyReservationBody,
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    try:
        row = modify_reservation(
            deps,
            reservation_id,
            restaurant_id,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
        )
    except ReservationError as e:
        raise_http(e)
    return reservation_to_dict(row)


@router.post("/{restaurant_id}/reservations/{reservation_id}/confirm")
def confirm_reservation_route(
    restaurant_id: int, reservation_id: int, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    try:
        row = confirm_reservation(deps, reservation_id, restaurant_id)
    except ReservationError as e:
        raise_http(e)
    return reservation_to_dict(row)


@router.delete("/{restaurant_id}/reservations/{reservation_id}")
def cancel_reservation_route(
    restaurant_id: int, reservation_id: int, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    try:
        row = cancel_reservation(deps, reservation_id, restaurant_id)
    except ReservationError as e:
        raise_http(e)
    return reservation_to_dict(row)
