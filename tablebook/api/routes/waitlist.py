"""
Waitlist: operator view of overflow demand. Entries are only ever removed here, never promoted.
"""
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tablebook.api.deps import get_deps
from tablebook.api.errors import raise_http
from tablebook.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tablebook.core.errors import ReservationError
from tablebook.services import ReservationDeps, add_to_waitlist, list_waitlist, remove_from_waitlist
from tablebook.services.serializers import waitlist_entry_to_dict

router = APIRouter()


class AddWaitlistBody(BaseModel):
    customer_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=3, max_length=32)
    party_size: int = Field(..., gt=0)
    preferred_date: date


@router.get("/{restaurant_id}/waitlist")
def list_waitlist_route(
    restaurant_id: int,
    day: date = Query(..., alias="date"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    deps: ReservationDeps = Depends(get_deps),
) -> dict[str, Any]:
    try:
        return list_waitlist(deps.db, restaurant_id, day, page, page_size)
    except ReservationError as e:
        raise_http(e)


@router.post("/{restaurant_id}/waitlist", status_code=201)
def add_waitlist_route(
    restaurant_id: int, body: AddWaitlistBody, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    try:
        row = add_to_waitlist(
            deps,
            restaurant_id,
            customer_name=body.customer_name,
            phone=body.phone,
            party_size=body.party_size,
            preferred_date=body.preferred_date,
        )
    except ReservationError as e:
        raise_http(e)
    return waitlist_entry_to_dict(row)


@router.delete("/{restaurant_id}/waitlist/{waitlist_id}")
def remove_waitlist_route(
    restaurant_id: int, waitlist_id: int, deps: ReservationDeps = Depends(get_deps)
) -> dict[str, Any]:
    try:
        remove_from_waitlist(deps.db, waitlist_id, restaurant_id)
    except ReservationError as e:
        raise_http(e)
    return {"ok": True, "message": "Waitlist entry removed"}
