"""
Waitlist: overflow demand when no table fits. Entries are removed by an operator, never auto-promoted.
"""
import logging
import math
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from tablebook.core.time_window import parse_day
from tablebook.models import WaitlistEntry
from tablebook.services import ledger
from tablebook.services.deps import ReservationDeps
from tablebook.services.serializers import waitlist_entry_to_dict

logger = logging.getLogger(__name__)


def add_to_waitlist(
    deps: ReservationDeps,
    restaurant_id: int,
    *,
    customer_name: str,
    phone: str,
    party_size: int,
    preferred_date: date | str,
) -> WaitlistEntry:
    """Record the request and send a waitlist notification."""
    restaurant = ledger.get_restaurant(deps.db, restaurant_id)
    row = WaitlistEntry(
        restaurant_id=restaurant_id,
        customer_name=customer_name,
        phone=phone,
        party_size=party_size,
        preferred_date=parse_day(preferred_date).isoformat(),
    )
    deps.db.add(row)
    deps.db.commit()
    deps.db.refresh(row)
    deps.notifier.waitlisted(
        customer_name=row.customer_name,
        phone=row.phone,
        restaurant_name=restaurant.name,
        party_size=row.party_size,
        preferred_date=row.preferred_date,
    )
    logger.info(
        "Waitlisted party of %s at restaurant %s for %s (entry %s)",
        row.party_size,
        restaurant_id,
        row.preferred_date,
        row.id,
    )
    return row


def list_waitlist(db: Session, restaurant_id: int, preferred_date: date | str, page: int, page_size: int) -> dict[str, Any]:
    """One page of entries for a date, oldest first, with total and page metadata."""
    ledger.get_restaurant(db, restaurant_id)
    date_str = parse_day(preferred_date).isoformat()
    q = (
        db.query(WaitlistEntry)
        .filter(WaitlistEntry.restaurant_id == restaurant_id, WaitlistEntry.preferred_date == date_str)
        .order_by(WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc())
    )
    rows, total = ledger.fetch_page(q, page, page_size)
    return {
        "data": [waitlist_entry_to_dict(r) for r in rows],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }


def remove_from_waitlist(db: Session, waitlist_id: int, restaurant_id: int) -> None:
    row = ledger.get_waitlist_entry(db, waitlist_id, restaurant_id)
    db.delete(row)
    db.commit()
