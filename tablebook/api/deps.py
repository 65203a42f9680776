"""
Request-scoped dependencies: DB session plus the app-wide cache coordinator and notifier.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tablebook.db.session import get_db
from tablebook.services.deps import ReservationDeps


def get_deps(request: Request, db: Session = Depends(get_db)) -> ReservationDeps:
    return ReservationDeps(db, request.app.state.cache, request.app.state.notifier)
