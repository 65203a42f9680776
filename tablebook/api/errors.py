"""Route-side error helper: core failures become HTTP errors with their own status."""
from typing import NoReturn

from tablebook.core.errors import ReservationError, reservation_error_to_http


def raise_http(exc: ReservationError) -> NoReturn:
    raise reservation_error_to_http(exc) from exc
