import logging
from fastapi import HTTPException, status
from banquet_booking.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)

# action -> (required status, new status, error detail)
TRANSITIONS = {
    "manager_approve": (
        BookingStatus.PENDING,
        BookingStatus.APPROVED_BY_MANAGER,
        "Booking not found or not in a pending state.",
    ),
    "manager_reject": (
        BookingStatus.PENDING,
        BookingStatus.REJECTED_BY_MANAGER,
        "Booking not found or not in a pending state.",
    ),
    "admin_approve": (
        BookingStatus.APPROVED_BY_MANAGER,
        BookingStatus.APPROVED_BY_ADMIN,
        "Booking is not approved by manager or does not exist.",
    ),
    "admin_reject": (
        BookingStatus.APPROVED_BY_MANAGER,
        BookingStatus.REJECTED_BY_ADMIN,
        "Booking is not approved by manager or does not exist.",
    ),
    "confirm": (
        BookingStatus.APPROVED_BY_ADMIN,
        BookingStatus.BOOKED,
        "Booking is not approved by admin or does not exist.",
    ),
}

FINALIZED_STATUSES = (BookingStatus.APPROVED_BY_ADMIN, BookingStatus.BOOKED)


def check_transition(booking: Booking, action: str):
    """Raise a 400 unless ``action`` may be applied to ``booking``."""
    required, _, detail = TRANSITIONS[action]
    if booking is None or booking.status != required:
        current = booking.status.value if booking is not None else None
        logger.error(f"Cannot {action}: booking status is {current}, expected {required.value}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def transition(booking: Booking, action: str) -> BookingStatus:
    check_transition(booking, action)
    new_status = TRANSITIONS[action][1]
    logger.debug(f"Booking {booking.id}: {booking.status.value} -> {new_status.value}")
    booking.status = new_status
    return new_status


def is_finalized(booking: Booking) -> bool:
    return booking.status in FINALIZED_STATUSES
