from datetime import date, time
from typing import Optional
from sqlalchemy.orm import Session
from banquet_booking.models.booking import Booking, REJECTED_STATUSES


def find_conflicting_booking(
    db: Session,
    hall_id: int,
    booking_date: date,
    start_time: time,
    end_time: time,
    exclude_booking_id: Optional[int] = None,
):
    """
    Return the first live booking on the hall and date whose window overlaps
    [start_time, end_time], or None.

    Windows that only touch at an edge still count as overlapping, so a hall
    is never handed over between two events without a gap. Rejected bookings
    never block a slot.
    """
    query = db.query(Booking).filter(
        Booking.hall_id == hall_id,
        Booking.booking_date == booking_date,
        Booking.status.notin_(REJECTED_STATUSES),
        Booking.start_time <= end_time,
        Booking.end_time >= start_time,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.first()
