import logging
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from banquet_booking.models.booking import Booking
from banquet_booking.models.notification import Notification
from banquet_booking.models.user import User, UserRole

logger = logging.getLogger(__name__)


def notify(db: Session, user_ids: Iterable[Optional[int]], booking: Booking, message: str):
    """Queue one notification per recipient on the session; the caller commits."""
    recipients = []
    for user_id in user_ids:
        if user_id is None or user_id in recipients:
            continue
        recipients.append(user_id)
        db.add(Notification(user_id=user_id, booking_id=booking.id, message=message))
    logger.debug(f"Notified users {recipients} about booking {booking.id}: {message}")
    return recipients


def responsible_manager_id(db: Session, booking: Booking):
    """The manager who handled the booking, else any manager on record."""
    if booking.manager_id is not None:
        return booking.manager_id
    manager = db.query(User).filter(User.role == UserRole.MANAGER).order_by(User.id).first()
    if manager is None:
        logger.warning(f"No manager account found to notify about booking {booking.id}")
        return None
    return manager.id
