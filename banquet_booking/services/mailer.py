import logging
import smtplib
from email.message import EmailMessage
from typing import Iterable, Optional, Tuple
from banquet_booking.config import settings
from banquet_booking.models.booking import Booking

logger = logging.getLogger(__name__)

# (filename, content, content type)
Attachment = Tuple[str, bytes, str]


def send_email(subject: str, body: str, to_email: str, attachments: Optional[Iterable[Attachment]] = None) -> bool:
    """Send a plain-text email. Delivery is best effort: failures are logged, never raised."""
    attachments = list(attachments or [])
    if not settings.MAIL_SERVER:
        logger.info(f"[EMAIL] SMTP not configured; not sending.\nSUBJECT: {subject}\nTO: {to_email}\nBODY:\n{body}")
        return False

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.MAIL_FROM
    msg["To"] = to_email
    msg.set_content(body)
    for filename, content, content_type in attachments:
        maintype, _, subtype = content_type.partition("/")
        msg.add_attachment(content, maintype=maintype, subtype=subtype or "octet-stream", filename=filename)

    try:
        with smtplib.SMTP(settings.MAIL_SERVER, settings.MAIL_PORT) as server:
            if settings.MAIL_USE_TLS:
                server.starttls()
            if settings.MAIL_USERNAME and settings.MAIL_PASSWORD:
                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
            server.send_message(msg)
        logger.info(f"[EMAIL] Sent '{subject}' to {to_email}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"[EMAIL] Send failed for '{subject}' to {to_email}: {e}")
        return False


def booking_recipient(booking: Booking) -> Tuple[str, Optional[str]]:
    """First event coordinator, falling back to the booking owner's email."""
    name = "Event Coordinator"
    email = None
    if booking.event_coordinators:
        coordinator = booking.event_coordinators[0]
        name = coordinator.name or name
        email = coordinator.email
    if not email:
        logger.warning(f"No coordinator email found for booking {booking.id}. Using user's email as fallback.")
        email = booking.user.email if booking.user else None
    return name, email


def _booking_summary(booking: Booking) -> str:
    return (
        "Booking Details:\n"
        f"- Event: {booking.event_name}\n"
        f"- Hall: {booking.hall.name if booking.hall else booking.hall_id}\n"
        f"- Date: {booking.booking_date.strftime('%d/%m/%Y')}\n"
        f"- Time: {booking.start_time.strftime('%H:%M')} - {booking.end_time.strftime('%H:%M')}\n"
    )


def approval_email(booking: Booking, coordinator_name: str, with_quotation: bool = False):
    body = f"Dear {coordinator_name},\n\nYour banquet hall booking has been approved.\n"
    body += _booking_summary(booking)
    if booking.special_equipment_requests:
        body += f"\nSpecial Equipment Requests:\n{booking.special_equipment_requests}\n"
    if with_quotation:
        body += "\nA quotation PDF is attached to this email.\n"
    body += "\nThank you."
    return "Banquet Hall Booking Approved", body


def rejection_email(booking: Booking, coordinator_name: str, reason: Optional[str]):
    body = f"Dear {coordinator_name},\nYour banquet hall booking has been rejected.\n"
    body += _booking_summary(booking)
    body += f"Reason: {reason or 'Not specified'}"
    return "Banquet Hall Booking Rejected", body


def cancellation_email(booking: Booking, coordinator_name: str):
    body = f"Dear {coordinator_name},\n\nYour banquet hall booking has been cancelled.\n"
    body += _booking_summary(booking)
    if booking.special_equipment_requests:
        body += f"\nSpecial Equipment Requests:\n{booking.special_equipment_requests}\n"
    body += "\nThank you."
    return "Banquet Hall Booking Cancelled", body
