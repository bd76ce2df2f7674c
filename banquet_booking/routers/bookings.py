import logging
from typing import List, Optional
from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session
from banquet_booking.db import get_db
from banquet_booking.models.booking import Booking, BookingStatus, EventCoordinator
from banquet_booking.models.hall import BanquetHall
from banquet_booking.models.user import UserRole
from banquet_booking.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    ConfirmRequest,
    RejectionRequest,
)
from banquet_booking.services import mailer
from banquet_booking.services.notifications import notify, responsible_manager_id
from banquet_booking.utils.auth import get_current_user, is_staff, require_roles
from banquet_booking.utils.conflicts import find_conflicting_booking
from banquet_booking.utils.lifecycle import check_transition, is_finalized, transition
from banquet_booking.utils.validation_helpers import (
    validate_event_details,
    validate_time_window,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)

require_manager = require_roles(UserRole.MANAGER)
require_admin = require_roles(UserRole.ADMIN)
require_staff = require_roles(UserRole.MANAGER, UserRole.ADMIN)

# Explicit nulls in an update leave these untouched
REQUIRED_FIELDS = {
    "booking_date",
    "start_time",
    "end_time",
    "event_name",
    "event_details",
    "pax",
    "food_required",
    "additional_details",
    "special_equipment_requests",
}


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


def ensure_owner(booking: Booking, current_user: dict, action: str):
    if booking.user_id != current_user["id"]:
        logger.error(f"User {current_user['username']} not authorized to {action} booking {booking.id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Not authorized to {action} this booking")


def ensure_hall_available(hall: BanquetHall):
    if not hall.is_available:
        logger.error(f"Hall {hall.id} is unavailable: {hall.unavailability_reason}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Hall is not available for booking: {hall.unavailability_reason}",
        )


def ensure_slot_free(db: Session, hall_id: int, booking_date, start_time, end_time, exclude_booking_id=None):
    conflict = find_conflicting_booking(db, hall_id, booking_date, start_time, end_time, exclude_booking_id)
    if conflict:
        logger.error(
            f"Overlapping booking {conflict.id} found for hall_id: {hall_id}, "
            f"date: {booking_date}, time: {start_time} to {end_time}"
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Hall is already booked for this time")


def queue_email(background_tasks: BackgroundTasks, recipient: Optional[str], subject: str, body: str, attachments=None):
    """Hand an email to the background, if anyone can receive it."""
    if not recipient:
        logger.error(f"No valid email found; '{subject}' not sent")
        return
    background_tasks.add_task(mailer.send_email, subject, body, recipient, attachments)


def bookings_with_status(db: Session, booking_status: BookingStatus):
    return (
        db.query(Booking)
        .filter(Booking.status == booking_status)
        .order_by(Booking.booking_date, Booking.start_time)
        .all()
    )


@router.post(
    "/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
    description="Submit a booking request for a banquet hall. It starts in the pending state. Requires authentication.",
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Submit a booking request for a banquet hall.

    - **hall_id**: ID of the hall to book.
    - **booking_date**, **start_time**, **end_time**: the requested window.
    - **pax**: number of guests, must fit the hall.
    - **food_required** / **cost_per_plate**: catering; a cost is needed when food is required.
    - **event_coordinators**: contacts for the event; the first one receives emails.

    Returns the created booking with status `pending`.
    """
    logger.debug(f"Creating booking for user: {current_user['username']}, hall_id: {booking.hall_id}")

    validate_event_details(booking.pax, booking.food_required, booking.cost_per_plate)
    validate_time_window(booking.booking_date, booking.start_time, booking.end_time)

    hall = db.query(BanquetHall).filter(BanquetHall.id == booking.hall_id).first()
    if not hall:
        logger.error(f"Hall not found: {booking.hall_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hall not found")
    ensure_hall_available(hall)
    if hall.capacity < booking.pax:
        logger.error(f"Hall capacity insufficient: {hall.capacity} < {booking.pax}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Hall capacity insufficient")

    ensure_slot_free(db, hall.id, booking.booking_date, booking.start_time, booking.end_time)

    db_booking = Booking(
        **booking.dict(exclude={"event_coordinators", "cost_per_plate"}),
        cost_per_plate=booking.cost_per_plate if booking.food_required else None,
        user_id=current_user["id"],
        status=BookingStatus.PENDING,
    )
    db_booking.event_coordinators = [EventCoordinator(**c.dict()) for c in booking.event_coordinators]
    db.add(db_booking)
    db.commit()
    db.refresh(db_booking)
    logger.debug(f"Created booking: {db_booking.id} on {db_booking.booking_date} for hall {hall.id}")
    return db_booking


@router.patch(
    "/{booking_id}/approve/manager",
    response_model=BookingResponse,
    summary="Manager approval",
    description="Move a pending booking to approved_by_manager. Managers only.",
)
def approve_booking_manager(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_manager),
):
    booking = get_booking_or_404(db, booking_id)
    transition(booking, "manager_approve")
    booking.manager_id = current_user["id"]

    notify(
        db,
        [booking.user_id],
        booking,
        f'Your booking for banquet hall "{booking.hall.name}" has been approved by the manager.',
    )
    db.commit()
    db.refresh(booking)
    logger.info(f"Manager {current_user['username']} approved booking {booking_id}")
    return booking


@router.patch(
    "/{booking_id}/reject/manager",
    response_model=BookingResponse,
    summary="Manager rejection",
    description="Reject a pending booking with a reason. Managers only.",
)
def reject_booking_manager(
    booking_id: int,
    rejection: RejectionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_manager),
):
    reason = (rejection.reason or "").strip()
    if not reason:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Rejection reason is required.")

    booking = get_booking_or_404(db, booking_id)
    transition(booking, "manager_reject")
    booking.manager_id = current_user["id"]
    booking.rejection_reason = reason

    name, recipient = mailer.booking_recipient(booking)
    subject, body = mailer.rejection_email(booking, name, reason)
    notify(
        db,
        [booking.user_id],
        booking,
        f'Your booking for banquet hall "{booking.hall.name}" has been rejected. Reason: {reason}',
    )
    db.commit()
    db.refresh(booking)
    queue_email(background_tasks, recipient, subject, body)
    logger.info(f"Manager {current_user['username']} rejected booking {booking_id}")
    return booking


@router.patch(
    "/{booking_id}/approve/admin",
    response_model=BookingResponse,
    summary="Admin approval",
    description="Approve a manager-approved booking, optionally attaching a PDF quotation. Admins only.",
)
def approve_booking_admin(
    booking_id: int,
    background_tasks: BackgroundTasks,
    quotation: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """
    Approve a booking already approved by a manager.

    - **quotation**: optional PDF sent to the event coordinator with the approval email.
    """
    booking = get_booking_or_404(db, booking_id)
    check_transition(booking, "admin_approve")

    attachments = []
    if quotation is not None and quotation.filename:
        if quotation.content_type != "application/pdf":
            logger.error(f"Rejected quotation of type {quotation.content_type} for booking {booking_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only PDF files are allowed for quotation attachment.",
            )
        attachments.append((quotation.filename or "quotation.pdf", quotation.file.read(), quotation.content_type))

    transition(booking, "admin_approve")
    booking.admin_id = current_user["id"]

    name, recipient = mailer.booking_recipient(booking)
    subject, body = mailer.approval_email(booking, name, with_quotation=bool(attachments))
    hall_name = booking.hall.name
    notify(
        db,
        [responsible_manager_id(db, booking)],
        booking,
        f'Booking for banquet hall "{hall_name}" has been approved by admin.',
    )
    notify(
        db,
        [booking.user_id],
        booking,
        f'Your booking for banquet hall "{hall_name}" has been approved by admin.',
    )
    db.commit()
    db.refresh(booking)
    queue_email(background_tasks, recipient, subject, body, attachments)
    logger.info(f"Admin {current_user['username']} approved booking {booking_id}")
    return booking


@router.patch(
    "/{booking_id}/reject/admin",
    response_model=BookingResponse,
    summary="Admin rejection",
    description="Reject a manager-approved booking. Admins only.",
)
def reject_booking_admin(
    booking_id: int,
    rejection: RejectionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    reason = (rejection.reason or "").strip() or None
    booking = get_booking_or_404(db, booking_id)
    transition(booking, "admin_reject")
    booking.admin_id = current_user["id"]
    booking.rejection_reason = reason

    name, recipient = mailer.booking_recipient(booking)
    subject, body = mailer.rejection_email(booking, name, reason)
    hall_name = booking.hall.name
    suffix = f" Reason: {reason}" if reason else ""
    notify(
        db,
        [booking.user_id],
        booking,
        f'Your booking for banquet hall "{hall_name}" has been rejected by the admin.{suffix}',
    )
    notify(
        db,
        [responsible_manager_id(db, booking)],
        booking,
        f'Booking for banquet hall "{hall_name}" has been rejected by the admin.{suffix}',
    )
    db.commit()
    db.refresh(booking)
    queue_email(background_tasks, recipient, subject, body)
    logger.info(f"Admin {current_user['username']} rejected booking {booking_id}")
    return booking


@router.post(
    "/confirm",
    response_model=BookingResponse,
    summary="Confirm a booking",
    description="Finalize an admin-approved booking. Requires the booking owner or an admin.",
)
def confirm_booking(
    request: ConfirmRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    booking = get_booking_or_404(db, request.booking_id)
    if current_user["role"] != UserRole.ADMIN:
        ensure_owner(booking, current_user, "confirm")
    transition(booking, "confirm")

    hall_name = booking.hall.name
    notify(
        db,
        [responsible_manager_id(db, booking)],
        booking,
        f'Booking for banquet hall "{hall_name}" has been confirmed.',
    )
    notify(
        db,
        [booking.user_id],
        booking,
        f'Your booking for banquet hall "{hall_name}" has been confirmed.',
    )
    db.commit()
    db.refresh(booking)
    logger.info(f"Booking {booking.id} confirmed by {current_user['username']}")
    return booking


@router.get("/pending/manager", response_model=List[BookingResponse], summary="Bookings awaiting a manager")
def get_pending_for_manager(db: Session = Depends(get_db), current_user: dict = Depends(require_staff)):
    return bookings_with_status(db, BookingStatus.PENDING)


@router.get("/confirmed/manager", response_model=List[BookingResponse], summary="Bookings approved by a manager")
def get_confirmed_by_manager(db: Session = Depends(get_db), current_user: dict = Depends(require_staff)):
    return bookings_with_status(db, BookingStatus.APPROVED_BY_MANAGER)


@router.get("/rejected/manager", response_model=List[BookingResponse], summary="Bookings rejected by a manager")
def get_rejected_by_manager(db: Session = Depends(get_db), current_user: dict = Depends(require_staff)):
    return bookings_with_status(db, BookingStatus.REJECTED_BY_MANAGER)


@router.get("/pending/admin", response_model=List[BookingResponse], summary="Bookings awaiting an admin")
def get_pending_for_admin(db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    return bookings_with_status(db, BookingStatus.APPROVED_BY_MANAGER)


@router.get("/user", response_model=List[BookingResponse], summary="The current user's bookings")
def get_user_bookings(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    bookings = (
        db.query(Booking)
        .filter(Booking.user_id == current_user["id"])
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    logger.debug(f"Retrieved {len(bookings)} bookings for user {current_user['username']}")
    return bookings


@router.get("/all", response_model=List[BookingResponse], summary="Every booking")
def get_all_bookings(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_staff),
):
    return db.query(Booking).order_by(Booking.id).offset(skip).limit(limit).all()


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a booking. Visible to its owner, managers and admins.",
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    booking = get_booking_or_404(db, booking_id)
    if not is_staff(current_user):
        ensure_owner(booking, current_user, "view")
    return booking


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Edit a booking that is not yet approved by an admin. Requires ownership.",
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Edit a booking's details.

    Changing the date or time re-runs the conflict check against every other
    live booking on the hall. A booking already approved by the manager goes
    back to `pending` for a fresh review.
    """
    db_booking = get_booking_or_404(db, booking_id)
    ensure_owner(db_booking, current_user, "update")

    if is_finalized(db_booking):
        logger.error(f"Booking {booking_id} is {db_booking.status.value}, refusing update")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot update an approved booking")

    update_data = booking_update.dict(exclude_unset=True)
    coordinators = update_data.pop("event_coordinators", None)
    update_data = {
        key: value for key, value in update_data.items() if value is not None or key not in REQUIRED_FIELDS
    }

    def effective(key):
        return update_data.get(key, getattr(db_booking, key))

    validate_event_details(effective("pax"), effective("food_required"), effective("cost_per_plate"))
    if effective("pax") > db_booking.hall.capacity:
        logger.error(f"Hall capacity insufficient: {db_booking.hall.capacity} < {effective('pax')}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Hall capacity insufficient")

    new_date, new_start, new_end = effective("booking_date"), effective("start_time"), effective("end_time")
    if (new_date, new_start, new_end) != (db_booking.booking_date, db_booking.start_time, db_booking.end_time):
        validate_time_window(new_date, new_start, new_end)
        ensure_hall_available(db_booking.hall)
        ensure_slot_free(db, db_booking.hall_id, new_date, new_start, new_end, exclude_booking_id=db_booking.id)

    for key, value in update_data.items():
        setattr(db_booking, key, value)
    if coordinators is not None:
        db_booking.event_coordinators = [EventCoordinator(**c) for c in coordinators]
    if not db_booking.food_required:
        db_booking.cost_per_plate = None

    if db_booking.status == BookingStatus.APPROVED_BY_MANAGER:
        db_booking.status = BookingStatus.PENDING
        notify(
            db,
            [db_booking.manager_id],
            db_booking,
            f'Booking for banquet hall "{db_booking.hall.name}" was edited and needs a new review.',
        )
        logger.info(f"Booking {booking_id} edited after manager approval, back to pending")

    db.commit()
    db.refresh(db_booking)
    logger.debug(f"Updated booking: {booking_id}")
    return db_booking


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Cancel a booking that is not yet approved by an admin. Requires ownership.",
)
def delete_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    db_booking = get_booking_or_404(db, booking_id)
    ensure_owner(db_booking, current_user, "delete")

    if is_finalized(db_booking):
        logger.error(f"Booking {booking_id} is {db_booking.status.value}, refusing delete")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete an approved booking")

    # Only coordinators hear about a cancellation
    email = None
    if db_booking.event_coordinators and db_booking.event_coordinators[0].email:
        name, recipient = mailer.booking_recipient(db_booking)
        email = (*mailer.cancellation_email(db_booking, name), recipient)

    db.delete(db_booking)
    db.commit()
    if email:
        subject, body, recipient = email
        background_tasks.add_task(mailer.send_email, subject, body, recipient, None)
    logger.debug(f"Deleted booking: {booking_id}")
    return None
