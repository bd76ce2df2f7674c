import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from banquet_booking.db import get_db
from banquet_booking.models.hall import BanquetHall, HallEquipment
from banquet_booking.models.user import UserRole
from banquet_booking.schemas.hall import (
    HallAvailabilityUpdate,
    HallCreate,
    HallResponse,
    HallUpdate,
)
from banquet_booking.utils.auth import require_roles

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/halls",
    tags=["halls"],
)

require_admin = require_roles(UserRole.ADMIN)


def get_hall_or_404(db: Session, hall_id: int) -> BanquetHall:
    hall = db.query(BanquetHall).filter(BanquetHall.id == hall_id).first()
    if not hall:
        logger.error(f"Hall not found: {hall_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hall not found")
    return hall


@router.get("/", response_model=List[HallResponse])
def get_halls(skip: int = 0, limit: int = 100, available_only: bool = False, db: Session = Depends(get_db)):
    """
    Retrieve banquet halls ordered by display id.
    """
    query = db.query(BanquetHall)
    if available_only:
        query = query.filter(BanquetHall.is_available.is_(True))
    return query.order_by(BanquetHall.display_id).offset(skip).limit(limit).all()


@router.get("/{hall_id}", response_model=HallResponse)
def get_hall(hall_id: int, db: Session = Depends(get_db)):
    return get_hall_or_404(db, hall_id)


@router.post("/", response_model=HallResponse, status_code=status.HTTP_201_CREATED)
def create_hall(hall: HallCreate, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Create a banquet hall. Admin only.
    """
    display_id = hall.display_id
    if display_id is None:
        display_id = (db.query(func.max(BanquetHall.display_id)).scalar() or 0) + 1
    elif db.query(BanquetHall).filter(BanquetHall.display_id == display_id).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Display id already in use")

    data = hall.dict(exclude={"equipment", "display_id"})
    db_hall = BanquetHall(**data, display_id=display_id)
    db_hall.equipment = [HallEquipment(**item.dict()) for item in hall.equipment]
    db.add(db_hall)
    db.commit()
    db.refresh(db_hall)
    logger.debug(f"Admin {current_user['username']} created hall {db_hall.id}")
    return db_hall


@router.put("/{hall_id}", response_model=HallResponse)
def update_hall(
    hall_id: int,
    hall_update: HallUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """
    Update a hall's details. The equipment list is replaced when given.
    """
    db_hall = get_hall_or_404(db, hall_id)

    update_data = hall_update.dict(exclude_unset=True)
    equipment = update_data.pop("equipment", None)
    for key, value in update_data.items():
        setattr(db_hall, key, value)
    if equipment is not None:
        db_hall.equipment = [HallEquipment(**item) for item in equipment]

    db.commit()
    db.refresh(db_hall)
    logger.debug(f"Admin {current_user['username']} updated hall {hall_id}")
    return db_hall


@router.patch("/{hall_id}/availability", response_model=HallResponse)
def update_hall_availability(
    hall_id: int,
    availability: HallAvailabilityUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """
    Open or close a hall for new bookings. Closing requires a reason.
    """
    db_hall = get_hall_or_404(db, hall_id)

    reason = (availability.unavailability_reason or "").strip()
    if not availability.is_available and not reason:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unavailability reason is required")

    db_hall.is_available = availability.is_available
    db_hall.unavailability_reason = None if availability.is_available else reason
    db.commit()
    db.refresh(db_hall)
    logger.info(f"Admin {current_user['username']} set hall {hall_id} available={db_hall.is_available}")
    return db_hall


@router.delete("/{hall_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hall(hall_id: int, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    db_hall = get_hall_or_404(db, hall_id)
    db.delete(db_hall)
    db.commit()
    logger.debug(f"Admin {current_user['username']} deleted hall {hall_id}")
    return None
