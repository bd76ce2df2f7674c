import re
from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel, EmailStr, validator
from banquet_booking.models.booking import BookingStatus

CONTACT_PATTERN = re.compile(r"^(\+91|0)?[6-9]\d{9}$")


class EventCoordinatorBase(BaseModel):
    name: str
    email: EmailStr
    contact: str

    @validator("contact")
    def check_contact(cls, value):
        value = value.strip()
        if not CONTACT_PATTERN.match(value):
            raise ValueError("Contact must be a valid 10-digit mobile number")
        return value


class EventCoordinatorResponse(EventCoordinatorBase):
    id: int

    class Config:
        from_attributes = True


class BookingBase(BaseModel):
    hall_id: int
    booking_date: date
    start_time: time
    end_time: time
    event_name: str
    event_details: str
    pax: int
    food_required: bool = False
    cost_per_plate: Optional[float] = None
    additional_details: str = ""
    special_equipment_requests: str = ""


class BookingCreate(BookingBase):
    event_coordinators: List[EventCoordinatorBase] = []


class BookingUpdate(BaseModel):
    booking_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    event_name: Optional[str] = None
    event_details: Optional[str] = None
    event_coordinators: Optional[List[EventCoordinatorBase]] = None
    pax: Optional[int] = None
    food_required: Optional[bool] = None
    cost_per_plate: Optional[float] = None
    additional_details: Optional[str] = None
    special_equipment_requests: Optional[str] = None


class HallSummary(BaseModel):
    id: int
    name: str
    capacity: int

    class Config:
        from_attributes = True


class BookingResponse(BookingBase):
    id: int
    user_id: int
    status: BookingStatus
    manager_id: Optional[int] = None
    admin_id: Optional[int] = None
    rejection_reason: Optional[str] = None
    event_coordinators: List[EventCoordinatorResponse] = []
    hall: Optional[HallSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RejectionRequest(BaseModel):
    reason: Optional[str] = None


class ConfirmRequest(BaseModel):
    booking_id: int
