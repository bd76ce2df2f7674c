from datetime import date, time
from typing import Optional
from fastapi import HTTPException, status


def validate_time_window(booking_date: date, start_time: time, end_time: time):
    if booking_date < date.today():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Booking date cannot be in the past",
        )
    if start_time >= end_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Time Slot",
        )


def validate_event_details(pax: Optional[int], food_required: Optional[bool], cost_per_plate: Optional[float]):
    if pax is not None and pax <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid number of pax",
        )
    if food_required and (cost_per_plate is None or cost_per_plate < 0):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid cost per plate",
        )
