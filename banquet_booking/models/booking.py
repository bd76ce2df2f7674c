import enum
from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from banquet_booking.db import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED_BY_MANAGER = "approved_by_manager"
    APPROVED_BY_ADMIN = "approved_by_admin"
    BOOKED = "booked"
    REJECTED_BY_MANAGER = "rejected_by_manager"
    REJECTED_BY_ADMIN = "rejected_by_admin"


REJECTED_STATUSES = (BookingStatus.REJECTED_BY_MANAGER, BookingStatus.REJECTED_BY_ADMIN)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    hall_id = Column(Integer, ForeignKey("banquet_halls.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    event_name = Column(String, nullable=False)
    event_details = Column(Text, nullable=False)
    pax = Column(Integer, nullable=False)
    food_required = Column(Boolean, nullable=False, default=False)
    cost_per_plate = Column(Float, nullable=True)
    additional_details = Column(Text, nullable=False, default="")
    special_equipment_requests = Column(Text, nullable=False, default="")
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(
        Enum(BookingStatus, values_callable=lambda statuses: [s.value for s in statuses], native_enum=False),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hall = relationship("BanquetHall", back_populates="bookings")
    user = relationship("User", back_populates="bookings", foreign_keys=[user_id])
    manager = relationship("User", foreign_keys=[manager_id])
    admin = relationship("User", foreign_keys=[admin_id])
    event_coordinators = relationship(
        "EventCoordinator",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="EventCoordinator.id",
    )
    notifications = relationship("Notification", back_populates="booking")


class EventCoordinator(Base):
    __tablename__ = "event_coordinators"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    contact = Column(String, nullable=False)

    booking = relationship("Booking", back_populates="event_coordinators")
