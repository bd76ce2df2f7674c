from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from banquet_booking.db import Base


class BanquetHall(Base):
    __tablename__ = "banquet_halls"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    display_id = Column(Integer, unique=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    details = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)
    unavailability_reason = Column(String, nullable=True)

    equipment = relationship(
        "HallEquipment", back_populates="hall", cascade="all, delete-orphan"
    )
    bookings = relationship(
        "Booking", back_populates="hall", cascade="all, delete-orphan"
    )


class HallEquipment(Base):
    __tablename__ = "hall_equipment"

    id = Column(Integer, primary_key=True, index=True)
    hall_id = Column(Integer, ForeignKey("banquet_halls.id"), nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    condition = Column(String, nullable=False, default="Good")
    available = Column(Boolean, nullable=False, default=True)
    quantity = Column(Integer, nullable=False, default=1)

    hall = relationship("BanquetHall", back_populates="equipment")
