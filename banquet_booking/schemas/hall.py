from pydantic import BaseModel, Field
from typing import List, Optional


class EquipmentBase(BaseModel):
    name: str
    type: str
    condition: str = "Good"
    available: bool = True
    quantity: int = Field(default=1, ge=0)


class EquipmentResponse(EquipmentBase):
    id: int

    class Config:
        from_attributes = True


class HallBase(BaseModel):
    name: str
    capacity: int = Field(gt=0)
    details: Optional[str] = None
    images: List[str] = []


class HallCreate(HallBase):
    display_id: Optional[int] = None
    equipment: List[EquipmentBase] = []


class HallUpdate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    details: Optional[str] = None
    images: Optional[List[str]] = None
    equipment: Optional[List[EquipmentBase]] = None


class HallAvailabilityUpdate(BaseModel):
    is_available: bool
    unavailability_reason: Optional[str] = None


class HallResponse(HallBase):
    id: int
    display_id: int
    is_available: bool
    unavailability_reason: Optional[str] = None
    equipment: List[EquipmentResponse] = []

    class Config:
        from_attributes = True
