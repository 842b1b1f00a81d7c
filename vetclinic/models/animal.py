"""
Animal Pydantic Models
Request/response schemas for animal endpoints
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from vetclinic.models.common import PaginatedResponse


class Species(str, Enum):
    DOG = "DOG"
    CAT = "CAT"
    OTHER = "OTHER"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class MedicalRecord(BaseModel):
    """One medical history entry"""
    date: date
    description: str = Field(..., min_length=1, max_length=2000)
    diagnosis: Optional[str] = Field(None, max_length=1000)
    treatment: Optional[str] = Field(None, max_length=1000)
    veterinarian: Optional[str] = Field(None, max_length=100)


class AnimalBase(BaseModel):
    """Base animal fields"""
    name: str = Field(..., min_length=2, max_length=50)
    species: Species
    breed: Optional[str] = Field(None, max_length=100)
    age: Optional[float] = Field(None, ge=0)
    gender: Gender = Gender.UNKNOWN
    weight: Optional[float] = Field(None, ge=0)
    client_id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    medical_history: List[MedicalRecord] = Field(default_factory=list)
    notes: Optional[str] = None
    is_active: bool = True


class AnimalCreate(AnimalBase):
    """Animal creation schema"""
    pass


class AnimalUpdate(BaseModel):
    """Animal update schema; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    species: Optional[Species] = None
    breed: Optional[str] = Field(None, max_length=100)
    age: Optional[float] = Field(None, ge=0)
    gender: Optional[Gender] = None
    weight: Optional[float] = Field(None, ge=0)
    client_id: Optional[uuid.UUID] = None
    organization_id: Optional[uuid.UUID] = None
    medical_history: Optional[List[MedicalRecord]] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class AnimalResponse(BaseModel):
    """Animal response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    species: str
    breed: Optional[str]
    age: Optional[float]
    gender: str
    weight: Optional[float]
    client_id: uuid.UUID
    organization_id: Optional[uuid.UUID]
    medical_history: List[MedicalRecord]
    notes: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AnimalListResponse(PaginatedResponse):
    """Paginated animal list"""
    results: List[AnimalResponse]
