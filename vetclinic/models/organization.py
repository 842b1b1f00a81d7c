"""
Organization Pydantic Models
Request/response schemas for organization endpoints
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_serializer

from vetclinic.models.common import PaginatedResponse

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class OrganizationAddress(BaseModel):
    """Organization postal address"""
    street: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, pattern=r"^\d{5}(-\d{4})?$")
    country: Optional[str] = Field(None, max_length=100)


class ContactInfo(BaseModel):
    """Organization contact details"""
    phone: Optional[str] = Field(None, max_length=50, pattern=r"^\+?[\d\s\-()]+$")
    email: Optional[EmailStr] = None
    website: Optional[HttpUrl] = None

    @field_serializer("website")
    def serialize_website(self, value: Optional[HttpUrl]) -> Optional[str]:
        return str(value) if value is not None else None


class OpeningHours(BaseModel):
    """Opening and closing time of one weekday"""
    open: Optional[str] = Field(None, pattern=TIME_PATTERN)
    close: Optional[str] = Field(None, pattern=TIME_PATTERN)


class BusinessHours(BaseModel):
    """Opening hours per weekday"""
    monday: Optional[OpeningHours] = None
    tuesday: Optional[OpeningHours] = None
    wednesday: Optional[OpeningHours] = None
    thursday: Optional[OpeningHours] = None
    friday: Optional[OpeningHours] = None
    saturday: Optional[OpeningHours] = None
    sunday: Optional[OpeningHours] = None


class OrganizationBase(BaseModel):
    """Base organization fields"""
    name: str = Field(..., min_length=2, max_length=100)
    address: Optional[OrganizationAddress] = None
    contact_info: Optional[ContactInfo] = None
    tax_id: Optional[str] = Field(None, max_length=50, pattern=r"^[0-9-]+$")
    business_hours: Optional[BusinessHours] = None


class OrganizationCreate(OrganizationBase):
    """Organization creation schema"""
    pass


class OrganizationUpdate(BaseModel):
    """Organization update schema; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    address: Optional[OrganizationAddress] = None
    contact_info: Optional[ContactInfo] = None
    tax_id: Optional[str] = Field(None, max_length=50, pattern=r"^[0-9-]+$")
    business_hours: Optional[BusinessHours] = None


class OrganizationResponse(BaseModel):
    """Organization response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    address: Optional[OrganizationAddress]
    contact_info: Optional[ContactInfo]
    tax_id: Optional[str]
    business_hours: Optional[BusinessHours]
    created_at: datetime
    updated_at: datetime


class OrganizationListResponse(PaginatedResponse):
    """Paginated organization list"""
    results: List[OrganizationResponse]
