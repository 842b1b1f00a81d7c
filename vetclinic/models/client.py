"""
Client Pydantic Models
Request/response schemas for client endpoints
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from vetclinic.models.common import PaginatedResponse

PHONE_PATTERN = r"^\+?[\d\s\-()]+$"


def _normalize_email(value):
    # Blank email means "no email"
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


class Address(BaseModel):
    """Postal address"""
    street: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    county: Optional[str] = Field(None, max_length=100)


class ClientBase(BaseModel):
    """Base client fields"""
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=1, max_length=50, pattern=PHONE_PATTERN)
    address: Optional[Address] = None
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class ClientCreate(ClientBase):
    """Client creation schema"""
    pass


class ClientUpdate(BaseModel):
    """Client update schema; unset fields are left untouched"""
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50, pattern=PHONE_PATTERN)
    address: Optional[Address] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class ClientResponse(BaseModel):
    """Client response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: Optional[str]
    phone: str
    address: Optional[Address]
    notes: Optional[str]
    is_active: bool
    is_blacklisted: bool
    blacklist_reason: Optional[str]
    created_at: datetime
    updated_at: datetime


class ClientListResponse(PaginatedResponse):
    """Paginated client list"""
    results: List[ClientResponse]
