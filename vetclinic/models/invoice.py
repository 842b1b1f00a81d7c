"""
Invoice Pydantic Models
Request/response schemas for invoice endpoints
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vetclinic.models.common import PaginatedResponse


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"


def _money(value: float) -> float:
    return round(float(value), 2)


class InvoiceItem(BaseModel):
    """One billed line"""
    description: str = Field(..., min_length=1, max_length=500)
    procedure: Optional[str] = Field(None, max_length=200)
    quantity: int = Field(1, ge=1)
    unit_price: float = Field(..., ge=0)
    total: float = Field(..., ge=0)

    @field_validator("unit_price", "total")
    @classmethod
    def round_money(cls, v: float) -> float:
        return _money(v)


class AnimalSection(BaseModel):
    """Items billed for one animal"""
    animal_id: uuid.UUID
    items: List[InvoiceItem] = Field(..., min_length=1)
    subtotal: float = Field(0, ge=0)

    @field_validator("subtotal")
    @classmethod
    def round_money(cls, v: float) -> float:
        return _money(v)


class InvoiceBase(BaseModel):
    """Base invoice fields"""
    invoice_number: str = Field(..., min_length=1, max_length=50, pattern=r"^[A-Z0-9-]+$")
    client_id: uuid.UUID
    date: datetime
    animal_sections: List[AnimalSection] = Field(..., min_length=1)
    subtotal: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("subtotal", "total")
    @classmethod
    def round_money(cls, v: float) -> float:
        return _money(v)


class InvoiceCreate(InvoiceBase):
    """Invoice creation schema"""
    pass


class InvoiceUpdate(BaseModel):
    """Invoice update schema; unset fields are left untouched"""
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50, pattern=r"^[A-Z0-9-]+$")
    client_id: Optional[uuid.UUID] = None
    date: Optional[datetime] = None
    animal_sections: Optional[List[AnimalSection]] = Field(None, min_length=1)
    subtotal: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    status: Optional[InvoiceStatus] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("subtotal", "total")
    @classmethod
    def round_money(cls, v: Optional[float]) -> Optional[float]:
        return _money(v) if v is not None else v


class InvoiceStatusUpdate(BaseModel):
    """Invoice status change"""
    status: InvoiceStatus


class InvoiceResponse(BaseModel):
    """Invoice response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    invoice_number: str
    client_id: uuid.UUID
    date: datetime
    animal_sections: List[AnimalSection]
    subtotal: float
    total: float
    status: str
    payment_method: Optional[str]
    payment_date: Optional[datetime]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class InvoiceListResponse(PaginatedResponse):
    """Paginated invoice list"""
    results: List[InvoiceResponse]
