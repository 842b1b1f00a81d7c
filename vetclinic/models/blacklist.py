"""
Blacklist Pydantic Models
Request/response schemas for blacklist endpoints
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from vetclinic.models.common import PaginatedResponse


class BlacklistBase(BaseModel):
    """Base blacklist entry fields"""
    client_id: uuid.UUID
    reason: str = Field(..., min_length=10, max_length=500)
    added_by: str = Field(..., min_length=2, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)
    is_active: bool = True


class BlacklistCreate(BlacklistBase):
    """Blacklist entry creation schema"""
    pass


class BlacklistUpdate(BaseModel):
    """Blacklist entry update schema; unset fields are left untouched"""
    client_id: Optional[uuid.UUID] = None
    reason: Optional[str] = Field(None, min_length=10, max_length=500)
    added_by: Optional[str] = Field(None, min_length=2, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None


class BlacklistResponse(BaseModel):
    """Blacklist entry response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    client_id: uuid.UUID
    reason: str
    added_by: str
    notes: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BlacklistListResponse(PaginatedResponse):
    """Paginated blacklist list"""
    results: List[BlacklistResponse]
