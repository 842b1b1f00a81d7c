"""
Document Pydantic Models
Request/response schemas for document endpoints
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentMetadata(BaseModel):
    """Descriptive fields supplied alongside an upload"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    animal_id: Optional[uuid.UUID] = None
    client_id: Optional[uuid.UUID] = None
    organization_id: Optional[uuid.UUID] = None
    is_editable: bool = True
    is_printable: bool = True


class DocumentMetadataUpdate(BaseModel):
    """Partial metadata update; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    animal_id: Optional[uuid.UUID] = None
    client_id: Optional[uuid.UUID] = None
    organization_id: Optional[uuid.UUID] = None
    is_editable: Optional[bool] = None
    is_printable: Optional[bool] = None


class DocumentResponse(BaseModel):
    """Document response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str]
    file_type: str
    current_version: int
    revision_count: int
    is_editable: bool
    is_printable: bool
    animal_id: Optional[uuid.UUID]
    client_id: Optional[uuid.UUID]
    organization_id: Optional[uuid.UUID]
    created_by: Optional[uuid.UUID]
    is_shared: bool
    share_expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """Document list response schema"""
    total: int
    results: List[DocumentResponse]


class RevisionResponse(BaseModel):
    """One entry of a document's version history (payload omitted)"""
    model_config = ConfigDict(from_attributes=True)

    version_number: int
    content_type: str
    size_bytes: int
    created_at: datetime
    created_by: Optional[uuid.UUID]
    note: Optional[str]


class ShareRequest(BaseModel):
    """Share-link issuance request"""
    model_config = ConfigDict(populate_by_name=True)

    expiry_days: Optional[int] = Field(None, alias="expiryDays", le=3650)


class ShareResponse(BaseModel):
    """Issued share link"""
    model_config = ConfigDict(populate_by_name=True)

    share_link: str = Field(..., alias="shareLink")
    expiry: datetime
