"""
Authentication Pydantic Models
Request/response schemas for authentication and user management endpoints
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from vetclinic.models.common import PaginatedResponse

ROLE_PATTERN = "^(admin|staff|user)$"


class UserBase(BaseModel):
    """Base user fields"""
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr


class RegisterRequest(UserBase):
    """Self-registration schema; the account always gets the user role"""
    password: str = Field(..., min_length=8, max_length=100)


class UserCreate(UserBase):
    """Admin user creation schema"""
    password: str = Field(..., min_length=8, max_length=100)
    role: str = Field("user", pattern=ROLE_PATTERN)


class RoleUpdate(BaseModel):
    """Role change schema"""
    role: str = Field(..., pattern=ROLE_PATTERN)


class StatusUpdate(BaseModel):
    """Account activation schema"""
    is_active: bool


class UserResponse(UserBase):
    """User response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: str
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None


class CurrentUserResponse(UserResponse):
    """Authenticated user with the permissions granted by the role"""
    permissions: List[str] = Field(default_factory=list)


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse


class LoginRequest(BaseModel):
    """Login request schema"""
    username: str
    password: str


class ChangePasswordRequest(BaseModel):
    """Change password request schema"""
    old_password: str
    new_password: str = Field(..., min_length=8, max_length=100)


class UserListResponse(PaginatedResponse):
    """Paginated user list"""
    results: List[UserResponse]
