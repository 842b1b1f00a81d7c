"""
Authentication API Routes
Registration, login, logout and the current principal
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import get_current_principal
from vetclinic.core.config import settings
from vetclinic.core.guard import Principal
from vetclinic.core.logging import get_logger
from vetclinic.core.permissions import Role
from vetclinic.core.security import create_access_token
from vetclinic.db.models import User as UserModel
from vetclinic.db.session import get_db_session
from vetclinic.models.auth import (
    ChangePasswordRequest,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from vetclinic.models.common import MessageResponse
from vetclinic.services.users import UserService

logger = get_logger(__name__)
router = APIRouter()


def issue_token(user: UserModel) -> TokenResponse:
    token_data = {"sub": str(user.id), "username": user.username, "role": user.role}
    return TokenResponse(
        access_token=create_access_token(token_data),
        token_type="Bearer",
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Register a new user account

    Self-registered accounts always get the read-only user role.

    - **username**: Unique login name
    - **email**: User email address (must be unique)
    - **password**: User password (min 8 characters)
    """
    user = await UserService(db).create(
        username=request.username,
        email=request.email,
        password=request.password,
        role=Role.USER,
    )
    logger.info(f"New user registered: {user.username}")
    return issue_token(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Authenticate user and return a JWT access token

    - **username**: Login name
    - **password**: User password
    """
    user = await UserService(db).authenticate(request.username, request.password)
    return issue_token(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(get_current_principal)):
    """
    Logout user

    Tokens are stateless; the client discards its copy.
    """
    logger.info(f"User logged out: {principal.username}")
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
):
    """Current user with the permissions granted by its role"""
    user = await UserService(db).get(principal.id)
    response = CurrentUserResponse.model_validate(user)
    response.permissions = sorted(p.value for p in principal.permissions)
    return response


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Change current user's password

    - **old_password**: Current password
    - **new_password**: New password (min 8 characters)
    """
    await UserService(db).change_password(principal.id, request.old_password, request.new_password)
    return MessageResponse(message="Password changed successfully")
