"""
User Management API Routes
Admin-only account administration
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission, Role
from vetclinic.db.session import get_db_session
from vetclinic.models.auth import (
    RoleUpdate,
    StatusUpdate,
    UserCreate,
    UserListResponse,
    UserResponse,
)
from vetclinic.models.common import MessageResponse
from vetclinic.services.users import UserService

router = APIRouter()

manage_users = require_permission(Permission.MANAGE_USERS)


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(manage_users),
):
    users, total = await UserService(db).list(limit=limit, offset=offset)
    return UserListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[UserResponse.model_validate(u) for u in users],
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(manage_users),
):
    """Create an account with any role"""
    return await UserService(db).create(
        username=request.username,
        email=request.email,
        password=request.password,
        role=Role(request.role),
    )


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: uuid.UUID,
    request: RoleUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(manage_users),
):
    return await UserService(db).set_role(principal, user_id, Role(request.role))


@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: uuid.UUID,
    request: StatusUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(manage_users),
):
    return await UserService(db).set_active(principal, user_id, request.is_active)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(manage_users),
):
    await UserService(db).delete(principal, user_id)
    return MessageResponse(message="User deleted successfully")
