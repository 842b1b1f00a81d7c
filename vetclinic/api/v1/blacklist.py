"""
Blacklist API Routes
Blacklist entry CRUD
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.blacklist import (
    BlacklistCreate,
    BlacklistListResponse,
    BlacklistResponse,
    BlacklistUpdate,
)
from vetclinic.models.common import MessageResponse
from vetclinic.services.repositories import BlacklistRepository

router = APIRouter()


@router.get("", response_model=BlacklistListResponse)
async def list_blacklist(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    client_id: Optional[uuid.UUID] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_BLACKLIST)),
):
    entries, total = await BlacklistRepository(db).list(
        limit=limit, offset=offset, client_id=client_id, is_active=is_active
    )
    return BlacklistListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[BlacklistResponse.model_validate(e) for e in entries],
    )


@router.get("/{entry_id}", response_model=BlacklistResponse)
async def get_blacklist_entry(
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_BLACKLIST)),
):
    return await BlacklistRepository(db).get(entry_id)


@router.post("", response_model=BlacklistResponse, status_code=status.HTTP_201_CREATED)
async def create_blacklist_entry(
    request: BlacklistCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_BLACKLIST)),
):
    """Blacklist a client; the client's is_blacklisted flag follows its active entries"""
    return await BlacklistRepository(db).create(request)


@router.put("/{entry_id}", response_model=BlacklistResponse)
async def update_blacklist_entry(
    entry_id: uuid.UUID,
    request: BlacklistUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_BLACKLIST)),
):
    return await BlacklistRepository(db).update(entry_id, request)


@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_blacklist_entry(
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_BLACKLIST)),
):
    await BlacklistRepository(db).delete(entry_id)
    return MessageResponse(message="Blacklist entry deleted successfully")
