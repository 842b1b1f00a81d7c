"""
Clients API Routes
Client CRUD
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.client import ClientCreate, ClientListResponse, ClientResponse, ClientUpdate
from vetclinic.models.common import MessageResponse
from vetclinic.services.repositories import ClientRepository

router = APIRouter()


@router.get("", response_model=ClientListResponse)
async def list_clients(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    is_active: Optional[bool] = Query(None),
    is_blacklisted: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_CLIENTS)),
):
    """List clients, newest first"""
    clients, total = await ClientRepository(db).list(
        limit=limit, offset=offset, is_active=is_active, is_blacklisted=is_blacklisted
    )
    return ClientListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[ClientResponse.model_validate(c) for c in clients],
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_CLIENTS)),
):
    return await ClientRepository(db).get(client_id)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_CLIENTS)),
):
    """
    Create a client

    - **email**: Optional, unique when present
    """
    return await ClientRepository(db).create(request)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    request: ClientUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_CLIENTS)),
):
    return await ClientRepository(db).update(client_id, request)


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_CLIENTS)),
):
    """Delete a client; refused with 409 while animals still reference it"""
    await ClientRepository(db).delete(client_id)
    return MessageResponse(message="Client deleted successfully")
