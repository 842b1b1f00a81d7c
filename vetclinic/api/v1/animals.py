"""
Animals API Routes
Animal CRUD and per-client listing
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.animal import (
    AnimalCreate,
    AnimalListResponse,
    AnimalResponse,
    AnimalUpdate,
    Species,
)
from vetclinic.models.common import MessageResponse
from vetclinic.services.repositories import AnimalRepository

router = APIRouter()


@router.get("", response_model=AnimalListResponse)
async def list_animals(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    client_id: Optional[uuid.UUID] = Query(None),
    organization_id: Optional[uuid.UUID] = Query(None),
    species: Optional[Species] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_ANIMALS)),
):
    """List animals, newest first"""
    animals, total = await AnimalRepository(db).list(
        limit=limit,
        offset=offset,
        client_id=client_id,
        organization_id=organization_id,
        species=species.value if species else None,
    )
    return AnimalListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[AnimalResponse.model_validate(a) for a in animals],
    )


@router.get("/client/{client_id}", response_model=List[AnimalResponse])
async def list_client_animals(
    client_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_ANIMALS)),
):
    """All animals owned by one client"""
    animals = await AnimalRepository(db).list_for_client(client_id)
    return [AnimalResponse.model_validate(a) for a in animals]


@router.get("/{animal_id}", response_model=AnimalResponse)
async def get_animal(
    animal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_ANIMALS)),
):
    return await AnimalRepository(db).get(animal_id)


@router.post("", response_model=AnimalResponse, status_code=status.HTTP_201_CREATED)
async def create_animal(
    request: AnimalCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_ANIMALS)),
):
    """
    Create an animal

    - **client_id**: Owning client, must exist
    - **organization_id**: Optional, must exist when given
    """
    return await AnimalRepository(db).create(request)


@router.put("/{animal_id}", response_model=AnimalResponse)
async def update_animal(
    animal_id: uuid.UUID,
    request: AnimalUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_ANIMALS)),
):
    return await AnimalRepository(db).update(animal_id, request)


@router.delete("/{animal_id}", response_model=MessageResponse)
async def delete_animal(
    animal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_ANIMALS)),
):
    await AnimalRepository(db).delete(animal_id)
    return MessageResponse(message="Animal deleted successfully")
