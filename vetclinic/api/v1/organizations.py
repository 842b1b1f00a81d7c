"""
Organizations API Routes
Organization CRUD and business hours
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_any_permission, require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.animal import AnimalResponse
from vetclinic.models.common import MessageResponse
from vetclinic.models.organization import (
    BusinessHours,
    OrganizationCreate,
    OrganizationListResponse,
    OrganizationResponse,
    OrganizationUpdate,
)
from vetclinic.services.repositories import AnimalRepository, OrganizationRepository

router = APIRouter()


@router.get("", response_model=OrganizationListResponse)
async def list_organizations(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_ORGANIZATIONS)),
):
    """List organizations, newest first"""
    organizations, total = await OrganizationRepository(db).list(limit=limit, offset=offset)
    return OrganizationListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[OrganizationResponse.model_validate(o) for o in organizations],
    )


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_ORGANIZATIONS)),
):
    return await OrganizationRepository(db).get(organization_id)


@router.get("/{organization_id}/animals", response_model=List[AnimalResponse])
async def list_organization_animals(
    organization_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(
        require_any_permission(Permission.READ_ORGANIZATION_ANIMALS, Permission.READ_ANIMALS)
    ),
):
    """Animals placed with one organization"""
    await OrganizationRepository(db).get(organization_id)
    animals, _ = await AnimalRepository(db).list(limit=500, organization_id=organization_id)
    return [AnimalResponse.model_validate(a) for a in animals]


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: OrganizationCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_ORGANIZATIONS)),
):
    return await OrganizationRepository(db).create(request)


@router.put("/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: uuid.UUID,
    request: OrganizationUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_ORGANIZATIONS)),
):
    return await OrganizationRepository(db).update(organization_id, request)


@router.patch("/{organization_id}/business-hours", response_model=OrganizationResponse)
async def update_business_hours(
    organization_id: uuid.UUID,
    request: BusinessHours,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_ORGANIZATIONS)),
):
    """Replace the weekly opening hours"""
    return await OrganizationRepository(db).update_business_hours(organization_id, request)


@router.delete("/{organization_id}", response_model=MessageResponse)
async def delete_organization(
    organization_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_ORGANIZATIONS)),
):
    """Delete an organization; its animals are detached, not deleted"""
    await OrganizationRepository(db).delete(organization_id)
    return MessageResponse(message="Organization deleted successfully")
