"""
Service Catalog API Routes
Clinic services and prices
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import get_current_principal, require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.logging import get_logger
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.settings import ServiceCatalog
from vetclinic.services.settings import SettingsService

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=ServiceCatalog)
async def get_services(
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(get_current_principal),
):
    """Service catalog, readable by every authenticated user"""
    return await SettingsService(db).get_service_catalog()


@router.put("", response_model=ServiceCatalog)
async def update_services(
    request: ServiceCatalog,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.MANAGE_SYSTEM_SETTINGS)),
):
    """Replace the whole service catalog"""
    catalog = await SettingsService(db).set_service_catalog(request)
    logger.info(f"Service catalog updated by {principal.username}: {len(catalog.categories)} categories")
    return catalog
