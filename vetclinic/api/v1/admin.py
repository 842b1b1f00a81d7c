"""
Admin API Routes
System statistics and Prometheus metrics
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.models import Document as DocumentModel
from vetclinic.db.models import DocumentRevision as RevisionModel
from vetclinic.db.models import User as UserModel
from vetclinic.db.session import get_db_session
from vetclinic.monitoring import get_metrics
from vetclinic.services.repositories import (
    AnimalRepository,
    BlacklistRepository,
    ClientRepository,
    InvoiceRepository,
    OrganizationRepository,
)

router = APIRouter()

view_system_settings = require_permission(Permission.VIEW_SYSTEM_SETTINGS)


@router.get("/stats")
async def get_system_stats(
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(view_system_settings),
):
    """Get record counts"""
    doc_result = await db.execute(
        select(
            func.count(DocumentModel.id).label("total"),
            func.count(DocumentModel.id).filter(DocumentModel.is_shared.is_(True)).label("shared"),
        )
    )
    doc_stats = doc_result.first()

    revision_result = await db.execute(
        select(
            func.count(RevisionModel.id).label("total"),
            func.sum(RevisionModel.size_bytes).label("total_bytes"),
        )
    )
    revision_stats = revision_result.first()

    user_result = await db.execute(
        select(UserModel.role, func.count(UserModel.id)).group_by(UserModel.role)
    )
    users_by_role = {role: count for role, count in user_result.all()}

    return {
        "clients": await ClientRepository(db).count(),
        "animals": await AnimalRepository(db).count(),
        "organizations": await OrganizationRepository(db).count(),
        "invoices": await InvoiceRepository(db).count(),
        "blacklist": await BlacklistRepository(db).count(),
        "documents": {
            "total": doc_stats.total or 0,
            "shared": doc_stats.shared or 0,
            "versions": revision_stats.total or 0,
            "storage_bytes": revision_stats.total_bytes or 0,
        },
        "users": {
            "total": sum(users_by_role.values()),
            "by_role": users_by_role,
        },
    }


@router.get("/metrics")
async def prometheus_metrics(principal: Principal = Depends(view_system_settings)):
    """
    Prometheus metrics endpoint

    Returns metrics in Prometheus exposition format for scraping by Prometheus server.
    """
    metrics = get_metrics()
    return Response(content=metrics, media_type="text/plain")
