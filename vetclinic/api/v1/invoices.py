"""
Invoices API Routes
Invoice CRUD and status transitions
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.common import MessageResponse
from vetclinic.models.invoice import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceUpdate,
)
from vetclinic.services.repositories import InvoiceRepository

router = APIRouter()


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    client_id: Optional[uuid.UUID] = Query(None),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_INVOICES)),
):
    """List invoices, newest first"""
    invoices, total = await InvoiceRepository(db).list(
        limit=limit,
        offset=offset,
        client_id=client_id,
        status=invoice_status.value if invoice_status else None,
    )
    return InvoiceListResponse(
        total=total,
        limit=limit,
        offset=offset,
        results=[InvoiceResponse.model_validate(i) for i in invoices],
    )


@router.get("/animal/{animal_id}", response_model=List[InvoiceResponse])
async def list_invoices_for_animal(
    animal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_INVOICES)),
):
    """Invoices with a section billed to one animal"""
    invoices = await InvoiceRepository(db).list_for_animal(animal_id)
    return [InvoiceResponse.model_validate(i) for i in invoices]


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_INVOICES)),
):
    return await InvoiceRepository(db).get(invoice_id)


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    request: InvoiceCreate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_INVOICES)),
):
    """
    Create an invoice

    - **invoice_number**: Uppercase letters, digits and hyphens; unique
    - **client_id**: Billed client or organization
    """
    return await InvoiceRepository(db).create(request)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: uuid.UUID,
    request: InvoiceUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_INVOICES)),
):
    return await InvoiceRepository(db).update(invoice_id, request)


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
async def update_invoice_status(
    invoice_id: uuid.UUID,
    request: InvoiceStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_INVOICES)),
):
    """Change the status; moving to paid records the payment date"""
    return await InvoiceRepository(db).update_status(invoice_id, request.status.value)


@router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(
    invoice_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_INVOICES)),
):
    await InvoiceRepository(db).delete(invoice_id)
    return MessageResponse(message="Invoice deleted successfully")
