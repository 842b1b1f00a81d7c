"""
Documents API Routes
Document upload, versioned replacement, download and share-link management
"""

import uuid
from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, Request, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.dependencies import require_permission
from vetclinic.core.config import settings
from vetclinic.core.guard import Principal
from vetclinic.core.logging import get_logger
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.models.common import MessageResponse
from vetclinic.models.document import (
    DocumentListResponse,
    DocumentMetadata,
    DocumentMetadataUpdate,
    DocumentResponse,
    RevisionResponse,
    ShareRequest,
    ShareResponse,
)
from vetclinic.services.documents import DocumentStore, ShareLinkIssuer, validate_payload

logger = get_logger(__name__)
router = APIRouter()


def pdf_response(payload: bytes, filename: str) -> Response:
    filename = filename.replace('"', "").encode("ascii", "ignore").decode("ascii")
    return Response(
        content=payload,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}.pdf"'},
    )


def share_link_url(request: Request, token: str) -> str:
    base_url = settings.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base_url.rstrip('/')}/api/v1/share/{token}"


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    organization_id: Optional[uuid.UUID] = Query(None, description="Filter by organization"),
    client_id: Optional[uuid.UUID] = Query(None, description="Filter by client"),
    animal_id: Optional[uuid.UUID] = Query(None, description="Filter by animal"),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_DOCUMENTS)),
):
    """List document metadata, newest first"""
    documents = await DocumentStore(db).list(
        organization_id=organization_id,
        client_id=client_id,
        animal_id=animal_id,
    )
    return DocumentListResponse(
        total=len(documents),
        results=[DocumentResponse.model_validate(d) for d in documents],
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    animal_id: Optional[uuid.UUID] = Form(None),
    client_id: Optional[uuid.UUID] = Form(None),
    organization_id: Optional[uuid.UUID] = Form(None),
    is_editable: bool = Form(True),
    is_printable: bool = Form(True),
    note: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.CREATE_DOCUMENTS)),
):
    """
    Upload a new PDF document

    - **file**: PDF file (max MAX_UPLOAD_SIZE_MB)
    - **name**: Display name, defaults to the uploaded filename
    """
    content = await file.read()

    metadata = DocumentMetadata(
        name=(name or file.filename or "document")[:255],
        description=description,
        animal_id=animal_id,
        client_id=client_id,
        organization_id=organization_id,
        is_editable=is_editable,
        is_printable=is_printable,
    )
    document = await DocumentStore(db).create(
        metadata, content, file.content_type, actor=principal.id, note=note
    )

    logger.info(f"Document uploaded: {document.id} - {file.filename} by {principal.username}")
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_DOCUMENTS)),
):
    """Get document metadata"""
    document = await DocumentStore(db).get(document_id)
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}/file")
async def download_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_DOCUMENTS)),
):
    """Download the live payload"""
    store = DocumentStore(db)
    document = await store.get(document_id)
    payload = await store.get_current(document_id)
    return pdf_response(payload, document.name)


@router.get("/{document_id}/version/{version_number}")
async def download_document_version(
    document_id: uuid.UUID,
    version_number: int,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_DOCUMENTS)),
):
    """Download one version; current_version is the live payload"""
    store = DocumentStore(db)
    payload = await store.get_revision(document_id, version_number)
    document = await store.get(document_id)
    return pdf_response(payload, f"{document.name}_v{version_number}")


@router.get("/{document_id}/versions", response_model=List[RevisionResponse])
async def list_document_versions(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.READ_DOCUMENTS)),
):
    """Version history without payloads"""
    revisions = await DocumentStore(db).list_revisions(document_id)
    return [RevisionResponse.model_validate(r) for r in revisions]


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: uuid.UUID,
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    animal_id: Optional[uuid.UUID] = Form(None),
    client_id: Optional[uuid.UUID] = Form(None),
    organization_id: Optional[uuid.UUID] = Form(None),
    is_editable: Optional[bool] = Form(None),
    is_printable: Optional[bool] = Form(None),
    note: Optional[str] = Form(None),
    expected_version: Optional[int] = Form(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_DOCUMENTS)),
):
    """
    Update metadata and optionally replace the payload

    - **file**: New PDF; the previous payload stays readable as a prior version
    - **expected_version**: Reject the replacement if another one landed first
    """
    store = DocumentStore(db)

    content = None
    if file is not None:
        content = await file.read()
        validate_payload(content, file.content_type)

    fields = {
        key: value
        for key, value in {
            "name": name,
            "description": description,
            "animal_id": animal_id,
            "client_id": client_id,
            "organization_id": organization_id,
            "is_editable": is_editable,
            "is_printable": is_printable,
        }.items()
        if value is not None
    }
    metadata = DocumentMetadataUpdate(**fields) if fields else None

    if content is not None:
        # Metadata rides on the replacement so a rejected one changes nothing
        document = await store.replace_payload(
            document_id,
            content,
            file.content_type,
            note=note,
            actor=principal.id,
            expected_version=expected_version,
            fields=metadata,
        )
    elif metadata is not None:
        document = await store.update_metadata(document_id, metadata)
    else:
        document = await store.get(document_id)

    return DocumentResponse.model_validate(document)


@router.post("/{document_id}/share", response_model=ShareResponse)
async def share_document(
    document_id: uuid.UUID,
    request: Request,
    share_request: Optional[ShareRequest] = Body(None),
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_DOCUMENTS)),
):
    """
    Issue a public share link, replacing any previous one

    - **expiryDays**: Link lifetime in days (default SHARE_LINK_DEFAULT_EXPIRY_DAYS)
    """
    ttl = None
    if share_request is not None and share_request.expiry_days is not None:
        ttl = timedelta(days=share_request.expiry_days)

    grant = await ShareLinkIssuer(db).issue(document_id, ttl=ttl, actor=principal.id)

    return ShareResponse(share_link=share_link_url(request, grant.token), expiry=grant.expires_at)


@router.delete("/{document_id}/share", response_model=MessageResponse)
async def unshare_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.UPDATE_DOCUMENTS)),
):
    """Revoke the document's share link"""
    await ShareLinkIssuer(db).revoke(document_id)
    return MessageResponse(message="Share link revoked")


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_permission(Permission.DELETE_DOCUMENTS)),
):
    """Delete a document and its whole version history"""
    await DocumentStore(db).delete(document_id)
    logger.info(f"Document {document_id} deleted by {principal.username}")
    return MessageResponse(message="Document deleted successfully")
