"""
Public Share Route
Unauthenticated document access through a share token
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.api.v1.documents import pdf_response
from vetclinic.db.session import get_db_session
from vetclinic.services.documents import ShareLinkIssuer

router = APIRouter()


@router.get("/{token}")
async def get_shared_document(
    token: str,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Download a shared document

    No credentials are required; unknown, revoked and expired tokens all
    return the same 404.
    """
    payload = await ShareLinkIssuer(db).resolve(token)
    return pdf_response(payload, "shared-document")
