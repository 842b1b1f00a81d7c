# API v1 routes
from fastapi import APIRouter

from vetclinic.api.v1 import (
    admin,
    animals,
    auth,
    blacklist,
    clients,
    documents,
    invoices,
    organizations,
    services,
    share,
    users,
)
from vetclinic.models.common import ErrorResponse

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing, invalid or inactive credential"},
        403: {"model": ErrorResponse, "description": "Role lacks the required permission"},
    }
)

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(animals.router, prefix="/animals", tags=["animals"])
router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
router.include_router(blacklist.router, prefix="/blacklist", tags=["blacklist"])
router.include_router(documents.router, prefix="/documents", tags=["documents"])
router.include_router(share.router, prefix="/share", tags=["share"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
