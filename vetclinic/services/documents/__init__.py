"""
Document services: versioned storage and share links
"""

from vetclinic.services.documents.sharing import ShareGrant, ShareLinkIssuer, hash_share_token
from vetclinic.services.documents.store import DocumentStore, validate_payload

__all__ = [
    "DocumentStore",
    "validate_payload",
    "ShareLinkIssuer",
    "ShareGrant",
    "hash_share_token",
]
