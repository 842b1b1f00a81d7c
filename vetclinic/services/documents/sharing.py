"""
Share-Link Issuer
Anonymous, expiring access tokens scoped to one document
"""

import hashlib
import hmac
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.config import settings
from vetclinic.core.exceptions import (
    ConflictException,
    InvalidTTLException,
    NotFoundException,
)
from vetclinic.core.logging import get_logger
from vetclinic.db.base import as_utc, utcnow
from vetclinic.db.models import Document
from vetclinic.monitoring.metrics import share_link_resolutions_total
from vetclinic.services.documents.store import DocumentStore

logger = get_logger(__name__)

TOKEN_BYTES = 20


@dataclass(frozen=True)
class ShareGrant:
    """A freshly issued share token; the plaintext token exists only here"""

    document_id: uuid.UUID
    token: str
    expires_at: datetime


def hash_share_token(token: str) -> str:
    """SHA-256 hex digest under which a token is stored"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class ShareLinkIssuer:
    """Issue, resolve and revoke share grants"""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def issue(
        self,
        document_id: uuid.UUID,
        ttl: Optional[timedelta] = None,
        actor: Optional[uuid.UUID] = None,
    ) -> ShareGrant:
        """
        Mint a token for the document, replacing any previous grant

        The grant is written only if the stored digest is still the one read
        here, so of two concurrent issuances exactly one token survives.

        Raises:
            InvalidTTLException: ttl is zero, negative or above SHARE_LINK_MAX_EXPIRY_DAYS
            NotFoundException: Unknown document
            ConflictException: Another issuance won the race
        """
        if ttl is None:
            ttl = timedelta(days=settings.SHARE_LINK_DEFAULT_EXPIRY_DAYS)

        if ttl <= timedelta(0):
            raise InvalidTTLException(details={"ttl_seconds": ttl.total_seconds()})

        if ttl > timedelta(days=settings.SHARE_LINK_MAX_EXPIRY_DAYS):
            raise InvalidTTLException(
                message="Share link lifetime is too long",
                details={
                    "ttl_seconds": ttl.total_seconds(),
                    "max_days": settings.SHARE_LINK_MAX_EXPIRY_DAYS,
                },
            )

        result = await self.db.execute(
            select(Document.share_token_digest).where(Document.id == document_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundException("Document")

        previous_digest = row[0]
        if previous_digest is None:
            unchanged = Document.share_token_digest.is_(None)
        else:
            unchanged = Document.share_token_digest == previous_digest

        token = secrets.token_hex(TOKEN_BYTES)
        now = self.clock()
        try:
            expires_at = now + ttl
        except OverflowError:
            raise InvalidTTLException(
                message="Share link lifetime is out of range",
                details={"ttl_seconds": ttl.total_seconds()},
            )

        result = await self.db.execute(
            update(Document)
            .where(Document.id == document_id, unchanged)
            .values(
                is_shared=True,
                share_token_digest=hash_share_token(token),
                share_expires_at=expires_at,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            await self.db.rollback()
            raise ConflictException(
                message="Share link was issued concurrently",
                details={"document_id": str(document_id)},
            )

        await self.db.commit()
        logger.info(f"Share link issued for document {document_id} by {actor}, expires {expires_at.isoformat()}")

        return ShareGrant(document_id=document_id, token=token, expires_at=expires_at)

    async def resolve(self, token: str) -> bytes:
        """
        Return the live payload of the document the token grants access to

        Never consults the access guard. Unknown, revoked and expired tokens
        are indistinguishable to the caller.

        Raises:
            NotFoundException: The token grants nothing
        """
        if not token:
            share_link_resolutions_total.labels(outcome="unknown").inc()
            raise NotFoundException("Shared document")

        digest = hash_share_token(token)
        result = await self.db.execute(
            select(
                Document.id,
                Document.share_token_digest,
                Document.is_shared,
                Document.share_expires_at,
            ).where(Document.share_token_digest == digest)
        )
        row = result.one_or_none()

        if row is None or not hmac.compare_digest(row.share_token_digest, digest):
            share_link_resolutions_total.labels(outcome="unknown").inc()
            raise NotFoundException("Shared document")

        expires_at = as_utc(row.share_expires_at)
        if not row.is_shared or expires_at is None or self.clock() >= expires_at:
            share_link_resolutions_total.labels(outcome="expired").inc()
            raise NotFoundException("Shared document")

        try:
            payload = await DocumentStore(self.db, clock=self.clock).get_current(row.id)
        except NotFoundException:
            share_link_resolutions_total.labels(outcome="unknown").inc()
            raise NotFoundException("Shared document")

        share_link_resolutions_total.labels(outcome="granted").inc()
        return payload

    async def revoke(self, document_id: uuid.UUID) -> None:
        """Clear the document's share grant"""
        result = await self.db.execute(
            update(Document)
            .where(Document.id == document_id)
            .values(
                is_shared=False,
                share_token_digest=None,
                share_expires_at=None,
                updated_at=self.clock(),
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundException("Document")

        await self.db.commit()
        logger.info(f"Share link revoked for document {document_id}")
