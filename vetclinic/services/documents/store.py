"""
Document Store
Document lifecycle, append-only payload revisions and the current-version pointer
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from vetclinic.core.config import settings
from vetclinic.core.exceptions import (
    ConflictException,
    InvalidPayloadException,
    NotFoundException,
    VersionNotFoundException,
)
from vetclinic.core.logging import get_logger
from vetclinic.db.base import utcnow
from vetclinic.db.models import Document, DocumentRevision
from vetclinic.models.document import DocumentMetadata, DocumentMetadataUpdate
from vetclinic.monitoring.metrics import (
    document_replace_conflicts_total,
    document_revisions_total,
)

logger = get_logger(__name__)


def validate_payload(payload: bytes, content_type: Optional[str]) -> None:
    """
    Check an uploaded payload against the configured limits

    Raises:
        InvalidPayloadException: Empty, oversized or unaccepted media type
    """
    if not payload:
        raise InvalidPayloadException(message="File is empty")

    if len(payload) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise InvalidPayloadException(
            message="File too large",
            details={"size_bytes": len(payload), "max_size_mb": settings.MAX_UPLOAD_SIZE_MB},
        )

    if content_type not in settings.ALLOWED_CONTENT_TYPES:
        raise InvalidPayloadException(
            message="Invalid file type",
            details={"content_type": content_type, "expected": settings.ALLOWED_CONTENT_TYPES},
        )


def metadata_values(fields: DocumentMetadataUpdate) -> Dict[str, Any]:
    """Column values of a partial update; required columns are never nulled"""
    return {
        key: value
        for key, value in fields.model_dump(exclude_unset=True).items()
        if value is not None or key not in ("name", "is_editable", "is_printable")
    }


class DocumentStore:
    """Versioned document storage on top of one async session"""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def create(
        self,
        metadata: DocumentMetadata,
        payload: bytes,
        content_type: Optional[str],
        actor: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
    ) -> Document:
        """
        Create a document whose live payload is version 1

        Args:
            metadata: Descriptive fields and weak entity references
            payload: File bytes
            content_type: Media type reported by the upload
            actor: Id of the user performing the upload

        Returns:
            The new document with current_version == 1 and no prior revisions
        """
        validate_payload(payload, content_type)

        now = self.clock()
        document = Document(
            id=uuid.uuid4(),
            name=metadata.name,
            description=metadata.description,
            file_type="PDF",
            current_version=1,
            is_editable=metadata.is_editable,
            is_printable=metadata.is_printable,
            animal_id=metadata.animal_id,
            client_id=metadata.client_id,
            organization_id=metadata.organization_id,
            created_by=actor,
            is_shared=False,
            created_at=now,
            updated_at=now,
        )
        revision = DocumentRevision(
            document_id=document.id,
            version_number=1,
            payload=payload,
            content_type=content_type,
            size_bytes=len(payload),
            created_at=now,
            created_by=actor,
            note=note or "Version 1",
        )

        self.db.add(document)
        await self.db.flush()
        self.db.add(revision)
        await self.db.commit()

        document_revisions_total.labels(operation="create").inc()
        logger.info(f"Document created: {document.id} ({len(payload)} bytes)")

        return document

    async def get(self, document_id: uuid.UUID) -> Document:
        """Get document metadata"""
        result = await self.db.execute(
            select(Document)
            .where(Document.id == document_id)
            .execution_options(populate_existing=True)
        )
        document = result.scalar_one_or_none()

        if not document:
            raise NotFoundException("Document")

        return document

    async def list(
        self,
        organization_id: Optional[uuid.UUID] = None,
        client_id: Optional[uuid.UUID] = None,
        animal_id: Optional[uuid.UUID] = None,
    ) -> List[Document]:
        """List document metadata, newest first; payloads are never loaded"""
        query = select(Document)

        if organization_id:
            query = query.where(Document.organization_id == organization_id)
        if client_id:
            query = query.where(Document.client_id == client_id)
        if animal_id:
            query = query.where(Document.animal_id == animal_id)

        result = await self.db.execute(
            query.order_by(Document.created_at.desc()).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_current(self, document_id: uuid.UUID) -> bytes:
        """Get the live payload"""
        # Pointer and payload are read in one statement
        result = await self.db.execute(
            select(DocumentRevision.payload).join(
                Document,
                and_(
                    Document.id == DocumentRevision.document_id,
                    Document.current_version == DocumentRevision.version_number,
                ),
            ).where(Document.id == document_id)
        )
        payload = result.scalar_one_or_none()

        if payload is None:
            raise NotFoundException("Document")

        return payload

    async def get_revision(self, document_id: uuid.UUID, version_number: int) -> bytes:
        """
        Get the payload of one version

        Version current_version is the live payload, 1..current_version-1 are
        prior revisions.

        Raises:
            NotFoundException: Unknown document
            VersionNotFoundException: version_number outside 1..current_version
        """
        current_version = await self._current_version(document_id)

        if version_number < 1 or version_number > current_version:
            raise VersionNotFoundException(version_number, current_version)

        result = await self.db.execute(
            select(DocumentRevision.payload).where(
                DocumentRevision.document_id == document_id,
                DocumentRevision.version_number == version_number,
            )
        )
        payload = result.scalar_one_or_none()

        if payload is None:
            raise VersionNotFoundException(version_number, current_version)

        return payload

    async def list_revisions(self, document_id: uuid.UUID) -> List[DocumentRevision]:
        """Version history metadata, oldest first"""
        await self._current_version(document_id)

        result = await self.db.execute(
            select(DocumentRevision)
            .options(defer(DocumentRevision.payload, raiseload=True))
            .where(DocumentRevision.document_id == document_id)
            .order_by(DocumentRevision.version_number)
        )
        return list(result.scalars().all())

    async def replace_payload(
        self,
        document_id: uuid.UUID,
        payload: bytes,
        content_type: Optional[str],
        note: Optional[str] = None,
        actor: Optional[uuid.UUID] = None,
        expected_version: Optional[int] = None,
        fields: Optional[DocumentMetadataUpdate] = None,
    ) -> Document:
        """
        Append a new payload and advance current_version by exactly 1

        The pointer move is a conditional update keyed on the version read at
        the start of the attempt. A lost race is retried against the new base
        up to DOCUMENT_REPLACE_MAX_ATTEMPTS times.

        Args:
            expected_version: When given, the caller's view of current_version;
                a mismatch fails immediately instead of retrying
            fields: Metadata written by the same update as the pointer, so it
                lands only together with the new payload

        Raises:
            InvalidPayloadException: Payload rejected
            NotFoundException: Unknown document
            ConflictException: expected_version mismatch or retries exhausted
        """
        validate_payload(payload, content_type)
        values = metadata_values(fields) if fields is not None else {}

        attempts = settings.DOCUMENT_REPLACE_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            base_version = await self._current_version(document_id)

            if expected_version is not None and base_version != expected_version:
                raise ConflictException(
                    message="Document version has changed",
                    details={
                        "document_id": str(document_id),
                        "expected_version": expected_version,
                        "current_version": base_version,
                    },
                )

            if await self._apply_replacement(
                document_id, base_version, payload, content_type, note, actor, values
            ):
                await self.db.commit()
                document_revisions_total.labels(operation="replace").inc()
                logger.info(
                    f"Document {document_id} replaced: version {base_version} -> {base_version + 1}"
                )
                return await self.get(document_id)

            await self.db.rollback()
            document_replace_conflicts_total.inc()
            logger.warning(
                f"Concurrent replace on document {document_id} at version {base_version} "
                f"(attempt {attempt}/{attempts})"
            )

        raise ConflictException(
            message="Document was modified concurrently",
            details={"document_id": str(document_id), "attempts": attempts},
        )

    async def update_metadata(
        self, document_id: uuid.UUID, fields: DocumentMetadataUpdate
    ) -> Document:
        """Update descriptive fields; payloads and the version pointer are untouched"""
        document = await self.get(document_id)

        for key, value in metadata_values(fields).items():
            setattr(document, key, value)

        document.updated_at = self.clock()
        await self.db.commit()

        logger.info(f"Document metadata updated: {document_id}")
        return document

    async def delete(self, document_id: uuid.UUID) -> None:
        """Delete a document together with every revision"""
        await self.db.execute(
            delete(DocumentRevision)
            .where(DocumentRevision.document_id == document_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(
            delete(Document)
            .where(Document.id == document_id)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundException("Document")

        await self.db.commit()
        logger.info(f"Document deleted: {document_id}")

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Document))
        return result.scalar_one()

    async def _current_version(self, document_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(Document.current_version).where(Document.id == document_id)
        )
        current_version = result.scalar_one_or_none()

        if current_version is None:
            raise NotFoundException("Document")

        return current_version

    async def _apply_replacement(
        self,
        document_id: uuid.UUID,
        base_version: int,
        payload: bytes,
        content_type: Optional[str],
        note: Optional[str],
        actor: Optional[uuid.UUID],
        values: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Move the pointer from base_version and append its entry; False if the base moved"""
        new_version = base_version + 1
        now = self.clock()

        result = await self.db.execute(
            update(Document)
            .where(Document.id == document_id, Document.current_version == base_version)
            .values(current_version=new_version, updated_at=now, **(values or {}))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        self.db.add(
            DocumentRevision(
                document_id=document_id,
                version_number=new_version,
                payload=payload,
                content_type=content_type,
                size_bytes=len(payload),
                created_at=now,
                created_by=actor,
                note=note or f"Version {new_version}",
            )
        )
        try:
            await self.db.flush()
        except IntegrityError:
            return False

        return True
