"""
SQLAlchemy Database Models
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class User(UUIDMixin, TimestampMixin, Base):
    """User SQLAlchemy model"""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Client(UUIDMixin, TimestampMixin, Base):
    """Clinic client (animal owner)"""

    __tablename__ = "clients"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # NULLs don't collide, so clients without an email are allowed
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_blacklisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    blacklist_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Organization(UUIDMixin, TimestampMixin, Base):
    """Partner organization (shelter, rescue, etc.)"""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    address: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    contact_info: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    business_hours: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class Animal(UUIDMixin, TimestampMixin, Base):
    """Patient animal"""

    __tablename__ = "animals"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    species: Mapped[str] = mapped_column(String(10), nullable=False)
    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    age: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gender: Mapped[str] = mapped_column(String(10), nullable=False, default="unknown")
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    medical_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Invoice(UUIDMixin, TimestampMixin, Base):
    """Invoice with per-animal sections"""

    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    # Billed party: a client or an organization
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    animal_sections: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class BlacklistEntry(UUIDMixin, TimestampMixin, Base):
    """Blacklisted client record"""

    __tablename__ = "blacklist"

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    added_by: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Document(UUIDMixin, TimestampMixin, Base):
    """
    Document metadata, current-version pointer and share grant

    The payloads live in document_revisions; the live payload is the
    revision whose version_number equals current_version.
    """

    __tablename__ = "documents"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_type: Mapped[str] = mapped_column(String(10), nullable=False, default="PDF")
    current_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_editable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_printable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Weak references: no FK constraint, dangling ids are tolerated
    animal_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    # Share grant; only the SHA-256 digest of the token is stored
    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    share_token_digest: Mapped[Optional[str]] = mapped_column(
        String(64), unique=True, nullable=True, index=True
    )
    share_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def revision_count(self) -> int:
        """Number of superseded payloads"""
        return self.current_version - 1


class DocumentRevision(UUIDMixin, Base):
    """One entry of a document's append-only payload sequence"""

    __tablename__ = "document_revisions"
    __table_args__ = (
        UniqueConstraint("document_id", "version_number", name="uq_document_revision_number"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class SystemSetting(UUIDMixin, TimestampMixin, Base):
    """Key/value system setting (e.g. the clinic service catalog)"""

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
