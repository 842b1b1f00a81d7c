"""
Entity Repositories
Persistence-backed CRUD for clients, animals, organizations, invoices and blacklist entries
"""

import uuid
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import String, cast, delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.exceptions import ConflictException, NotFoundException, ValidationException
from vetclinic.core.logging import get_logger
from vetclinic.db.base import Base, utcnow
from vetclinic.db.models import Animal, BlacklistEntry, Client, Invoice, Organization

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityRepository(Generic[ModelT]):
    """
    Async CRUD over one table

    Subclasses set the model, the resource name used in error messages, and
    the columns stored as JSON (dumped in JSON mode so dates and urls serialize).
    """

    model: Type[ModelT]
    resource: str = "Resource"
    json_fields: Tuple[str, ...] = ()
    filter_fields: Tuple[str, ...] = ()

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        limit: int = 50,
        offset: int = 0,
        **filters: Any,
    ) -> Tuple[List[ModelT], int]:
        """Return one page of entities and the total matching count"""
        conditions = [
            getattr(self.model, name) == value
            for name, value in filters.items()
            if name in self.filter_fields and value is not None
        ]

        total = await self.db.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        result = await self.db.execute(
            select(self.model)
            .where(*conditions)
            .order_by(self.model.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total or 0

    async def get(self, entity_id: uuid.UUID) -> ModelT:
        entity = await self.db.get(self.model, entity_id)
        if not entity:
            raise NotFoundException(self.resource)
        return entity

    async def create(self, payload: BaseModel) -> ModelT:
        data = self._columns(payload)
        await self._check(data)

        entity = self.model(**data)
        self.db.add(entity)
        await self._commit()

        logger.info(f"{self.resource} created: {entity.id}")
        return entity

    async def update(self, entity_id: uuid.UUID, payload: BaseModel) -> ModelT:
        entity = await self.get(entity_id)
        data = self._columns(payload, exclude_unset=True)
        await self._check(data, entity)

        for key, value in data.items():
            setattr(entity, key, value)
        await self._commit()

        logger.info(f"{self.resource} updated: {entity.id}")
        return entity

    async def delete(self, entity_id: uuid.UUID) -> None:
        entity = await self.get(entity_id)
        await self._before_delete(entity)

        await self.db.delete(entity)
        await self._commit()

        logger.info(f"{self.resource} deleted: {entity_id}")

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(self.model)) or 0

    def _columns(self, payload: BaseModel, exclude_unset: bool = False) -> Dict[str, Any]:
        data = payload.model_dump(exclude_unset=exclude_unset)
        json_data = payload.model_dump(mode="json", exclude_unset=exclude_unset)
        for name in self.json_fields:
            if name in data:
                data[name] = json_data[name]
        for name, value in data.items():
            # Enum members are stored by value
            if isinstance(value, Enum):
                data[name] = value.value
        return data

    async def _check(self, data: Dict[str, Any], existing: Optional[ModelT] = None) -> None:
        """Validate references and uniqueness before writing"""

    async def _before_delete(self, entity: ModelT) -> None:
        """Refuse or cascade before the row is removed"""

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictException(
                message=f"{self.resource} conflicts with an existing record",
                details={"error": str(e.orig)},
            )

    async def _exists(self, model, *conditions) -> bool:
        return bool(await self.db.scalar(select(exists().where(*conditions))))

    async def _require_reference(self, model, entity_id: Optional[uuid.UUID], field: str) -> None:
        if entity_id is None:
            return
        if not await self._exists(model, model.id == entity_id):
            raise ValidationException(
                message=f"Referenced {model.__name__.lower()} does not exist",
                details={"field": field, "value": str(entity_id)},
            )


class ClientRepository(EntityRepository[Client]):
    model = Client
    resource = "Client"
    json_fields = ("address",)
    filter_fields = ("is_active", "is_blacklisted")

    async def _check(self, data: Dict[str, Any], existing: Optional[Client] = None) -> None:
        email = data.get("email")
        if not email or (existing is not None and email == existing.email):
            return

        if await self._exists(Client, Client.email == email):
            raise ConflictException(
                message="Email already exists",
                details={"email": email},
            )

    async def _before_delete(self, entity: Client) -> None:
        if await self._exists(Animal, Animal.client_id == entity.id):
            raise ConflictException(
                message="Cannot delete client because they have animals associated with them",
                details={"client_id": str(entity.id)},
            )

        await self.db.execute(
            delete(BlacklistEntry).where(BlacklistEntry.client_id == entity.id)
        )


class OrganizationRepository(EntityRepository[Organization]):
    model = Organization
    resource = "Organization"
    json_fields = ("address", "contact_info", "business_hours")

    async def update_business_hours(
        self, organization_id: uuid.UUID, business_hours: BaseModel
    ) -> Organization:
        organization = await self.get(organization_id)
        organization.business_hours = business_hours.model_dump(mode="json")
        await self._commit()

        logger.info(f"Organization business hours updated: {organization_id}")
        return organization

    async def _before_delete(self, entity: Organization) -> None:
        # Animals outlive their organization
        await self.db.execute(
            update(Animal)
            .where(Animal.organization_id == entity.id)
            .values(organization_id=None)
        )


class AnimalRepository(EntityRepository[Animal]):
    model = Animal
    resource = "Animal"
    json_fields = ("medical_history",)
    filter_fields = ("client_id", "organization_id", "species", "is_active")

    async def list_for_client(self, client_id: uuid.UUID) -> List[Animal]:
        result = await self.db.execute(
            select(Animal).where(Animal.client_id == client_id).order_by(Animal.name)
        )
        return list(result.scalars().all())

    async def _check(self, data: Dict[str, Any], existing: Optional[Animal] = None) -> None:
        if "client_id" in data:
            if data["client_id"] is None:
                raise ValidationException(
                    message="Animal must belong to a client",
                    details={"field": "client_id"},
                )
            await self._require_reference(Client, data["client_id"], "client_id")

        await self._require_reference(Organization, data.get("organization_id"), "organization_id")


class InvoiceRepository(EntityRepository[Invoice]):
    model = Invoice
    resource = "Invoice"
    json_fields = ("animal_sections",)
    filter_fields = ("client_id", "status")

    async def list_for_animal(self, animal_id: uuid.UUID) -> List[Invoice]:
        """Invoices with a section billed to the animal, newest first"""
        animal_key = str(animal_id)
        # The text match narrows the scan; the section check makes it exact
        result = await self.db.execute(
            select(Invoice)
            .where(cast(Invoice.animal_sections, String).contains(animal_key))
            .order_by(Invoice.created_at.desc())
        )
        return [
            invoice
            for invoice in result.scalars().all()
            if any(section.get("animal_id") == animal_key for section in invoice.animal_sections)
        ]

    async def update_status(self, invoice_id: uuid.UUID, status: str) -> Invoice:
        """Change the status; moving to paid stamps the payment date"""
        invoice = await self.get(invoice_id)
        invoice.status = status
        if status == "paid":
            invoice.payment_date = utcnow()
        await self._commit()

        logger.info(f"Invoice {invoice.invoice_number} status -> {status}")
        return invoice

    async def _check(self, data: Dict[str, Any], existing: Optional[Invoice] = None) -> None:
        number = data.get("invoice_number")
        if not number or (existing is not None and number == existing.invoice_number):
            return

        if await self._exists(Invoice, Invoice.invoice_number == number):
            raise ConflictException(
                message="Invoice number already exists",
                details={"invoice_number": number},
            )


class BlacklistRepository(EntityRepository[BlacklistEntry]):
    """Blacklist entries; the client's blacklisted flag mirrors its active entries"""

    model = BlacklistEntry
    resource = "Blacklist entry"
    filter_fields = ("client_id", "is_active")

    async def create(self, payload: BaseModel) -> BlacklistEntry:
        entry = await super().create(payload)
        await self._sync_client(entry.client_id)
        return entry

    async def update(self, entity_id: uuid.UUID, payload: BaseModel) -> BlacklistEntry:
        previous_client_id = (await self.get(entity_id)).client_id
        entry = await super().update(entity_id, payload)
        await self._sync_client(entry.client_id)
        if previous_client_id != entry.client_id:
            await self._sync_client(previous_client_id)
        return entry

    async def delete(self, entity_id: uuid.UUID) -> None:
        client_id = (await self.get(entity_id)).client_id
        await super().delete(entity_id)
        await self._sync_client(client_id)

    async def _check(self, data: Dict[str, Any], existing: Optional[BlacklistEntry] = None) -> None:
        if "client_id" in data:
            if data["client_id"] is None:
                raise ValidationException(
                    message="Blacklist entry must reference a client",
                    details={"field": "client_id"},
                )
            await self._require_reference(Client, data["client_id"], "client_id")

    async def _sync_client(self, client_id: uuid.UUID) -> None:
        result = await self.db.execute(
            select(BlacklistEntry.reason)
            .where(BlacklistEntry.client_id == client_id, BlacklistEntry.is_active.is_(True))
            .order_by(BlacklistEntry.created_at.desc())
        )
        reasons = list(result.scalars().all())

        await self.db.execute(
            update(Client)
            .where(Client.id == client_id)
            .values(
                is_blacklisted=bool(reasons),
                blacklist_reason=reasons[0] if reasons else None,
            )
            .execution_options(synchronize_session="fetch")
        )
        await self._commit()
