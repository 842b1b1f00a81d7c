"""
System Settings
Key/value settings rows; currently the clinic service catalog
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.logging import get_logger
from vetclinic.db.models import SystemSetting
from vetclinic.models.settings import ServiceCatalog

logger = get_logger(__name__)

SERVICE_CATALOG_KEY = "clinic_services"


class SettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_value(self, key: str) -> Optional[Any]:
        result = await self.db.execute(select(SystemSetting.value).where(SystemSetting.key == key))
        return result.scalar_one_or_none()

    async def set_value(self, key: str, value: Any) -> None:
        result = await self.db.execute(select(SystemSetting).where(SystemSetting.key == key))
        setting = result.scalar_one_or_none()

        if setting is None:
            self.db.add(SystemSetting(key=key, value=value))
        else:
            setting.value = value

        await self.db.commit()
        logger.info(f"System setting updated: {key}")

    async def get_service_catalog(self) -> ServiceCatalog:
        value = await self.get_value(SERVICE_CATALOG_KEY)
        if value is None:
            return ServiceCatalog()
        return ServiceCatalog.model_validate(value)

    async def set_service_catalog(self, catalog: ServiceCatalog) -> ServiceCatalog:
        await self.set_value(SERVICE_CATALOG_KEY, catalog.model_dump(mode="json"))
        return catalog
