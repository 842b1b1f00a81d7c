"""
System Settings Pydantic Models
Clinic service catalog schemas
"""

from typing import List

from pydantic import BaseModel, Field


class ServiceItem(BaseModel):
    """A billable clinic service"""
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)


class ServiceCategory(BaseModel):
    """Named group of services"""
    name: str = Field(..., min_length=1, max_length=100)
    services: List[ServiceItem] = Field(default_factory=list)


class ServiceCatalog(BaseModel):
    """The clinic's full service catalog"""
    categories: List[ServiceCategory] = Field(default_factory=list)
