"""
Permission Catalog
Role to permission mapping, fixed at import time
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Union


class Role(str, Enum):
    """Account roles"""

    ADMIN = "admin"
    STAFF = "staff"
    USER = "user"

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> Optional["Role"]:
        """Return the matching Role, or None for anything unrecognized"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Permission(str, Enum):
    """Capability tags, one per resource family and action"""

    # Clients
    READ_CLIENTS = "read_clients"
    CREATE_CLIENTS = "create_clients"
    UPDATE_CLIENTS = "update_clients"
    DELETE_CLIENTS = "delete_clients"

    # Animals
    READ_ANIMALS = "read_animals"
    CREATE_ANIMALS = "create_animals"
    UPDATE_ANIMALS = "update_animals"
    DELETE_ANIMALS = "delete_animals"

    # Medical records
    READ_MEDICAL_RECORDS = "read_medical_records"
    CREATE_MEDICAL_RECORDS = "create_medical_records"
    UPDATE_MEDICAL_RECORDS = "update_medical_records"
    DELETE_MEDICAL_RECORDS = "delete_medical_records"

    # Invoices
    READ_INVOICES = "read_invoices"
    CREATE_INVOICES = "create_invoices"
    UPDATE_INVOICES = "update_invoices"
    DELETE_INVOICES = "delete_invoices"

    # Organizations
    READ_ORGANIZATIONS = "read_organizations"
    CREATE_ORGANIZATIONS = "create_organizations"
    UPDATE_ORGANIZATIONS = "update_organizations"
    DELETE_ORGANIZATIONS = "delete_organizations"

    # Organization animals
    READ_ORGANIZATION_ANIMALS = "read_organization_animals"
    CREATE_ORGANIZATION_ANIMALS = "create_organization_animals"
    UPDATE_ORGANIZATION_ANIMALS = "update_organization_animals"
    DELETE_ORGANIZATION_ANIMALS = "delete_organization_animals"

    # Blacklist
    READ_BLACKLIST = "read_blacklist"
    CREATE_BLACKLIST = "create_blacklist"
    UPDATE_BLACKLIST = "update_blacklist"
    DELETE_BLACKLIST = "delete_blacklist"

    # Documents
    READ_DOCUMENTS = "read_documents"
    CREATE_DOCUMENTS = "create_documents"
    UPDATE_DOCUMENTS = "update_documents"
    DELETE_DOCUMENTS = "delete_documents"

    # User management
    MANAGE_USERS = "manage_users"

    # System
    VIEW_SYSTEM_SETTINGS = "view_system_settings"
    MANAGE_SYSTEM_SETTINGS = "manage_system_settings"

    @property
    def action(self) -> str:
        return self.value.split("_", 1)[0]

    @property
    def resource(self) -> str:
        return self.value.split("_", 1)[1]

    def __str__(self) -> str:
        return self.value


ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)

_STAFF_PERMISSIONS = frozenset(
    {
        Permission.READ_CLIENTS,
        Permission.CREATE_CLIENTS,
        Permission.UPDATE_CLIENTS,
        Permission.DELETE_CLIENTS,
        Permission.READ_ANIMALS,
        Permission.CREATE_ANIMALS,
        Permission.UPDATE_ANIMALS,
        Permission.DELETE_ANIMALS,
        Permission.READ_MEDICAL_RECORDS,
        Permission.CREATE_MEDICAL_RECORDS,
        Permission.UPDATE_MEDICAL_RECORDS,
        Permission.DELETE_MEDICAL_RECORDS,
        Permission.READ_INVOICES,
        Permission.CREATE_INVOICES,
        Permission.UPDATE_INVOICES,
        Permission.DELETE_INVOICES,
        # Organizations are read-only for staff
        Permission.READ_ORGANIZATIONS,
        Permission.READ_ORGANIZATION_ANIMALS,
        Permission.READ_BLACKLIST,
        Permission.CREATE_BLACKLIST,
        Permission.UPDATE_BLACKLIST,
        Permission.DELETE_BLACKLIST,
        Permission.READ_DOCUMENTS,
        Permission.CREATE_DOCUMENTS,
        Permission.UPDATE_DOCUMENTS,
        Permission.DELETE_DOCUMENTS,
    }
)

_USER_PERMISSIONS = frozenset(
    {
        Permission.READ_CLIENTS,
        Permission.READ_ANIMALS,
        Permission.READ_MEDICAL_RECORDS,
        Permission.READ_INVOICES,
        Permission.READ_ORGANIZATIONS,
        Permission.READ_ORGANIZATION_ANIMALS,
        Permission.READ_BLACKLIST,
        Permission.READ_DOCUMENTS,
    }
)

ROLE_PERMISSIONS: Mapping[Role, FrozenSet[Permission]] = MappingProxyType(
    {
        Role.ADMIN: ALL_PERMISSIONS,
        Role.STAFF: _STAFF_PERMISSIONS,
        Role.USER: _USER_PERMISSIONS,
    }
)


def permissions_for(role: Union[Role, str, None]) -> FrozenSet[Permission]:
    """
    Get the permission set of a role

    Unrecognized roles get the empty set rather than an error.
    """
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(parsed, frozenset())


def has_permission(role: Union[Role, str, None], permission: Permission) -> bool:
    """Check whether a role holds a permission"""
    return permission in permissions_for(role)
