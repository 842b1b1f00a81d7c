"""
Unit Tests for the Permission Catalog
Tests for vetclinic/core/permissions.py
"""

import pytest

from vetclinic.core.permissions import (
    ALL_PERMISSIONS,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    has_permission,
    permissions_for,
)


class TestRoleParsing:
    """Test Role.parse"""

    @pytest.mark.parametrize("value,expected", [
        ("admin", Role.ADMIN),
        ("staff", Role.STAFF),
        ("user", Role.USER),
        (Role.STAFF, Role.STAFF),
    ])
    def test_known_roles(self, value, expected):
        """Test known role names parse to their member"""
        assert Role.parse(value) is expected

    @pytest.mark.parametrize("value", ["superuser", "ADMIN", "", None])
    def test_unknown_roles_parse_to_none(self, value):
        """Test unknown role names parse to None instead of raising"""
        assert Role.parse(value) is None


class TestPermissionCatalog:
    """Test the role to permission mapping"""

    def test_admin_holds_every_permission(self):
        """Test admin is closed over the whole enumeration"""
        assert permissions_for(Role.ADMIN) == ALL_PERMISSIONS
        for permission in Permission:
            assert has_permission("admin", permission)

    def test_staff_and_user_never_manage(self):
        """Test user and system management stay admin-only"""
        for role in (Role.STAFF, Role.USER):
            for permission in (
                Permission.MANAGE_USERS,
                Permission.MANAGE_SYSTEM_SETTINGS,
                Permission.VIEW_SYSTEM_SETTINGS,
            ):
                assert not has_permission(role, permission)

    def test_staff_has_full_crud_on_clinical_records(self):
        """Test staff can create, update and delete clinic records"""
        for resource in ("clients", "animals", "medical_records", "invoices", "blacklist", "documents"):
            for action in ("read", "create", "update", "delete"):
                assert has_permission(Role.STAFF, Permission(f"{action}_{resource}"))

    def test_staff_organizations_are_read_only(self):
        """Test staff can only read organizations"""
        assert has_permission(Role.STAFF, Permission.READ_ORGANIZATIONS)
        assert has_permission(Role.STAFF, Permission.READ_ORGANIZATION_ANIMALS)
        assert not has_permission(Role.STAFF, Permission.DELETE_ORGANIZATIONS)
        assert not has_permission(Role.STAFF, Permission.CREATE_ORGANIZATION_ANIMALS)

    def test_user_is_read_only(self):
        """Test the user role only holds read permissions"""
        granted = permissions_for(Role.USER)

        assert granted
        assert all(p.action == "read" for p in granted)
        assert granted == {p for p in Permission if p.action == "read"}

    def test_unknown_role_fails_closed(self):
        """Test an unrecognized role gets no permissions"""
        assert permissions_for("veterinarian") == frozenset()
        assert permissions_for(None) == frozenset()
        assert not has_permission("veterinarian", Permission.READ_CLIENTS)

    def test_catalog_is_read_only(self):
        """Test the mapping cannot be mutated at runtime"""
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[Role.USER] = ALL_PERMISSIONS

        assert isinstance(permissions_for(Role.STAFF), frozenset)

    def test_permission_parts(self):
        """Test action and resource split"""
        assert Permission.DELETE_MEDICAL_RECORDS.action == "delete"
        assert Permission.DELETE_MEDICAL_RECORDS.resource == "medical_records"
        assert str(Permission.MANAGE_USERS) == "manage_users"
