"""
Integration Tests for Organization Endpoints
"""

import pytest
import pytest_asyncio

from tests.conftest import auth_headers

ORGANIZATION = {
    "name": "Happy Tails Rescue",
    "tax_id": "12-3456789",
    "address": {"street": "5 Shelter Rd", "city": "Springfield", "zip_code": "12345-6789"},
    "contact_info": {"phone": "555-0100", "email": "info@happytails.example.com"},
}


@pytest_asyncio.fixture
async def organization(client, admin_headers):
    response = await client.post("/api/v1/organizations", json=ORGANIZATION, headers=admin_headers)
    assert response.status_code == 201
    return response.json()


class TestOrganizationAccess:
    """Test role gating on organizations"""

    @pytest.mark.asyncio
    async def test_staff_can_read(self, client, staff_headers, organization):
        """Test staff can list and view organizations"""
        listing = await client.get("/api/v1/organizations", headers=staff_headers)
        single = await client.get(f"/api/v1/organizations/{organization['id']}", headers=staff_headers)

        assert listing.status_code == 200
        assert listing.json()["total"] == 1
        assert single.status_code == 200
        assert single.json()["name"] == "Happy Tails Rescue"

    @pytest.mark.asyncio
    async def test_staff_cannot_delete(self, client, staff_headers, organization):
        """Test staff deletes are denied with the missing permission"""
        response = await client.delete(f"/api/v1/organizations/{organization['id']}", headers=staff_headers)

        assert response.status_code == 403
        assert response.json()["error"]["details"] == {
            "required_permissions": ["delete_organizations"],
            "role": "staff",
        }

    @pytest.mark.asyncio
    async def test_staff_cannot_create(self, client, staff_headers):
        """Test staff cannot create organizations"""
        response = await client.post("/api/v1/organizations", json=ORGANIZATION, headers=staff_headers)

        assert response.status_code == 403


class TestOrganizationWrites:
    """Test admin writes"""

    @pytest.mark.asyncio
    async def test_invalid_zip_code(self, client, admin_headers):
        """Test malformed zip codes are rejected"""
        payload = dict(ORGANIZATION, address={"zip_code": "ABCDE"})

        response = await client.post("/api/v1/organizations", json=payload, headers=admin_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_business_hours(self, client, admin_headers, organization):
        """Test weekly hours can be replaced"""
        response = await client.patch(
            f"/api/v1/organizations/{organization['id']}/business-hours",
            json={"monday": {"open": "08:00", "close": "17:30"}, "sunday": None},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["business_hours"]["monday"] == {"open": "08:00", "close": "17:30"}

    @pytest.mark.asyncio
    async def test_invalid_business_hours(self, client, admin_headers, organization):
        """Test malformed times are rejected"""
        response = await client.patch(
            f"/api/v1/organizations/{organization['id']}/business-hours",
            json={"monday": {"open": "25:00", "close": "17:30"}},
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_detaches_animals(self, client, admin_headers, organization):
        """Test deleting an organization keeps its animals"""
        owner = await client.post(
            "/api/v1/clients",
            json={"first_name": "Sam", "last_name": "Green", "phone": "555-0101"},
            headers=admin_headers,
        )
        animal = await client.post(
            "/api/v1/animals",
            json={
                "name": "Biscuit",
                "species": "DOG",
                "client_id": owner.json()["id"],
                "organization_id": organization["id"],
            },
            headers=admin_headers,
        )
        assert animal.status_code == 201

        placed = await client.get(
            f"/api/v1/organizations/{organization['id']}/animals", headers=admin_headers
        )
        assert [a["name"] for a in placed.json()] == ["Biscuit"]

        response = await client.delete(f"/api/v1/organizations/{organization['id']}", headers=admin_headers)
        assert response.status_code == 200

        kept = await client.get(f"/api/v1/animals/{animal.json()['id']}", headers=admin_headers)
        assert kept.status_code == 200
        assert kept.json()["organization_id"] is None

    @pytest.mark.asyncio
    async def test_organization_animals_any_permission(self, client, user_headers, make_user, organization):
        """Test either animal read permission admits and an unrecognized role is denied both"""
        allowed = await client.get(f"/api/v1/organizations/{organization['id']}/animals", headers=user_headers)
        assert allowed.status_code == 200
        assert allowed.json() == []

        stranger = await make_user("veterinarian")
        denied = await client.get(
            f"/api/v1/organizations/{organization['id']}/animals", headers=auth_headers(stranger)
        )
        assert denied.status_code == 403
        assert denied.json()["error"]["details"] == {
            "required_permissions": ["read_organization_animals", "read_animals"],
            "role": None,
        }
