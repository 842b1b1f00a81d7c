"""
Integration Tests for System Endpoints
Health, service catalog, statistics and metrics
"""

from types import SimpleNamespace

import pytest
from starlette.requests import Request

from vetclinic.core.config import settings
from vetclinic.main import route_template
from vetclinic.monitoring import get_metrics

CATALOG = {
    "categories": [
        {
            "name": "Vaccinations",
            "services": [{"name": "Rabies", "price": 35.0}, {"name": "Distemper", "price": 30.0}],
        }
    ]
}


class TestHealth:
    """Test root and health endpoints"""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test the health check reports the database"""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["services"]["database"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self, client):
        """Test the root endpoint names the service"""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["version"] == "1.0.0"


class TestServiceCatalog:
    """Test /api/v1/services"""

    @pytest.mark.asyncio
    async def test_empty_catalog(self, client, user_headers):
        """Test an unset catalog reads as empty"""
        response = await client.get("/api/v1/services", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"categories": []}

    @pytest.mark.asyncio
    async def test_admin_updates_catalog(self, client, admin_headers, user_headers):
        """Test admins replace the catalog and everyone reads it"""
        response = await client.put("/api/v1/services", json=CATALOG, headers=admin_headers)
        assert response.status_code == 200

        response = await client.get("/api/v1/services", headers=user_headers)
        assert response.json() == CATALOG

    @pytest.mark.asyncio
    async def test_staff_cannot_update_catalog(self, client, staff_headers):
        """Test catalog changes require manage_system_settings"""
        response = await client.put("/api/v1/services", json=CATALOG, headers=staff_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_catalog_requires_login(self, client):
        """Test the catalog is not public"""
        response = await client.get("/api/v1/services")

        assert response.status_code == 401


class TestAdmin:
    """Test /api/v1/admin"""

    @pytest.mark.asyncio
    async def test_stats(self, client, admin_headers, staff_user, sample_pdf, staff_headers):
        """Test statistics count records and document storage"""
        await client.post(
            "/api/v1/documents",
            files={"file": ("a.pdf", sample_pdf, "application/pdf")},
            headers=staff_headers,
        )

        response = await client.get("/api/v1/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["clients"] == 0
        assert data["documents"] == {
            "total": 1,
            "shared": 0,
            "versions": 1,
            "storage_bytes": len(sample_pdf),
        }
        assert data["users"]["by_role"] == {"admin": 1, "staff": 1}

    @pytest.mark.asyncio
    async def test_stats_forbidden_for_staff(self, client, staff_headers):
        """Test statistics require view_system_settings"""
        response = await client.get("/api/v1/admin/stats", headers=staff_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_metrics_use_route_templates(self, client, admin_headers):
        """Test request metrics are labelled by route, never by token"""
        await client.get("/api/v1/share/" + "cd" * 20)

        response = await client.get("/api/v1/admin/metrics", headers=admin_headers)

        assert response.status_code == 200
        body = response.text
        assert "http_requests_total" in body
        assert 'endpoint="/api/v1/share/{token}"' in body
        assert "cd" * 20 not in body


class IncludedRouter:
    """Route entry without a path of its own, as included routers appear"""

    def matches(self, scope):
        raise AssertionError("routers without a path are never matched directly")


class TestRouteTemplate:
    """Test the endpoint label of request metrics"""

    @staticmethod
    def make_request(routes, **scope):
        return Request({
            "type": "http",
            "method": "GET",
            "path": "/api/v1/documents/123",
            "headers": [],
            "app": SimpleNamespace(routes=routes),
            **scope,
        })

    def test_matched_route_in_scope(self):
        """Test the template of the route routing picked is used"""
        route = SimpleNamespace(path_format="/api/v1/documents/{document_id}")

        assert route_template(self.make_request([IncludedRouter()], route=route)) == (
            "/api/v1/documents/{document_id}"
        )

    def test_routes_without_path_are_skipped(self):
        """Test unmatched requests fall back without touching pathless routes"""
        assert route_template(self.make_request([IncludedRouter()])) == "unmatched"

    @pytest.mark.asyncio
    async def test_requests_succeed_with_metrics_enabled(self, client, staff_headers, monkeypatch):
        """Test the metrics middleware labels a parametrized route by its template"""
        monkeypatch.setattr(settings, "ENABLE_METRICS", True)

        response = await client.get(
            "/api/v1/documents/00000000-0000-0000-0000-000000000000", headers=staff_headers
        )
        assert response.status_code == 404

        body = get_metrics().decode()
        assert 'endpoint="/api/v1/documents/{document_id}"' in body
        assert "00000000-0000-0000-0000-000000000000" not in body
