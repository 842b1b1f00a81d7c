"""
Integration Tests for Invoice Endpoints
"""

import uuid

import pytest
import pytest_asyncio


def invoice_payload(client_id, **overrides):
    payload = {
        "invoice_number": "INV-2024-001",
        "client_id": client_id,
        "date": "2024-03-01T10:00:00Z",
        "animal_sections": [
            {
                "animal_id": str(uuid.uuid4()),
                "items": [
                    {"description": "Rabies vaccine", "quantity": 1, "unit_price": 35.0, "total": 35.0},
                    {"description": "Exam", "quantity": 1, "unit_price": 50.004, "total": 50.004},
                ],
                "subtotal": 85.0,
            }
        ],
        "subtotal": 85.0,
        "total": 85.0,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def client_id(client, staff_headers):
    response = await client.post(
        "/api/v1/clients",
        json={"first_name": "Lee", "last_name": "Park", "phone": "555-0110"},
        headers=staff_headers,
    )
    return response.json()["id"]


@pytest_asyncio.fixture
async def invoice(client, staff_headers, client_id):
    response = await client.post("/api/v1/invoices", json=invoice_payload(client_id), headers=staff_headers)
    assert response.status_code == 201
    return response.json()


class TestInvoices:
    """Test /api/v1/invoices"""

    @pytest.mark.asyncio
    async def test_create_invoice(self, invoice):
        """Test a new invoice defaults to draft with money rounded to cents"""
        assert invoice["status"] == "draft"
        assert invoice["payment_date"] is None
        assert invoice["animal_sections"][0]["items"][1]["unit_price"] == 50.0

    @pytest.mark.asyncio
    async def test_duplicate_number(self, client, staff_headers, client_id, invoice):
        """Test invoice numbers are unique"""
        response = await client.post("/api/v1/invoices", json=invoice_payload(client_id), headers=staff_headers)

        assert response.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"invoice_number": "inv-1"}, {"animal_sections": []}, {"total": -1}],
    )
    async def test_invalid_invoice(self, client, staff_headers, client_id, overrides):
        """Test malformed invoices are rejected"""
        response = await client.post(
            "/api/v1/invoices", json=invoice_payload(client_id, **overrides), headers=staff_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_mark_paid(self, client, staff_headers, invoice):
        """Test moving to paid records the payment date"""
        response = await client.patch(
            f"/api/v1/invoices/{invoice['id']}/status", json={"status": "paid"}, headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "paid"
        assert response.json()["payment_date"] is not None

    @pytest.mark.asyncio
    async def test_filter_by_status(self, client, user_headers, invoice):
        """Test listing by status"""
        drafts = await client.get("/api/v1/invoices?status=draft", headers=user_headers)
        paid = await client.get("/api/v1/invoices?status=paid", headers=user_headers)

        assert drafts.json()["total"] == 1
        assert paid.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_user_role_cannot_delete(self, client, user_headers, staff_headers, invoice):
        """Test only roles with delete_invoices can delete"""
        denied = await client.delete(f"/api/v1/invoices/{invoice['id']}", headers=user_headers)
        allowed = await client.delete(f"/api/v1/invoices/{invoice['id']}", headers=staff_headers)

        assert denied.status_code == 403
        assert allowed.status_code == 200

    @pytest.mark.asyncio
    async def test_invoices_for_animal(self, client, staff_headers, user_headers, client_id):
        """Test invoices are found through any of their animal sections"""
        rex, luna = str(uuid.uuid4()), str(uuid.uuid4())
        item = {"description": "Exam", "quantity": 1, "unit_price": 50.0, "total": 50.0}

        def section(animal_id):
            return {"animal_id": animal_id, "items": [item], "subtotal": 50.0}

        both = invoice_payload(
            client_id, invoice_number="INV-2", animal_sections=[section(luna), section(rex)], total=100.0
        )
        only_luna = invoice_payload(client_id, invoice_number="INV-3", animal_sections=[section(luna)])
        for payload in (both, only_luna):
            response = await client.post("/api/v1/invoices", json=payload, headers=staff_headers)
            assert response.status_code == 201

        rex_invoices = await client.get(f"/api/v1/invoices/animal/{rex}", headers=user_headers)
        luna_invoices = await client.get(f"/api/v1/invoices/animal/{luna}", headers=user_headers)
        nobody = await client.get(f"/api/v1/invoices/animal/{uuid.uuid4()}", headers=user_headers)

        assert rex_invoices.status_code == 200
        assert [i["invoice_number"] for i in rex_invoices.json()] == ["INV-2"]
        assert sorted(i["invoice_number"] for i in luna_invoices.json()) == ["INV-2", "INV-3"]
        assert nobody.json() == []
