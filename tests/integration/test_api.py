"""
End-to-end tests for the HTTP API.
Requests go through FastAPI into the use cases and an in-memory SQLite database.
"""

from datetime import timedelta
from decimal import Decimal

from invoicing.domain.models.base import utc_now


API = "/api/v1"


def customer_body(email: str = "billing@acme.test", name: str = "Acme Corp") -> dict:
    return {
        "name": name,
        "email": email,
        "phone_number": "+1 555 0100",
        "address": {
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "postal_code": "62701",
            "country": "US",
        },
    }


def invoice_body(customer_id: str) -> dict:
    today = utc_now().date()
    return {
        "customer_id": customer_id,
        "issue_date": today.isoformat(),
        "due_date": (today + timedelta(days=30)).isoformat(),
        "tax_rate": "10",
    }


def payment_body(amount: str) -> dict:
    return {
        "amount": amount,
        "payment_method": "bank_transfer",
        "payment_date": utc_now().date().isoformat(),
    }


def create_sent_invoice(client, headers) -> dict:
    """Create a customer and a sent invoice totalling 1100.00."""
    customer = client.post(f"{API}/customers", json=customer_body(), headers=headers).json()
    invoice = client.post(f"{API}/invoices", json=invoice_body(customer["id"]), headers=headers).json()
    client.post(
        f"{API}/invoices/{invoice['id']}/line-items",
        json={"description": "Consulting", "quantity": "10", "unit_price": "100"},
        headers=headers,
    )
    return client.post(f"{API}/invoices/{invoice['id']}/send", headers=headers).json()


class TestHealthAndAuth:
    """Test cases for public endpoints and authentication."""

    def test_health(self, client):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_token(self, client):
        response = client.get(f"{API}/customers")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client):
        response = client.get(f"{API}/customers", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_unknown_path(self, client, auth_headers):
        response = client.get(f"{API}/nothing-here", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestCustomerEndpoints:
    """Test cases for /customers."""

    def test_customer_crud(self, client, auth_headers):
        created = client.post(f"{API}/customers", json=customer_body(), headers=auth_headers)
        assert created.status_code == 201
        customer_id = created.json()["id"]

        updated = client.patch(
            f"{API}/customers/{customer_id}",
            json={"name": "Acme Holdings"},
            headers=auth_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Acme Holdings"
        assert updated.json()["email"] == "billing@acme.test"

        listed = client.get(f"{API}/customers", headers=auth_headers)
        assert [c["id"] for c in listed.json()] == [customer_id]

        deleted = client.delete(f"{API}/customers/{customer_id}", headers=auth_headers)
        assert deleted.status_code == 204

        missing = client.get(f"{API}/customers/{customer_id}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["code"] == "CUSTOMER_NOT_FOUND"

    def test_duplicate_email_conflict(self, client, auth_headers):
        client.post(f"{API}/customers", json=customer_body(), headers=auth_headers)

        response = client.post(
            f"{API}/customers",
            json=customer_body(email="BILLING@acme.test", name="Copy"),
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_ALREADY_EXISTS"

    def test_validation_error_shape(self, client, auth_headers):
        response = client.post(f"{API}/customers", json=customer_body(email="nope"), headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["code"] == "INVALID_EMAIL_FORMAT"
        assert body["field"] == "email"
        assert body["message"]

    def test_customers_are_private(self, client, auth_headers, other_auth_headers):
        customer_id = client.post(f"{API}/customers", json=customer_body(), headers=auth_headers).json()["id"]

        response = client.get(f"{API}/customers/{customer_id}", headers=other_auth_headers)

        assert response.status_code == 404


class TestInvoiceFlow:
    """Test cases for the invoice lifecycle over HTTP."""

    def test_draft_to_paid(self, client, auth_headers):
        invoice = create_sent_invoice(client, auth_headers)
        invoice_id = invoice["id"]
        assert invoice["status"] == "sent"
        assert invoice["invoice_number"] == "INV-1000"
        assert Decimal(invoice["total"]) == Decimal("1100")

        first = client.post(f"{API}/invoices/{invoice_id}/payments", json=payment_body("400"), headers=auth_headers)
        assert first.status_code == 201
        assert Decimal(first.json()["balance"]) == Decimal("700")
        assert first.json()["invoice_status"] == "sent"

        too_much = client.post(f"{API}/invoices/{invoice_id}/payments", json=payment_body("700.01"), headers=auth_headers)
        assert too_much.status_code == 409
        assert too_much.json()["code"] == "PAYMENT_EXCEEDS_BALANCE"

        last = client.post(f"{API}/invoices/{invoice_id}/payments", json=payment_body("700"), headers=auth_headers)
        assert last.status_code == 201
        assert last.json()["invoice_status"] == "paid"

        fetched = client.get(f"{API}/invoices/{invoice_id}", headers=auth_headers).json()
        assert fetched["status"] == "paid"
        assert Decimal(fetched["amount_paid"]) == Decimal("1100")
        assert Decimal(fetched["balance"]) == Decimal("0")
        assert fetched["paid_date"] is not None

        payments = client.get(f"{API}/invoices/{invoice_id}/payments", headers=auth_headers).json()
        assert [Decimal(p["amount"]) for p in payments] == [Decimal("400"), Decimal("700")]

    def test_line_item_editing(self, client, auth_headers):
        customer = client.post(f"{API}/customers", json=customer_body(), headers=auth_headers).json()
        invoice_id = client.post(
            f"{API}/invoices", json=invoice_body(customer["id"]), headers=auth_headers
        ).json()["id"]

        item = client.post(
            f"{API}/invoices/{invoice_id}/line-items",
            json={"description": "Design", "quantity": "3", "unit_price": "33.3333"},
            headers=auth_headers,
        )
        assert item.status_code == 201
        item_id = item.json()["id"]

        changed = client.patch(
            f"{API}/invoices/{invoice_id}/line-items/{item_id}",
            json={"quantity": "6"},
            headers=auth_headers,
        )
        assert Decimal(changed.json()["amount"]) == Decimal("199.9998")

        removed = client.delete(f"{API}/invoices/{invoice_id}/line-items/{item_id}", headers=auth_headers)
        assert removed.status_code == 204

        empty = client.post(f"{API}/invoices/{invoice_id}/send", headers=auth_headers)
        assert empty.status_code == 400
        assert empty.json()["code"] == "INVOICE_MUST_HAVE_LINE_ITEMS"

    def test_draft_rules(self, client, auth_headers):
        customer = client.post(f"{API}/customers", json=customer_body(), headers=auth_headers).json()
        draft_id = client.post(
            f"{API}/invoices", json=invoice_body(customer["id"]), headers=auth_headers
        ).json()["id"]

        unpaid = client.post(f"{API}/invoices/{draft_id}/payments", json=payment_body("10"), headers=auth_headers)
        assert unpaid.status_code == 400
        assert unpaid.json()["code"] == "CANNOT_PAY_DRAFT_INVOICE"

        deleted = client.delete(f"{API}/invoices/{draft_id}", headers=auth_headers)
        assert deleted.status_code == 204
        assert client.get(f"{API}/invoices/{draft_id}", headers=auth_headers).status_code == 404

    def test_sent_invoice_is_frozen(self, client, auth_headers):
        invoice_id = create_sent_invoice(client, auth_headers)["id"]

        add = client.post(
            f"{API}/invoices/{invoice_id}/line-items",
            json={"description": "Extra", "quantity": "1", "unit_price": "1"},
            headers=auth_headers,
        )
        delete = client.delete(f"{API}/invoices/{invoice_id}", headers=auth_headers)
        notes = client.patch(f"{API}/invoices/{invoice_id}", json={"notes": "Net 30"}, headers=auth_headers)
        pdf = client.post(
            f"{API}/invoices/{invoice_id}/pdf-references",
            json={"key": "pdfs/INV-1000.pdf"},
            headers=auth_headers,
        )

        assert add.json()["code"] == "CANNOT_MODIFY_NON_DRAFT_INVOICE"
        assert delete.json()["code"] == "CANNOT_DELETE_NON_DRAFT_INVOICE"
        assert notes.status_code == 200
        assert notes.json()["notes"] == "Net 30"
        assert pdf.json()["pdf_references"] == ["pdfs/INV-1000.pdf"]

    def test_unknown_customer(self, client, auth_headers):
        response = client.post(f"{API}/invoices", json=invoice_body("missing"), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CUSTOMER_ID"

    def test_invoices_are_private(self, client, auth_headers, other_auth_headers):
        invoice_id = create_sent_invoice(client, auth_headers)["id"]

        fetched = client.get(f"{API}/invoices/{invoice_id}", headers=other_auth_headers)
        paid = client.post(
            f"{API}/invoices/{invoice_id}/payments", json=payment_body("10"), headers=other_auth_headers
        )

        assert fetched.status_code == 404
        assert paid.status_code == 404
        assert client.get(f"{API}/invoices", headers=other_auth_headers).json() == []

    def test_list_filters(self, client, auth_headers):
        invoice_id = create_sent_invoice(client, auth_headers)["id"]

        sent = client.get(f"{API}/invoices", params={"status": "sent"}, headers=auth_headers).json()
        drafts = client.get(f"{API}/invoices", params={"status": "draft"}, headers=auth_headers).json()
        bad = client.get(f"{API}/invoices", params={"status": "void"}, headers=auth_headers)

        assert [inv["id"] for inv in sent] == [invoice_id]
        assert drafts == []
        assert bad.status_code == 422


class TestPaymentEndpoints:
    """Test cases for /payments."""

    def test_get_payment_by_id(self, client, auth_headers, other_auth_headers):
        invoice_id = create_sent_invoice(client, auth_headers)["id"]
        recorded = client.post(
            f"{API}/invoices/{invoice_id}/payments", json=payment_body("250"), headers=auth_headers
        ).json()["payment"]

        fetched = client.get(f"{API}/payments/{recorded['id']}", headers=auth_headers)
        foreign = client.get(f"{API}/payments/{recorded['id']}", headers=other_auth_headers)
        missing = client.get(f"{API}/payments/missing", headers=auth_headers)

        assert fetched.status_code == 200
        assert fetched.json()["invoice_id"] == invoice_id
        assert Decimal(fetched.json()["amount"]) == Decimal("250")
        assert foreign.status_code == 404
        assert foreign.json()["code"] == "PAYMENT_NOT_FOUND"
        assert missing.status_code == 404


class TestDashboardEndpoint:
    """Test cases for /dashboard."""

    def test_dashboard(self, client, auth_headers):
        invoice_id = create_sent_invoice(client, auth_headers)["id"]
        client.post(f"{API}/invoices/{invoice_id}/payments", json=payment_body("100"), headers=auth_headers)

        response = client.get(f"{API}/dashboard", headers=auth_headers)

        assert response.status_code == 200
        stats = response.json()
        assert stats["total_invoices"] == 1
        assert stats["pending_count"] == 1
        assert Decimal(stats["total_outstanding"]) == Decimal("1000")
        assert Decimal(stats["paid_this_month"]) == Decimal("100")
