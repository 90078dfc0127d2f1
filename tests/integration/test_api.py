"""Integration tests for API endpoints"""

import pytest
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from retailpro.api.dependencies import get_store
from retailpro.config import settings
from retailpro.domain.models import ProductSuggestion, StockCommand


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/stock/adjust", json={"product_name": "Tata Salt", "quantity": 1, "action": "ADD_STOCK"})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "retailpro_stock_adjustments_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_list_products_flags_low_stock(client: TestClient):
    response = client.get("/v1/products")

    assert response.status_code == 200
    flags = {p["id"]: p["is_low_stock"] for p in response.json()}
    assert flags == {"1": True, "2": False, "3": True}


def test_create_product_and_update_threshold(client: TestClient):
    created = client.post("/v1/products", json={"name": "Kissan Jam", "hsn": "2007", "rate": 150, "stock": 12})
    assert created.status_code == 201
    product_id = created.json()["id"]

    response = client.patch(f"/v1/products/{product_id}/threshold", json={"low_stock_threshold": 12})

    assert response.status_code == 200
    assert response.json()["is_low_stock"] is True
    low_stock_ids = [p["id"] for p in client.get("/v1/products/low-stock").json()]
    assert product_id in low_stock_ids


def test_update_threshold_unknown_product(client: TestClient):
    response = client.patch("/v1/products/missing/threshold", json={"low_stock_threshold": 3})
    assert response.status_code == 404


def test_create_invoice_paid(client: TestClient):
    """Test POST /v1/invoices with a paid catalog item"""
    response = client.post(
        "/v1/invoices",
        json={
            "customer_name": "Priya Nair",
            "customer_phone": "9800011122",
            "items": [{"product_id": "1", "name": "Britannia Biscuits", "hsn": "1905", "quantity": 2, "rate": 20}],
            "is_paid": True,
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["sub_total"] == 40
    assert data["grand_total"] == pytest.approx(47.2)
    assert data["tax_total"] == pytest.approx(7.2)
    assert data["items"][0]["sgst"] == 9
    assert data["due_date"] is None

    transactions = client.get("/v1/transactions").json()
    assert transactions[0]["reference_id"] == data["id"]
    assert transactions[0]["amount"] == data["grand_total"]

    products = {p["id"]: p for p in client.get("/v1/products").json()}
    assert products["1"]["stock"] == 13


def test_create_unpaid_invoice_defaults_due_date(client: TestClient):
    response = client.post(
        "/v1/invoices",
        json={
            "customer_name": "Priya Nair",
            "items": [{"product_id": "2", "name": "Amul Milk 500ml", "quantity": 1, "rate": 27, "sgst": 0, "cgst": 0}],
            "is_paid": False,
        },
    )

    assert response.status_code == 201
    data = response.json()
    created = datetime.fromisoformat(data["date"])
    assert datetime.fromisoformat(data["due_date"]) - created == timedelta(days=7)
    assert data["grand_total"] == 27
    assert data["is_overdue"] is False
    assert client.get("/v1/transactions").json() == []


def test_create_quotation(client: TestClient):
    """Test quotation: untaxed, unpaid, no ledger entry"""
    response = client.post(
        "/v1/invoices",
        json={
            "customer_name": "Priya Nair",
            "items": [{"name": "Tata Salt 1kg", "quantity": 4, "rate": 25}],
            "is_paid": True,
            "is_quotation": True,
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["is_paid"] is False
    assert data["grand_total"] == 100
    assert data["tax_total"] == 0
    assert data["due_date"] is not None
    assert client.get("/v1/transactions").json() == []


@pytest.mark.parametrize(
    "payload",
    [
        {"customer_name": "", "items": [{"name": "Salt", "quantity": 1, "rate": 25}]},
        {"customer_name": "Priya Nair", "items": []},
    ],
)
def test_create_invoice_rejects_missing_customer_or_items(client: TestClient, payload):
    response = client.post("/v1/invoices", json=payload)

    assert response.status_code == 422
    assert len(client.get("/v1/invoices").json()) == 1  # seed only


def test_pending_invoices_and_pay(client: TestClient):
    pending = client.get("/v1/invoices/pending").json()
    assert pending["total_outstanding"] == 590
    assert pending["invoices"][0]["is_overdue"] is True

    response = client.post("/v1/invoices/INV-1001/pay")

    assert response.status_code == 200
    assert response.json()["is_paid"] is True
    assert client.get("/v1/invoices/pending").json()["invoices"] == []
    assert client.get("/v1/transactions").json() == []


def test_pay_unknown_invoice(client: TestClient):
    assert client.post("/v1/invoices/INV-404/pay").status_code == 404


def test_whatsapp_reminder_hands_off_message(client: TestClient, messaging: AsyncMock):
    """Test WHATSAPP reminder is recorded and handed to the messaging channel"""
    response = client.post("/v1/invoices/INV-1001/reminders", json={"method": "WHATSAPP"})

    assert response.status_code == 201
    data = response.json()
    message = "Hi Rahul Sharma, a friendly reminder that your payment of ₹590.00 is due."
    assert data["reminder"]["message"] == message
    assert data["delivery_url"].startswith("https://wa.me/9876543210?text=")
    messaging.send_message.assert_called_once_with("9876543210", message)


def test_in_app_reminder_not_delivered(client: TestClient, messaging: AsyncMock):
    response = client.post(
        "/v1/invoices/INV-1001/reminders", json={"method": "IN_APP", "message": "Please clear dues"}
    )

    assert response.status_code == 201
    assert response.json()["delivery_url"] is None
    messaging.send_message.assert_not_called()

    invoices = client.get("/v1/invoices").json()
    assert invoices[0]["reminders"][0]["message"] == "Please clear dues"


def test_reminder_unknown_invoice(client: TestClient):
    response = client.post("/v1/invoices/INV-404/reminders", json={"method": "IN_APP"})
    assert response.status_code == 404


def test_stock_adjust_endpoint(client: TestClient):
    response = client.post(
        "/v1/stock/adjust", json={"product_name": "amul milk", "quantity": 10, "action": "REDUCE_STOCK"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["matched_product_ids"] == ["2"]
    assert data["message"] == "Successfully reduced 10 units for amul milk"


def test_stock_adjust_rejects_unknown_action(client: TestClient):
    response = client.post(
        "/v1/stock/adjust", json={"product_name": "amul milk", "quantity": 10, "action": "SELL"}
    )
    assert response.status_code == 422


@patch("retailpro.domain.assistant.NullAssistant.parse_command")
def test_stock_parse_returns_command_for_confirmation(mock_parse: AsyncMock, client: TestClient):
    """Test parsed command is returned but not applied"""
    mock_parse.return_value = StockCommand(action="REDUCE_STOCK", product_name="Tata Salt", quantity=2)

    response = client.post("/v1/stock/parse", json={"transcript": "reduce 2 tata salt"})

    assert response.status_code == 200
    assert response.json()["command"] == {
        "action": "REDUCE_STOCK",
        "product_name": "Tata Salt",
        "quantity": 2,
        "transcript": "reduce 2 tata salt",
    }
    products = {p["id"]: p for p in client.get("/v1/products").json()}
    assert products["3"]["stock"] == 8


@patch("retailpro.domain.assistant.NullAssistant.parse_command")
def test_stock_parse_ignores_unknown_action(mock_parse: AsyncMock, client: TestClient):
    mock_parse.return_value = StockCommand(action="CHECK_PRICE", product_name="Tata Salt", quantity=2)

    response = client.post("/v1/stock/parse", json={"transcript": "how much is salt"})

    assert response.json()["command"] is None


@patch("retailpro.domain.assistant.NullAssistant.suggest")
def test_suggestions_endpoint(mock_suggest: AsyncMock, client: TestClient):
    mock_suggest.return_value = [ProductSuggestion(name="Digestive Biscuits", hsn="1905", estimated_rate=40)]

    response = client.get("/v1/suggestions", params={"q": "dige"})

    assert response.status_code == 200
    assert response.json()["suggestions"][0]["estimated_rate"] == 40
    mock_suggest.assert_called_once_with("dige")


@patch("retailpro.domain.assistant.NullAssistant.suggest")
def test_suggestions_short_query_skips_assistant(mock_suggest: AsyncMock, client: TestClient):
    response = client.get("/v1/suggestions", params={"q": "di"})

    assert response.json()["suggestions"] == []
    mock_suggest.assert_not_called()


def test_dashboard_endpoint(client: TestClient):
    response = client.get("/v1/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["total_sales"] == 590
    assert data["pending_collection"] == 590
    assert data["low_stock_count"] == 2


def test_create_invoice_line_from_catalog_product(client: TestClient):
    """Test a line naming only a catalog product takes its name, HSN and rate"""
    response = client.post(
        "/v1/invoices",
        json={"customer_name": "Walk-in", "items": [{"product_id": "2", "quantity": 2}]},
    )

    assert response.status_code == 201
    item = response.json()["items"][0]
    assert (item["name"], item["hsn"], item["rate"]) == ("Amul Milk 500ml", "0401", 27)
    assert item["total"] == pytest.approx(63.72)


def test_create_invoice_line_from_suggestion(client: TestClient):
    """Test a suggestion becomes an ad-hoc line priced at its estimated rate"""
    response = client.post(
        "/v1/invoices",
        json={
            "customer_name": "Walk-in",
            "items": [{"suggestion": {"name": "Parle-G", "hsn": "1905", "estimated_rate": 10}, "quantity": 3}],
        },
    )

    assert response.status_code == 201
    item = response.json()["items"][0]
    assert item["product_id"] == "new"
    assert (item["name"], item["rate"], item["quantity"]) == ("Parle-G", 10, 3)
    assert item["total"] == pytest.approx(35.4)


def test_create_invoice_uses_configured_gst_split(client: TestClient):
    with patch.object(settings, "default_sgst", 2.5), patch.object(settings, "default_cgst", 2.5):
        response = client.post(
            "/v1/invoices",
            json={"customer_name": "Walk-in", "items": [{"product_id": "3", "quantity": 4}]},
        )

    item = response.json()["items"][0]
    assert (item["sgst"], item["cgst"]) == (2.5, 2.5)
    assert item["total"] == pytest.approx(105)


def test_create_invoice_rejects_ad_hoc_line_without_rate(client: TestClient):
    response = client.post(
        "/v1/invoices",
        json={"customer_name": "Walk-in", "items": [{"name": "Loose Sugar", "quantity": 1}]},
    )

    assert response.status_code == 422
    assert len(client.get("/v1/invoices").json()) == 1


def test_invoice_reports_last_reminded(client: TestClient, clock):
    assert client.get("/v1/invoices").json()[0]["last_reminded"] is None

    client.post("/v1/invoices/INV-1001/reminders", json={"method": "IN_APP"})

    invoice = client.get("/v1/invoices/pending").json()["invoices"][0]
    assert datetime.fromisoformat(invoice["last_reminded"]) == clock.now


@pytest.mark.parametrize("quantity", [0, -500])
def test_stock_adjust_rejects_non_positive_quantity(client: TestClient, quantity):
    response = client.post(
        "/v1/stock/adjust", json={"product_name": "amul milk", "quantity": quantity, "action": "ADD_STOCK"}
    )

    assert response.status_code == 422
    products = {p["id"]: p for p in client.get("/v1/products").json()}
    assert products["2"]["stock"] == 120


@patch("retailpro.api.dependencies.init_db")
@patch("retailpro.api.dependencies.ShopStore.open")
def test_get_store_opens_one_store_under_concurrent_first_requests(mock_open, mock_init_db):
    """Test the lazily opened store is shared by every request"""

    def slow_open(session_factory):
        time.sleep(0.05)
        return object()

    mock_open.side_effect = slow_open
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    with ThreadPoolExecutor(max_workers=8) as pool:
        stores = list(pool.map(lambda _: get_store(request), range(8)))

    assert mock_open.call_count == 1
    assert all(s is stores[0] for s in stores)
