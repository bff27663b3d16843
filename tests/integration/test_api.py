"""Integration tests for API endpoints"""

import pytest
from datetime import date
from fastapi.testclient import TestClient

from maxcontrol.api.v1 import quotes as quotes_api
from maxcontrol.config import settings


@pytest.fixture
def quote_payload():
    """Cart with one unit product and one glass panel priced per m²"""
    return {
        "items": [
            {"product_id": "p1", "product_name": "Puxador Inox", "unit_price": 10.0, "quantity": 2},
            {
                "product_id": "p2",
                "product_name": "Vidro Temperado 8mm",
                "unit_price": 150.0,
                "pricing_model": "square_meter",
                "width": 1.5,
                "height": 1.0,
                "item_count_for_area_calc": 2,
            },
        ],
        "discount": {"type": "percentage", "value": 10},
        "payment_method": "Cartão de Crédito 3x",
        "credit_applied": 0,
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "maxcontrol_quote_priced_total" in response.text


def test_request_id_header_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_price_quote(client: TestClient, quote_payload):
    """Test POST /v1/quotes/price recomputes area, totals and installments"""
    response = client.post("/v1/quotes/price", json=quote_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["items"][1]["quantity"] == pytest.approx(3.0)
    assert data["items"][1]["total_price"] == pytest.approx(450.0)
    assert data["totals"]["subtotal"] == pytest.approx(470.0)
    assert data["totals"]["discount_amount"] == pytest.approx(47.0)
    assert data["totals"]["total_cash"] == pytest.approx(423.0)
    assert data["totals"]["total_card"] == pytest.approx(486.45)
    assert data["payment_method"] == "Cartão de Crédito 3x"
    assert data["net_amount_due"] == pytest.approx(486.45)
    assert data["installment_text_before_credit"] == "(Em 3x de R$ 162,15)"
    assert data["is_overpaid"] is False


def test_price_quote_structured_payment_method(client: TestClient, quote_payload):
    quote_payload["payment_method"] = {"kind": "pix"}
    quote_payload["credit_applied"] = 23.0

    response = client.post("/v1/quotes/price", json=quote_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["payment_method"] == "PIX"
    assert data["net_amount_due"] == pytest.approx(400.0)
    assert data["net_amount_due_display"] == "R$ 400,00"
    assert data["installment_text_after_credit"] == ""


def test_price_quote_overpaid(client: TestClient, quote_payload):
    """Test credit above the total is reported, not clamped"""
    quote_payload["payment_method"] = "Dinheiro"
    quote_payload["credit_applied"] = 500.0

    data = client.post("/v1/quotes/price", json=quote_payload).json()

    assert data["net_amount_due"] == pytest.approx(-77.0)
    assert data["is_overpaid"] is True
    assert data["net_amount_due_display"] == "-R$ 77,00"


def test_price_quote_invalid_dimensions(client: TestClient, quote_payload):
    quote_payload["items"][1]["width"] = 0

    response = client.post("/v1/quotes/price", json=quote_payload)
    assert response.status_code == 422


def test_create_and_get_quote(client: TestClient, quote_payload):
    """Test POST /v1/quotes then GET /v1/quotes/{quote_id}"""
    quote_payload["client_name"] = "Maria Souza"

    create_response = client.post("/v1/quotes", json=quote_payload)
    assert create_response.status_code == 201
    created = create_response.json()
    assert created["quote_number"].startswith("ORC-")
    assert len(created["items"]) == 2

    response = client.get(f"/v1/quotes/{created['quote_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["client_name"] == "Maria Souza"
    assert data["payment_method"] == "Cartão de Crédito 3x"
    assert data["totals"]["total_cash"] == pytest.approx(423.0)


def test_create_quote_retries_taken_number(client: TestClient, quote_payload, monkeypatch):
    """A duplicate quote number is rolled back and a new one drawn"""
    quote_payload["client_name"] = "Maria Souza"
    numbers = iter(["ORC-000001", "ORC-000001", "ORC-000002"])
    monkeypatch.setattr(quotes_api, "new_quote_number", lambda: next(numbers))

    first = client.post("/v1/quotes", json=quote_payload)
    second = client.post("/v1/quotes", json=quote_payload)

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["quote_number"] == "ORC-000001"
    assert second.json()["quote_number"] == "ORC-000002"
    assert client.get(f"/v1/quotes/{first.json()['quote_id']}").status_code == 200


def test_create_quote_gives_up_when_numbers_exhausted(client: TestClient, quote_payload, monkeypatch):
    quote_payload["client_name"] = "Maria Souza"
    monkeypatch.setattr(quotes_api, "new_quote_number", lambda: "ORC-000001")

    assert client.post("/v1/quotes", json=quote_payload).status_code == 201

    response = client.post("/v1/quotes", json=quote_payload)
    assert response.status_code == 503


def test_create_quote_without_items(client: TestClient):
    response = client.post("/v1/quotes", json={"client_name": "Maria", "items": []})
    assert response.status_code == 422


def test_get_quote_not_found(client: TestClient):
    response = client.get("/v1/quotes/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


def test_get_quote_invalid_id(client: TestClient):
    response = client.get("/v1/quotes/not-a-uuid")
    assert response.status_code == 400


def test_create_payable_series(client: TestClient):
    """Test POST /v1/payables with monthly installments"""
    response = client.post(
        "/v1/payables",
        json={
            "name": "Rent",
            "total_amount": 100.0,
            "due_date": "2025-01-31",
            "parcel_type": "monthly",
            "number_of_installments": 3,
            "is_paid": True,
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["series_id"] is not None
    assert [e["due_date"] for e in data["entries"]] == ["2025-01-31", "2025-02-28", "2025-03-31"]
    assert [e["amount"] for e in data["entries"]] == [33.33, 33.33, 33.34]
    assert all(e["is_paid"] is False for e in data["entries"])


def test_create_payable_invalid_count(client: TestClient):
    response = client.post(
        "/v1/payables",
        json={"name": "Rent", "total_amount": 100.0, "due_date": "2025-01-31", "parcel_type": "monthly",
              "number_of_installments": 0},
    )
    assert response.status_code == 422


def test_create_payable_too_many_installments(client: TestClient):
    response = client.post(
        "/v1/payables",
        json={"name": "Rent", "total_amount": 100.0, "due_date": "2025-01-31", "parcel_type": "weekly",
              "number_of_installments": 99},
    )
    assert response.status_code == 422


def _create(client: TestClient, **overrides) -> dict:
    body = {"name": "Energia", "total_amount": 300.0, "due_date": date.today().isoformat()}
    body.update(overrides)
    return client.post("/v1/payables", json=body).json()


def test_list_payables_with_summary(client: TestClient):
    """Test GET /v1/payables status filter and totals"""
    _create(client, name="Energia", total_amount=300.0)
    _create(client, name="Internet", total_amount=120.0, is_paid=True)

    pending = client.get("/v1/payables").json()
    assert [e["name"] for e in pending["entries"]] == ["Energia"]
    assert pending["summary"]["total_pending"] == 300.0

    everything = client.get("/v1/payables?status=all&period=month").json()
    assert len(everything["entries"]) == 2
    assert everything["summary"]["total"] == 420.0
    assert everything["month_summary"]["total_paid"] == 120.0

    searched = client.get("/v1/payables?status=all&search=inter").json()
    assert [e["name"] for e in searched["entries"]] == ["Internet"]


def test_list_payables_limit_applies_to_page_only(client: TestClient, monkeypatch):
    """Older rows beyond the page limit must not hide this month's bills"""
    monkeypatch.setattr(settings, "payables_page_limit", 2)
    _create(client, name="Aluguel antigo", due_date="2020-01-01")
    _create(client, name="Aluguel antigo 2", due_date="2020-01-02")
    _create(client, name="Energia", total_amount=300.0)

    this_month = client.get("/v1/payables?status=all&period=month").json()
    assert [e["name"] for e in this_month["entries"]] == ["Energia"]
    assert this_month["month_summary"]["total_pending"] == 300.0

    everything = client.get("/v1/payables?status=all").json()
    assert [e["name"] for e in everything["entries"]] == ["Aluguel antigo", "Aluguel antigo 2"]
    assert everything["total_count"] == 3
    assert everything["summary"]["total"] == 900.0
    assert everything["month_summary"]["total"] == 300.0

    searched = client.get("/v1/payables?status=all&search=energia").json()
    assert [e["name"] for e in searched["entries"]] == ["Energia"]
    assert searched["total_count"] == 1


def test_toggle_and_update_payable(client: TestClient):
    entry = _create(client)["entries"][0]

    toggled = client.patch(f"/v1/payables/{entry['id']}/toggle-paid")
    assert toggled.status_code == 200
    assert toggled.json()["is_paid"] is True

    updated = client.put(
        f"/v1/payables/{entry['id']}",
        json={"name": "Energia março", "amount": 310.0, "due_date": "2025-03-20", "is_paid": False},
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Energia março"
    assert updated.json()["amount"] == 310.0


def test_toggle_missing_payable(client: TestClient):
    response = client.patch("/v1/payables/does-not-exist/toggle-paid")
    assert response.status_code == 404


def test_delete_payable_entry_and_series(client: TestClient):
    """Test DELETE with scope=entry removes one installment, scope=series the rest"""
    created = _create(client, name="Vidros", total_amount=900.0, parcel_type="weekly", number_of_installments=3)
    first, second, _ = created["entries"]

    single = client.delete(f"/v1/payables/{first['id']}")
    assert single.json()["deleted"] == 1

    series = client.delete(f"/v1/payables/{second['id']}?scope=series")
    assert series.json()["deleted"] == 2

    remaining = client.get("/v1/payables?status=all").json()
    assert remaining["entries"] == []
