"""End-to-end tests of the Catalogue HTTP API."""
from datetime import timedelta
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.store import InventoryStore

from conftest import START, FixedClock

PART = {
    "name": "Brake Pad",
    "sku": "BP-1",
    "category": "Brakes",
    "stock": 5,
    "price": 500,
    "description": "Sintered front brake pad.",
}


def _create(client, **overrides):
    response = client.post("/parts", json={**PART, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "healthy"}


def test_categories_in_menu_order(client):
    assert client.get("/categories").json() == [
        "Engine", "Brakes", "Suspension", "Exhaust", "Lighting", "Wheels & Tires", "Accessories",
    ]


def test_create_and_view_part(client):
    created = _create(client)

    assert created["stock_history"] == [{"timestamp": created["date_added"], "quantity": 5}]
    assert created["sales_log"] == []
    assert Decimal(created["price"]) == Decimal("500")

    response = client.get(f"/parts/{created['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]
    assert client.get("/selection").json()["id"] == created["id"]


def test_create_rejects_empty_name(client):
    response = client.post("/parts", json={**PART, "name": ""})
    assert response.status_code == 422
    assert response.json()["field"] == "name"


def test_create_rejects_negative_stock(client):
    response = client.post("/parts", json={**PART, "stock": -1})
    assert response.status_code == 422


def test_view_missing_part(client):
    assert client.get("/parts/missing").status_code == 404


def test_list_filters_and_flags_low_stock(client, clock):
    _create(client, name="Brake Pad", sku="BP-1", stock=5)
    clock.advance(minutes=1)
    _create(client, name="LED Light", sku="LGT-9", category="Lighting", stock=30)

    everything = client.get("/parts").json()
    assert [p["sku"] for p in everything] == ["LGT-9", "BP-1"]
    assert [p["low_stock"] for p in everything] == [False, True]

    assert [p["sku"] for p in client.get("/parts", params={"search": "lgt"}).json()] == ["LGT-9"]
    assert [p["sku"] for p in client.get("/parts", params={"category": "Brakes"}).json()] == ["BP-1"]


def test_list_rejects_unknown_category(client):
    assert client.get("/parts", params={"category": "Hats"}).status_code == 400


def test_update_appends_history_only_on_stock_change(client, clock):
    created = _create(client)
    clock.advance(hours=1)

    first = client.put(f"/parts/{created['id']}", json={**PART, "stock": 8}).json()
    second = client.put(f"/parts/{created['id']}", json={**PART, "stock": 8, "price": 450}).json()

    assert [entry["quantity"] for entry in first["stock_history"]] == [5, 8]
    assert second["stock_history"] == first["stock_history"]
    assert second["date_added"] == created["date_added"]
    assert Decimal(second["price"]) == Decimal("450")


def test_update_unknown_id_creates_part(client):
    response = client.put("/parts/new-id", json=PART)
    assert response.status_code == 200
    assert response.json()["id"] == "new-id"
    assert client.get("/parts/new-id").status_code == 200


def test_selection_is_shared_by_all_clients(app, client):
    created = _create(client)
    other = TestClient(app)
    assert client.get("/selection").json() is None

    other.get(f"/parts/{created['id']}")

    assert client.get("/selection").json()["id"] == created["id"]


def test_delete_needs_confirmation(client):
    created = _create(client)

    assert client.delete(f"/parts/{created['id']}").status_code == 400
    assert client.get(f"/parts/{created['id']}").status_code == 200

    assert client.delete(f"/parts/{created['id']}", params={"confirm": "true"}).status_code == 204
    assert client.get(f"/parts/{created['id']}").status_code == 404
    assert client.get("/selection").json() is None


def test_delete_missing_part_is_not_an_error(client):
    assert client.delete("/parts/missing", params={"confirm": "true"}).status_code == 204


def test_stock_adjustments_clamp_at_zero(client, clock):
    created = _create(client, stock=3)
    clock.advance(minutes=1)

    response = client.post(f"/parts/{created['id']}/stock-adjustments", json={"direction": "remove", "amount": 5})
    assert response.json()["stock"] == 0
    clock.advance(minutes=1)

    response = client.post(f"/parts/{created['id']}/stock-adjustments", json={"direction": "add", "amount": 4})
    assert response.json()["stock"] == 4

    history = client.get(f"/parts/{created['id']}/stock-history").json()
    assert [entry["quantity"] for entry in history] == [4, 0, 3]


def test_stock_adjustment_requires_positive_amount(client):
    created = _create(client)
    response = client.post(f"/parts/{created['id']}/stock-adjustments", json={"direction": "add", "amount": 0})
    assert response.status_code == 422


def test_stock_adjustment_on_missing_part(client):
    response = client.post("/parts/missing/stock-adjustments", json={"direction": "add", "amount": 1})
    assert response.status_code == 404


def test_sales_feed_reports(client, clock):
    created = _create(client, stock=10, price=200)
    clock.advance(hours=1)

    response = client.post(f"/parts/{created['id']}/sales", json={"quantity": 3})
    assert response.status_code == 201
    assert response.json()["stock"] == 7

    weekly = client.get("/reports/summary").json()
    assert weekly["period"] == "Weekly"
    assert weekly["unique_dispatched_items"] == 1
    assert weekly["total_units_sold"] == 3
    assert Decimal(weekly["total_sales_value"]) == Decimal("600")
    assert weekly["best_selling_category"] == "Brakes"


def test_summary_period_parameter(client):
    created = _create(client)
    old_sale = (START - timedelta(days=30)).isoformat()
    client.post(f"/parts/{created['id']}/sales", json={"quantity": 2, "timestamp": old_sale})

    assert client.get("/reports/summary", params={"period": "Daily"}).json()["total_units_sold"] == 0
    assert client.get("/reports/summary", params={"period": "Yearly"}).json()["total_units_sold"] == 2
    assert client.get("/reports/summary", params={"period": "Monthly"}).status_code == 422


def test_dashboard(client):
    _create(client, stock=5, price=500)
    _create(client, sku="BP-2", stock=20, price=10)

    metrics = client.get("/dashboard").json()
    assert metrics["total_items"] == 2
    assert Decimal(metrics["total_stock_value"]) == Decimal("2700")
    assert metrics["low_stock_count"] == 1


def test_eod_report(client):
    _create(client, stock=0, price=100)

    report = client.get("/reports/eod").json()
    assert report["new_parts_count"] == 1
    assert report["out_of_stock_count"] == 1
    assert report["report_date"] == "Monday, June 10, 2024"


def test_export_csv(client):
    created = _create(client)
    response = client.get("/export/csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0] == "id,sku,name,category,stock,price,date_added"
    assert lines[1].startswith(f"{created['id']},BP-1,Brake Pad,Brakes,5,500,")


def test_assist_description_reports_error_in_band(client):
    response = client.post("/assist/description", json={"name": "Pipe", "category": "Exhaust"})
    assert response.status_code == 502
    assert response.json() == {
        "result": "Error: Could not generate description. Please try again.",
        "ok": False,
    }


def test_assist_reorder_with_stubbed_model():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": "Order 25"}]}}]}
        )
    )
    app = create_app(store=InventoryStore(clock=FixedClock()), genai_api_key="k", genai_transport=transport)
    client = TestClient(app)

    response = client.post("/assist/reorder", json={"name": "Tire", "category": "Wheels & Tires", "stock": 2})

    assert response.status_code == 200
    assert response.json() == {"result": "25", "ok": True}


@pytest.mark.parametrize("seed,expected", [(True, 7), (False, 0)])
def test_sample_data_seeding(seed, expected):
    client = TestClient(create_app(clock=FixedClock(), seed=seed))
    parts = client.get("/parts").json()
    assert len(parts) == expected
    if seed:
        assert parts[0]["id"] == "7"
        assert client.get("/reports/summary", params={"period": "Daily"}).json()["total_units_sold"] == 3
