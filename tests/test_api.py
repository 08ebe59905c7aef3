import json
from decimal import Decimal

from fastapi.testclient import TestClient

from boutique.core.store import RecordStore
from boutique.main import create_app
from boutique.services.sale_service import record_sale

from conftest import add_product


def money(value):
    return Decimal(str(value))


def create_tote_bag(client, quantity=10):
    response = client.post("/api/v1/products", json={
        "name": "Tote Bag", "category": "Bags", "quantity": quantity,
        "cost_price": "20000", "sell_price": "50000",
    })
    assert response.status_code == 201
    return response.json()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_product_crud(client):
    created = create_tote_bag(client)
    assert created["id"].startswith("PRD-")

    listed = client.get("/api/v1/products", params={"search": "tote"}).json()
    assert listed["total"] == 1

    replaced = client.put(f"/api/v1/products/{created['id']}", json={
        "name": "Tote Bag", "category": "Bags", "quantity": 12,
        "cost_price": "21000", "sell_price": "52000",
    })
    assert replaced.status_code == 200
    assert replaced.json()["id"] == created["id"]
    assert replaced.json()["quantity"] == 12

    assert client.delete(f"/api/v1/products/{created['id']}").status_code == 200
    assert client.get(f"/api/v1/products/{created['id']}").status_code == 404


def test_replacing_unknown_product_is_404(client):
    response = client.put("/api/v1/products/PRD-NOPE", json={"name": "Ghost", "category": "Shoes"})

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "ProductNotFound"


def test_sale_updates_stock_and_summary(client):
    product = create_tote_bag(client)

    response = client.post("/api/v1/orders", json={"product_name": "tote bag", "quantity": 3})

    assert response.status_code == 201
    assert response.json()["status"] == "Paid"
    assert client.get(f"/api/v1/products/{product['id']}").json()["quantity"] == 7

    summary = client.get("/api/v1/ledger/summary").json()
    assert money(summary["total_revenue"]) == Decimal("150000")
    assert money(summary["gross_profit"]) == Decimal("90000")
    assert money(summary["personal_balance"]) == Decimal("90000")
    assert summary["stale"] is False


def test_oversell_maps_to_conflict(client):
    create_tote_bag(client, quantity=2)

    response = client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 5})

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "InsufficientStock"
    assert body["message"] == "Not enough stock! Only 2 left."
    assert body["available"] == 2


def test_sale_of_unknown_product_is_404(client):
    response = client.post("/api/v1/orders", json={"product_name": "Clutch", "quantity": 1})
    assert response.status_code == 404


def test_zero_quantity_sale_is_rejected(client):
    create_tote_bag(client)
    response = client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 0})
    assert response.status_code == 422


def test_withdrawal_over_balance_is_conflict(client):
    create_tote_bag(client)
    client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 3})

    rejected = client.post("/api/v1/finances/withdrawals", json={"amount": "100000"})
    assert rejected.status_code == 409
    assert rejected.json()["message"] == "Insufficient profit balance!"
    assert money(rejected.json()["available"]) == Decimal("90000")

    accepted = client.post("/api/v1/finances/withdrawals", json={"amount": "50000"})
    assert accepted.status_code == 201
    assert accepted.json()["note"] == "Personal Use"


def test_activity_feed(client):
    client.post("/api/v1/finances/injections", json={"amount": "500000", "source": "Savings"})
    client.post("/api/v1/finances/stock-purchases", json={"amount": "200000"})

    feed = client.get("/api/v1/finances/activity").json()

    assert feed["total"] == 2
    assert [e["kind"] for e in feed["entries"]] == ["stock_purchase", "injection"]


def test_expenses(client):
    created = client.post("/api/v1/expenses", json={
        "description": "Shop rent", "amount": "60000", "category": "Rent",
    })
    assert created.status_code == 201

    listed = client.get("/api/v1/expenses").json()
    assert listed["total"] == 1
    assert money(listed["total_amount"]) == Decimal("60000")

    assert client.delete(f"/api/v1/expenses/{created.json()['id']}").status_code == 200
    assert client.delete(f"/api/v1/expenses/{created.json()['id']}").status_code == 404


def test_dashboard(client):
    create_tote_bag(client, quantity=3)
    client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 1})

    dashboard = client.get("/api/v1/ledger/dashboard").json()

    assert len(dashboard["recent_orders"]) == 1
    assert [p["name"] for p in dashboard["low_stock"]] == ["Tote Bag"]
    assert dashboard["summary"]["low_stock_count"] == 1
    assert dashboard["summary"]["critical_stock_count"] == 1


def test_sales_csv_download(client):
    assert client.get("/api/v1/orders/export").status_code == 404

    create_tote_bag(client)
    client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 2})

    response = client.get("/api/v1/orders/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "Boutique_Sales_Report_" in response.headers["content-disposition"]
    lines = response.text.split("\n")
    assert lines[0].startswith("Date,Product Name,Quantity,Total Amount (")
    assert lines[1].endswith(",Tote Bag,2,100000,Paid")


def test_backup_export_then_import(client):
    create_tote_bag(client)
    client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 3})

    exported = client.get("/api/v1/backup/export")
    assert exported.status_code == 200
    assert "fashion_store_backup_" in exported.headers["content-disposition"]
    backup = exported.json()
    assert backup["orders"][0]["totalAmount"] == 150000

    client.post("/api/v1/orders", json={"product_name": "Tote Bag", "quantity": 1})
    restored = client.post("/api/v1/backup/import", content=json.dumps(backup))

    assert restored.status_code == 200
    assert restored.json()["message"] == "Success! All data has been restored."
    summary = client.get("/api/v1/ledger/summary").json()
    assert money(summary["total_revenue"]) == Decimal("150000")


def test_malformed_backup_is_400(client):
    create_tote_bag(client)

    response = client.post("/api/v1/backup/import", content=b"{definitely not json")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ImportFailed"
    assert body["message"] == "The backup file is corrupted or invalid."
    assert client.get("/api/v1/products").json()["total"] == 1


def test_ledger_includes_writes_from_other_workers(tmp_path):
    url = f"sqlite:///{tmp_path / 'shop.db'}"
    other_worker = RecordStore(url).connect()
    try:
        with TestClient(create_app(RecordStore(url))) as client:
            add_product(other_worker, "Tote Bag", 4, "20000", "50000")
            record_sale(other_worker, "Tote Bag", 3)

            summary = client.get("/api/v1/ledger/summary").json()
            assert money(summary["total_revenue"]) == Decimal("150000")
            assert summary["stale"] is False

            dashboard = client.get("/api/v1/ledger/dashboard").json()
            assert money(dashboard["summary"]["total_revenue"]) == Decimal("150000")
            assert len(dashboard["recent_orders"]) == 1
            assert dashboard["summary"]["low_stock_count"] == len(dashboard["low_stock"]) == 1
    finally:
        other_worker.disconnect()
