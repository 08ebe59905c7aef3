import json
from datetime import date
from decimal import Decimal

import pytest

from boutique.core.exceptions import ImportFailed
from boutique.core.store import RecordStore
from boutique.models.order import OrderStatus
from boutique.schemas.order import OrderResponse
from boutique.services import ledger
from boutique.services.backup_service import (
    backup_filename,
    build_backup,
    export_backup_json,
    export_sales_csv,
    import_all_data,
    sales_report_filename,
)
from boutique.services.expense_service import create_expense
from boutique.services.finance_service import add_injection, add_stock_purchase, withdraw
from boutique.services.sale_service import record_sale

from conftest import add_product


@pytest.fixture
def busy_store(store, tote_bag):
    add_product(store, "Sneakers", 4, "45000", "90000", category="Shoes")
    record_sale(store, "Tote Bag", 3)
    record_sale(store, "Sneakers", 1)
    create_expense(store, "Monthly Rent", Decimal("60000"), "Rent")
    add_injection(store, Decimal("300000"), "Savings")
    add_stock_purchase(store, Decimal("120000.50"), "Bags restock")
    withdraw(store, Decimal("20000"))
    return store


def test_backup_uses_camel_case_keys_and_plain_numbers(busy_store):
    backup = build_backup(busy_store)

    assert list(backup) == [
        "products", "orders", "expenses", "stockPurchases", "withdrawals", "injections", "exportDate",
    ]
    assert backup["exportDate"].endswith("Z")

    tote = backup["products"][0]
    assert tote["name"] == "Tote Bag"
    assert tote["costPrice"] == 20000
    assert tote["sellPrice"] == 50000
    assert backup["orders"][0]["productName"] == "Tote Bag"
    assert backup["orders"][0]["totalAmount"] == 150000
    assert backup["orders"][0]["date"] == date.today().isoformat()
    assert backup["stockPurchases"][0]["amount"] == 120000.5


def test_round_trip_into_a_fresh_store_keeps_the_numbers(busy_store):
    exported = export_backup_json(busy_store)
    before = ledger.summarize(busy_store.snapshot())

    fresh = RecordStore("sqlite://").connect()
    try:
        result = import_all_data(fresh, exported)
        after = ledger.summarize(fresh.snapshot())

        assert result.message == "Success! All data has been restored."
        assert result.replaced["orders"] == 2
        assert after.model_dump(exclude={"computed_at"}) == before.model_dump(exclude={"computed_at"})
        assert [p.id for p in fresh.snapshot().products] == [p.id for p in busy_store.snapshot().products]
    finally:
        fresh.disconnect()


def test_only_present_collections_are_replaced(busy_store):
    result = import_all_data(busy_store, {"expenses": [
        {"id": "E1", "description": "Electricity", "amount": 15000, "category": "Utilities", "date": "2026-01-19"},
    ]})

    snapshot = busy_store.snapshot()
    assert result.replaced == {"expenses": 1}
    assert [e.description for e in snapshot.expenses] == ["Electricity"]
    assert len(snapshot.orders) == 2
    assert len(snapshot.products) == 2


def test_empty_list_clears_and_null_is_ignored(busy_store):
    import_all_data(busy_store, json.dumps({"orders": [], "withdrawals": None}))

    snapshot = busy_store.snapshot()
    assert snapshot.orders == ()
    assert len(snapshot.withdrawals) == 1


def test_browser_backup_shapes_are_accepted(store):
    payload = {
        "products": [
            {"id": 1737290000000, "name": "Tote Bag", "category": "Bags",
             "quantity": 7, "costPrice": 20000, "sellPrice": 50000},
        ],
        "orders": [
            {"id": 1737290000001, "date": "1/19/2026", "productName": "Tote Bag",
             "quantity": 3, "totalAmount": 150000, "status": "Paid"},
        ],
        "exportDate": "2026-01-19T10:00:00.000Z",
    }

    import_all_data(store, payload)

    snapshot = store.snapshot()
    assert snapshot.products[0].id == "1737290000000"
    assert snapshot.orders[0].date == date(2026, 1, 19)
    assert ledger.gross_profit(snapshot.orders, snapshot.products) == Decimal("90000")


def test_import_keeps_payload_order(store):
    import_all_data(store, {"injections": [
        {"id": "Z", "amount": 1, "date": "2026-01-01"},
        {"id": "A", "amount": 2, "date": "2026-01-02"},
        {"id": "M", "amount": 3, "date": "2026-01-03"},
    ]})

    assert [i.id for i in store.snapshot().injections] == ["Z", "A", "M"]


@pytest.mark.parametrize("payload", [
    "{not json",
    "[]",
    {"orders": [{"id": "O1", "productName": "Tote Bag", "quantity": 1, "date": "2026-01-19"}]},
    {"products": [{"id": "P1", "name": "Bag", "category": "Hats", "quantity": 1, "costPrice": 1, "sellPrice": 2}]},
    {"expenses": [{"id": "E1", "description": "Rent", "amount": 1, "date": "someday"}]},
    {"withdrawals": [
        {"id": "W1", "amount": 1, "date": "2026-01-19"},
        {"id": "W1", "amount": 2, "date": "2026-01-19"},
    ]},
    {"injections": [{"id": "I1", "amount": 10.005, "date": "2026-01-19"}]},
    {"products": [{"id": "P1", "name": "Bag", "category": "Bags", "quantity": 1, "costPrice": "19999.999", "sellPrice": 2}]},
])
def test_bad_backup_fails_and_changes_nothing(busy_store, payload):
    before = busy_store.snapshot()

    with pytest.raises(ImportFailed) as exc_info:
        import_all_data(busy_store, payload)

    assert exc_info.value.message == "The backup file is corrupted or invalid."
    assert busy_store.snapshot() == before


def test_sales_csv_text(busy_store):
    orders = busy_store.snapshot().orders
    today = date.today().isoformat()

    csv_text = export_sales_csv(orders, currency="UGX")

    assert csv_text == (
        "Date,Product Name,Quantity,Total Amount (UGX),Status\n"
        f"{today},Tote Bag,3,150000,Paid\n"
        f"{today},Sneakers,1,90000,Paid"
    )


def test_sales_csv_does_not_quote_commas():
    order = OrderResponse(
        id="O1", product_name="Bag, Large", quantity=1, total_amount=Decimal("12500.50"),
        date=date(2026, 1, 19), status=OrderStatus.Unpaid,
    )

    line = export_sales_csv([order], currency="KES").split("\n")[1]

    assert line == "2026-01-19,Bag, Large,1,12500.5,Unpaid"
    assert len(line.split(",")) == 6


def test_file_names():
    assert backup_filename(date(2026, 1, 19)) == "fashion_store_backup_2026-01-19.json"
    assert sales_report_filename(date(2026, 1, 19)) == "Boutique_Sales_Report_2026-01-19.csv"


def test_amounts_with_cents_are_restored_exactly(store):
    import_all_data(store, {"expenses": [
        {"id": "E1", "description": "Airtime", "amount": 1250.75, "category": "Other", "date": "2026-01-19"},
    ]})

    assert store.snapshot().expenses[0].amount == Decimal("1250.75")
