from datetime import date
from decimal import Decimal

import pytest

from boutique.core.exceptions import StoreUnavailable
from boutique.core.store import RecordStore
from boutique.models.expense import Expense, ExpenseCategory
from boutique.services.expense_service import create_expense
from boutique.services.finance_service import add_injection
from boutique.services.ledger import LedgerMonitor
from boutique.services.sale_service import record_sale

from conftest import add_product


def test_subscribers_only_hear_about_touched_collections(store, tote_bag):
    heard = {"orders": 0, "expenses": 0}
    store.subscribe("orders", lambda snap: heard.__setitem__("orders", heard["orders"] + 1))
    store.subscribe("expenses", lambda snap: heard.__setitem__("expenses", heard["expenses"] + 1))

    record_sale(store, "Tote Bag", 1)

    assert heard == {"orders": 1, "expenses": 0}


def test_subscriber_receives_committed_state(store, tote_bag):
    seen = []
    store.subscribe("orders", seen.append)

    record_sale(store, "Tote Bag", 2)

    assert len(seen) == 1
    assert seen[0].products[0].quantity == 8
    assert seen[0].orders[0].quantity == 2


def test_failing_subscriber_does_not_break_others_or_the_write(store):
    seen = []

    def broken(snapshot):
        raise RuntimeError("boom")

    store.subscribe("injections", broken)
    store.subscribe("injections", seen.append)

    add_injection(store, Decimal("1000"))

    assert len(seen) == 1
    assert len(store.snapshot().injections) == 1


def test_unsubscribe_stops_notifications(store):
    seen = []
    store.subscribe_all(seen.append)
    store.unsubscribe_all(seen.append)

    add_injection(store, Decimal("1000"))

    assert seen == []


def test_unknown_collection_is_rejected(store):
    with pytest.raises(ValueError):
        store.subscribe("customers", print)
    with pytest.raises(ValueError):
        with store.transaction("customers"):
            pass


def test_failed_transaction_rolls_back_and_notifies_nobody(store):
    seen = []
    store.subscribe("expenses", seen.append)

    with pytest.raises(RuntimeError):
        with store.transaction("expenses") as db:
            db.add(Expense(
                description="Half written", amount=Decimal("10"),
                category=ExpenseCategory.Other, date=date(2026, 1, 19),
            ))
            db.flush()
            raise RuntimeError("interrupted")

    assert store.snapshot().expenses == ()
    assert seen == []


def test_disconnected_store_is_unavailable():
    store = RecordStore("sqlite://")

    assert store.is_connected is False
    with pytest.raises(StoreUnavailable):
        store.snapshot()
    with pytest.raises(StoreUnavailable):
        create_expense(store, "Rent", Decimal("1000"))


def test_connect_is_idempotent():
    store = RecordStore("sqlite://")
    try:
        assert store.connect() is store.connect()
        assert store.snapshot().products == ()
    finally:
        store.disconnect()
    store.disconnect()


def test_monitor_follows_changes(store, tote_bag):
    monitor = LedgerMonitor(store).start()
    assert monitor.summary.total_revenue == 0
    assert monitor.summary.total_stock_units == 10

    record_sale(store, "Tote Bag", 3)

    assert monitor.summary.total_revenue == Decimal("150000")
    assert monitor.summary.net_profit == Decimal("90000")
    assert monitor.summary.stale is False

    monitor.stop()
    record_sale(store, "Tote Bag", 1)
    assert monitor.summary.total_revenue == Decimal("150000")


def test_monitor_serves_stale_summary_when_store_goes_away():
    store = RecordStore("sqlite://").connect()
    add_product(store, "Tote Bag", 10, "20000", "50000")
    record_sale(store, "Tote Bag", 3)
    monitor = LedgerMonitor(store).start()

    store.disconnect()
    summary = monitor.refresh()

    assert summary.stale is True
    assert summary.total_revenue == Decimal("150000")


def test_monitor_on_never_connected_store_is_empty_and_stale():
    monitor = LedgerMonitor(RecordStore("sqlite://"), currency="KES")

    summary = monitor.summary

    assert summary.stale is True
    assert summary.total_revenue == 0
    assert summary.currency == "KES"


def test_store_reconnects_once_the_database_is_reachable(tmp_path):
    store = RecordStore(f"sqlite:///{tmp_path / 'later' / 'shop.db'}")
    with pytest.raises(StoreUnavailable):
        store.connect()
    with pytest.raises(StoreUnavailable):
        store.snapshot()

    (tmp_path / "later").mkdir()
    try:
        product = add_product(store, "Tote Bag", 10, "20000", "50000")

        assert store.is_connected is True
        assert [p.id for p in store.snapshot().products] == [product.id]
    finally:
        store.disconnect()


def test_disconnected_store_stays_closed(store):
    store.disconnect()

    with pytest.raises(StoreUnavailable):
        store.snapshot()
    assert store.is_connected is False


def test_monitor_sees_writes_made_through_another_store(tmp_path):
    url = f"sqlite:///{tmp_path / 'shared.db'}"
    worker_a = RecordStore(url).connect()
    worker_b = RecordStore(url).connect()
    try:
        add_product(worker_b, "Tote Bag", 10, "20000", "50000")
        monitor = LedgerMonitor(worker_a).start()

        record_sale(worker_b, "Tote Bag", 3)
        summary = monitor.refresh()

        assert summary.total_revenue == Decimal("150000")
        assert summary.total_stock_units == 7
        assert summary.stale is False
    finally:
        worker_a.disconnect()
        worker_b.disconnect()


def test_late_notification_with_older_state_does_not_roll_back_summary(store, tote_bag):
    monitor = LedgerMonitor(store).start()
    before_sale = store.snapshot()
    record_sale(store, "Tote Bag", 3)

    # A slower writer's notification, carrying the pre-sale state, lands last
    monitor._on_change(before_sale)

    assert monitor.summary.total_revenue == Decimal("150000")
    assert monitor.summary.total_stock_units == 7
