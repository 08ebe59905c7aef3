import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError

from boutique.core.config import settings
from boutique.core.exceptions import ImportFailed
from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.models import (
    CapitalInjection,
    Expense,
    Order,
    Product,
    StockPurchase,
    Withdrawal,
)
from boutique.models.product import utc_now
from boutique.schemas.backup import (
    BackupExpense,
    BackupInjection,
    BackupOrder,
    BackupPayload,
    BackupProduct,
    BackupStockPurchase,
    BackupWithdrawal,
    ImportResult,
)
from boutique.utils.money import format_amount


# Collection name, ORM model, wire schema. Order is the export key order.
BACKUP_COLLECTIONS = (
    ("products", Product, BackupProduct),
    ("orders", Order, BackupOrder),
    ("expenses", Expense, BackupExpense),
    ("stock_purchases", StockPurchase, BackupStockPurchase),
    ("withdrawals", Withdrawal, BackupWithdrawal),
    ("injections", CapitalInjection, BackupInjection),
)


# ==================== EXPORT ====================

def build_backup(store: RecordStore) -> Dict[str, Any]:
    """Every collection in backup-file shape, plus the export timestamp."""
    snapshot = store.snapshot()
    data: Dict[str, Any] = {}
    for name, _model, schema in BACKUP_COLLECTIONS:
        data[to_camel(name)] = [
            schema.model_validate(record.model_dump()).model_dump(mode="json", by_alias=True)
            for record in getattr(snapshot, name)
        ]
    data["exportDate"] = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return data


def export_backup_json(store: RecordStore) -> str:
    backup = build_backup(store)
    logger.info(
        "Backup exported: "
        + ", ".join(f"{key}={len(value)}" for key, value in backup.items() if isinstance(value, list))
    )
    return json.dumps(backup, indent=2)


def backup_filename(on: Optional[date] = None) -> str:
    return f"fashion_store_backup_{(on or date.today()).isoformat()}.json"


# ==================== IMPORT ====================

def parse_backup(payload: Union[str, bytes, bytearray, dict]) -> BackupPayload:
    """Validate a whole backup before anything is written."""
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return BackupPayload.model_validate_json(payload)
        if isinstance(payload, dict):
            return BackupPayload.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Backup rejected: {e.error_count()} validation error(s)")
        raise ImportFailed(str(e)) from e

    raise ImportFailed("Backup must be a JSON object")


def _check_unique_ids(name: str, records: Sequence) -> None:
    seen = set()
    for record in records:
        if record.id is None:
            continue
        if record.id in seen:
            raise ImportFailed(f"Duplicate id '{record.id}' in {to_camel(name)}")
        seen.add(record.id)


def import_all_data(store: RecordStore, payload: Union[str, bytes, bytearray, dict]) -> ImportResult:
    """
    Restore a backup. Each collection present in the payload is replaced
    wholesale; collections missing from it keep their current contents. All
    replacements are committed together or not at all.
    """
    parsed = parse_backup(payload)

    present = []
    for name, model, _schema in BACKUP_COLLECTIONS:
        records = getattr(parsed, name)
        if records is None:
            continue
        _check_unique_ids(name, records)
        present.append((name, model, records))

    # Keep the payload's order as the store's insertion order
    base = utc_now()
    try:
        with store.transaction(*(name for name, _model, _records in present)) as db:
            for name, model, records in present:
                db.query(model).delete(synchronize_session=False)
                for position, record in enumerate(records):
                    values = record.model_dump(exclude={"id"})
                    if record.id:
                        values["id"] = record.id
                    values["created_at"] = base + timedelta(microseconds=position)
                    db.add(model(**values))
            db.flush()
    except IntegrityError as e:
        logger.error(f"Backup import failed while writing: {str(e)}")
        raise ImportFailed("Backup records conflict with each other") from e

    replaced = {to_camel(name): len(records) for name, _model, records in present}
    logger.info(f"Backup imported: {replaced}")
    return ImportResult(message="Success! All data has been restored.", replaced=replaced)


# ==================== SALES CSV ====================

def sales_csv_headers(currency: Optional[str] = None) -> List[str]:
    return ["Date", "Product Name", "Quantity", f"Total Amount ({currency or settings.CURRENCY})", "Status"]


def export_sales_csv(orders: Sequence, currency: Optional[str] = None) -> str:
    """
    Comma-joined sales report. Fields are written as-is: a product name
    containing a comma shifts the columns of its row.
    """
    rows = [
        [
            o.date.isoformat(),
            o.product_name,
            str(o.quantity),
            format_amount(o.total_amount),
            o.status.value,
        ]
        for o in orders
    ]
    return "\n".join(",".join(row) for row in [sales_csv_headers(currency)] + rows)


def sales_report_filename(on: Optional[date] = None) -> str:
    return f"Boutique_Sales_Report_{(on or date.today()).isoformat()}.csv"
