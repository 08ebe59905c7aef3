from datetime import date
from decimal import Decimal
from typing import List, Optional

from boutique.core.exceptions import InsufficientBalance
from boutique.core.store import RecordStore, read_snapshot
from boutique.logger_config import logger
from boutique.models.finance import CapitalInjection, StockPurchase, Withdrawal
from boutique.schemas.finance import (
    CapitalInjectionActivity,
    CapitalInjectionResponse,
    StockPurchaseActivity,
    StockPurchaseResponse,
    WithdrawalActivity,
    WithdrawalResponse,
)
from boutique.services.ledger import personal_balance
from boutique.utils.dates import today


DEFAULT_STOCK_PURCHASE_DESCRIPTION = "Restock"
DEFAULT_WITHDRAWAL_NOTE = "Personal Use"
DEFAULT_INJECTION_SOURCE = "Owner Contribution"


def _positive(amount: Decimal, what: str) -> Decimal:
    if amount is None or amount <= 0:
        raise ValueError(f"{what} amount must be greater than 0")
    return amount


def add_stock_purchase(
    store: RecordStore,
    amount: Decimal,
    description: Optional[str] = None,
    purchase_date: Optional[date] = None,
) -> StockPurchaseResponse:
    """Record money spent on restocking; draws down buying power."""
    _positive(amount, "Stock purchase")
    with store.transaction("stock_purchases") as db:
        purchase = StockPurchase(
            description=(description or "").strip() or DEFAULT_STOCK_PURCHASE_DESCRIPTION,
            amount=amount,
            date=purchase_date or today(),
        )
        db.add(purchase)
        db.flush()
        created = StockPurchaseResponse.model_validate(purchase)

    logger.info(f"Stock purchase {created.id}: {created.amount}")
    return created


def add_injection(
    store: RecordStore,
    amount: Decimal,
    source: Optional[str] = None,
    injection_date: Optional[date] = None,
) -> CapitalInjectionResponse:
    """Record fresh capital put into the business."""
    _positive(amount, "Capital injection")
    with store.transaction("injections") as db:
        injection = CapitalInjection(
            source=(source or "").strip() or DEFAULT_INJECTION_SOURCE,
            amount=amount,
            date=injection_date or today(),
        )
        db.add(injection)
        db.flush()
        created = CapitalInjectionResponse.model_validate(injection)

    logger.info(f"Capital injection {created.id}: {created.amount} from {created.source}")
    return created


def withdraw(
    store: RecordStore,
    amount: Decimal,
    note: Optional[str] = None,
    withdrawal_date: Optional[date] = None,
) -> WithdrawalResponse:
    """
    Pay the owner out of profit. Rejected with InsufficientBalance when the
    amount is more than the personal balance at the time of the request.
    """
    _positive(amount, "Withdrawal")
    with store.transaction("withdrawals") as db:
        available = personal_balance(read_snapshot(db))
        if amount > available:
            logger.warning(f"Withdrawal of {amount} rejected, balance is {available}")
            raise InsufficientBalance(requested=amount, available=available)

        withdrawal = Withdrawal(
            note=(note or "").strip() or DEFAULT_WITHDRAWAL_NOTE,
            amount=amount,
            date=withdrawal_date or today(),
        )
        db.add(withdrawal)
        db.flush()
        created = WithdrawalResponse.model_validate(withdrawal)

    logger.info(f"Withdrawal {created.id}: {created.amount} ({created.note})")
    return created


def get_activity_feed(store: RecordStore) -> List:
    """Stock purchases, withdrawals and injections merged, newest first."""
    snapshot = store.snapshot()
    entries = (
        [StockPurchaseActivity(**s.model_dump()) for s in snapshot.stock_purchases]
        + [WithdrawalActivity(**w.model_dump()) for w in snapshot.withdrawals]
        + [CapitalInjectionActivity(**i.model_dump()) for i in snapshot.injections]
    )
    entries.sort(key=lambda e: (e.created_at, e.id), reverse=True)
    return entries
