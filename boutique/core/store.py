from collections import defaultdict
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional
import threading

from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from boutique.core.config import settings
from boutique.core.database import Base, create_db_engine
from boutique.core.exceptions import StoreUnavailable
from boutique.logger_config import logger
from boutique.models import (
    CapitalInjection,
    Expense,
    Order,
    Product,
    StockPurchase,
    Withdrawal,
)
from boutique.schemas.expense import ExpenseResponse
from boutique.schemas.finance import (
    CapitalInjectionResponse,
    StockPurchaseResponse,
    WithdrawalResponse,
)
from boutique.schemas.ledger import LedgerSnapshot
from boutique.schemas.order import OrderResponse
from boutique.schemas.product import ProductResponse


# Logical collection name -> (ORM model, snapshot record schema)
COLLECTIONS = {
    "products": (Product, ProductResponse),
    "orders": (Order, OrderResponse),
    "expenses": (Expense, ExpenseResponse),
    "stock_purchases": (StockPurchase, StockPurchaseResponse),
    "withdrawals": (Withdrawal, WithdrawalResponse),
    "injections": (CapitalInjection, CapitalInjectionResponse),
}

Subscriber = Callable[[LedgerSnapshot], None]


def read_snapshot(db: Session) -> LedgerSnapshot:
    """Load every collection through `db`, oldest record first."""
    data = {}
    for name, (model, schema) in COLLECTIONS.items():
        rows = db.query(model).order_by(model.created_at, model.id).all()
        data[name] = tuple(schema.model_validate(row) for row in rows)
    return LedgerSnapshot(**data)


def _is_connectivity_error(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class RecordStore:
    """
    Persistence for the six record collections.

    One instance lives for one application session: `connect()` on startup,
    `disconnect()` on shutdown. Writes go through `transaction()`, which
    commits everything or nothing and then tells subscribers of the touched
    collections about the new state.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.database_url = database_url or settings.database_url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        # True until connect() is asked for, and again after disconnect()
        self._closed = True
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    # ==================== LIFECYCLE ====================

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def connect(self) -> "RecordStore":
        with self._lock:
            self._closed = False
            if self._engine is not None:
                return self

            engine = create_db_engine(self.database_url, echo=self.echo)
            try:
                Base.metadata.create_all(engine)
            except OperationalError as e:
                engine.dispose()
                logger.exception("Could not reach the record store")
                raise StoreUnavailable() from e

            self._engine = engine
            self._session_factory = sessionmaker(
                bind=engine, autoflush=False, expire_on_commit=False
            )
            logger.info(f"Record store connected ({engine.url.get_backend_name()})")
            return self

    def disconnect(self) -> None:
        with self._lock:
            self._closed = True
            if self._engine is None:
                return
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Record store disconnected")

    def _factory(self) -> sessionmaker:
        """
        Session factory of the open store. A store whose connect() failed is
        retried here, so callers that retry a StoreUnavailable can succeed
        once the database is reachable again.
        """
        factory = self._session_factory
        if factory is not None:
            return factory
        if self._closed:
            raise StoreUnavailable("Record store is not connected")

        logger.info("Record store not connected, reconnecting")
        factory = self.connect()._session_factory
        if factory is None:
            raise StoreUnavailable("Record store is not connected")
        return factory

    # ==================== SESSIONS ====================

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read-only session."""
        db = self._factory()()
        try:
            yield db
        except DBAPIError as e:
            if _is_connectivity_error(e):
                logger.error(f"Record store unavailable during read: {str(e)}")
                raise StoreUnavailable() from e
            raise
        finally:
            db.close()

    @contextmanager
    def transaction(self, *collections: str) -> Iterator[Session]:
        """
        Session whose work is committed as a single unit. Subscribers of
        `collections` are notified only after a successful commit.
        """
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")

        db = self._factory()()
        try:
            yield db
            db.commit()
        except DBAPIError as e:
            db.rollback()
            if _is_connectivity_error(e):
                logger.exception("Record store unavailable, write rolled back")
                raise StoreUnavailable() from e
            raise
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        self._notify(collections)

    # ==================== SNAPSHOTS ====================

    def snapshot(self) -> LedgerSnapshot:
        """Read every collection in one session."""
        with self.session() as db:
            return read_snapshot(db)

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, collection: str, callback: Subscriber) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        with self._lock:
            if callback not in self._subscribers[collection]:
                self._subscribers[collection].append(callback)

    def subscribe_all(self, callback: Subscriber) -> None:
        for collection in COLLECTIONS:
            self.subscribe(collection, callback)

    def unsubscribe(self, collection: str, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers.get(collection, []):
                self._subscribers[collection].remove(callback)

    def unsubscribe_all(self, callback: Subscriber) -> None:
        for collection in COLLECTIONS:
            self.unsubscribe(collection, callback)

    def _notify(self, collections) -> None:
        with self._lock:
            callbacks: List[Subscriber] = []
            for collection in collections:
                for callback in self._subscribers.get(collection, []):
                    if callback not in callbacks:
                        callbacks.append(callback)

        if not callbacks:
            return

        try:
            snapshot = self.snapshot()
        except StoreUnavailable:
            logger.warning(f"Skipped change notification for {list(collections)}: store unavailable")
            return

        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed")
