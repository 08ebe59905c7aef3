from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boutique.api.v1 import backup, expense, finance, ledger, order, product
from boutique.common.error_handlers import register_error_handlers
from boutique.common.logger import setup_logger
from boutique.core.config import settings
from boutique.core.exceptions import StoreUnavailable
from boutique.core.store import RecordStore
from boutique.logger_config import logger
from boutique.services.ledger import LedgerMonitor


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: RecordStore = app.state.store
    monitor: LedgerMonitor = app.state.ledger_monitor
    try:
        store.connect()
    except StoreUnavailable:
        # Keep serving; reads report a stale/empty ledger until the store is back
        logger.error("Starting without a record store connection")
    monitor.start()
    try:
        yield
    finally:
        monitor.stop()
        store.disconnect()


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    setup_logger(settings.LOG_FILE, settings.LOG_LEVEL)

    app = FastAPI(title="Boutique Ledger", version="1.0.0", lifespan=lifespan)
    app.state.store = store or RecordStore(settings.database_url)
    app.state.ledger_monitor = LedgerMonitor(
        app.state.store,
        low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        critical_stock_threshold=settings.CRITICAL_STOCK_THRESHOLD,
        currency=settings.CURRENCY,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register API routers
    app.include_router(product.router, prefix="/api/v1/products", tags=["products"])
    app.include_router(order.router, prefix="/api/v1/orders", tags=["orders"])
    app.include_router(expense.router, prefix="/api/v1/expenses", tags=["expenses"])
    app.include_router(finance.router, prefix="/api/v1/finances", tags=["finances"])
    app.include_router(ledger.router, prefix="/api/v1/ledger", tags=["ledger"])
    app.include_router(backup.router, prefix="/api/v1/backup", tags=["backup"])

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Boutique Ledger APIs!"}

    return app


app = create_app()
