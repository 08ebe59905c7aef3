from fastapi import Request

from boutique.core.store import RecordStore
from boutique.services.ledger import LedgerMonitor


def get_store(request: Request) -> RecordStore:
    """Dependency to get the record store of the running application."""
    return request.app.state.store


def get_ledger_monitor(request: Request) -> LedgerMonitor:
    """Dependency to get the ledger monitor kept current by store notifications."""
    return request.app.state.ledger_monitor
