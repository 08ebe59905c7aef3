from sqlalchemy import Column, Date, DateTime, Numeric, String
from boutique.core.database import Base
from boutique.models.product import generate_custom_id, utc_now


class StockPurchase(Base):
    """Capital spent restocking the racks."""
    __tablename__ = "stock_purchases"

    id = Column(String(40), primary_key=True, default=lambda: generate_custom_id("STK"))
    description = Column(String(255), nullable=False, default="Restock")
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class Withdrawal(Base):
    """Owner's personal draw against profit."""
    __tablename__ = "withdrawals"

    id = Column(String(40), primary_key=True, default=lambda: generate_custom_id("WDR"))
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False)
    note = Column(String(255), nullable=False, default="Personal Use")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class CapitalInjection(Base):
    """Fresh capital added to the business."""
    __tablename__ = "capital_injections"

    id = Column(String(40), primary_key=True, default=lambda: generate_custom_id("INJ"))
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False)
    source = Column(String(255), nullable=False, default="Owner Contribution")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
