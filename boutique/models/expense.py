import enum
from sqlalchemy import Column, Date, DateTime, Enum, Numeric, String
from boutique.core.database import Base
from boutique.models.product import generate_custom_id, utc_now


class ExpenseCategory(str, enum.Enum):
    Rent = "Rent"
    Utilities = "Utilities"
    Marketing = "Marketing"
    Staff = "Staff"
    Other = "Other"


class Expense(Base):
    """Operating cost of the shop: rent, utilities, staff and the like."""
    __tablename__ = "expenses"

    id = Column(String(40), primary_key=True, default=lambda: generate_custom_id("EXP"))
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(Enum(ExpenseCategory), nullable=False, default=ExpenseCategory.Other)
    date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
