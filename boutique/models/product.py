import enum
import secrets
import string
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Integer, Numeric, String
from boutique.core.database import Base


class ProductCategory(str, enum.Enum):
    Bags = "Bags"
    Shoes = "Shoes"
    Accessories = "Accessories"


def generate_custom_id(prefix: str, length: int = 8) -> str:
    random_part = ''.join(secrets.choice(string.ascii_uppercase)
                          for _ in range(length))
    return f"{prefix}-{random_part}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_name(name: str) -> str:
    """Key used to match an order's product name against the catalogue."""
    return " ".join((name or "").split()).casefold()


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    id = Column(String(40), primary_key=True,
                default=lambda: generate_custom_id("PRD"))
    name = Column(String(100), nullable=False, index=True)
    category = Column(Enum(ProductCategory), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    cost_price = Column(Numeric(15, 2), nullable=False, default=0)
    sell_price = Column(Numeric(15, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Product(id='{self.id}', name='{self.name}', quantity={self.quantity})>"
