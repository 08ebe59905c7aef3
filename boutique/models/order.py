import enum
from sqlalchemy import CheckConstraint, Column, Date, DateTime, Enum, Integer, Numeric, String
from boutique.core.database import Base
from boutique.models.product import generate_custom_id, utc_now


class OrderStatus(str, enum.Enum):
    Paid = "Paid"
    Unpaid = "Unpaid"


class Order(Base):
    """A recorded sale. Refers to its product by name only, never by id."""
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
    )

    id = Column(String(40), primary_key=True,
                default=lambda: generate_custom_id("ORD"))
    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.Paid)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    def __repr__(self):
        return f"<Order(id='{self.id}', product_name='{self.product_name}', quantity={self.quantity})>"
