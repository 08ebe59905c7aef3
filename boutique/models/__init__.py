# boutique/models/__init__.py
from .product import Product, ProductCategory
from .order import Order, OrderStatus
from .expense import Expense, ExpenseCategory
from .finance import StockPurchase, Withdrawal, CapitalInjection
