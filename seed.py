from boutique.core.config import settings
from boutique.core.exceptions import BoutiqueError
from boutique.core.store import RecordStore
from boutique.models import (
    CapitalInjection,
    Expense,
    ExpenseCategory,
    Order,
    Product,
    ProductCategory,
    StockPurchase,
    Withdrawal,
)
from boutique.schemas.product import ProductCreate
from boutique.services.expense_service import create_expense
from boutique.services.finance_service import add_injection, add_stock_purchase, withdraw
from boutique.services.ledger import personal_balance
from boutique.services.product_service import create_product
from boutique.services.sale_service import record_sale

from faker import Faker
from decimal import Decimal
import random

fake = Faker()

PRODUCT_NOUNS = {
    ProductCategory.Bags: ["Tote Bag", "Clutch", "Crossbody Bag", "Backpack", "Handbag"],
    ProductCategory.Shoes: ["Sneakers", "Heels", "Sandals", "Loafers", "Ankle Boots"],
    ProductCategory.Accessories: ["Scarf", "Sunglasses", "Belt", "Earrings", "Watch"],
}


def ugx(low: int, high: int) -> Decimal:
    """Whole-thousand shilling amount."""
    return Decimal(random.randint(low, high) * 1000)


store = RecordStore(settings.database_url).connect()

try:
    print("🔄 Clearing existing data...")
    with store.transaction("products", "orders", "expenses", "stock_purchases", "withdrawals", "injections") as db:
        for model in (Order, Product, Expense, StockPurchase, Withdrawal, CapitalInjection):
            db.query(model).delete()
    print("✅ Data cleared.")

    print("🔄 Injecting starting capital...")
    add_injection(store, ugx(2000, 5000), "Owner Contribution")

    print("🔄 Creating products...")
    products = []
    for category, nouns in PRODUCT_NOUNS.items():
        for noun in nouns:
            cost = ugx(10, 80)
            products.append(create_product(store, ProductCreate(
                name=f"{fake.color_name()} {noun}",
                category=category,
                quantity=random.randint(0, 25),
                cost_price=cost,
                sell_price=cost * Decimal(random.choice(["1.5", "2", "2.5"])),
            )))
            add_stock_purchase(store, cost * 10, f"Restock {noun}")
    print(f"✅ Seeded {len(products)} products")

    print("🔄 Recording sales...")
    sales = 0
    for _ in range(40):
        product = random.choice(products)
        try:
            record_sale(store, product.name, random.randint(1, 4))
            sales += 1
        except BoutiqueError as e:
            print(f"⚠️ Sale skipped: {e.message}")
    print(f"✅ Seeded {sales} sales")

    print("🔄 Creating expenses...")
    for _ in range(10):
        category = random.choice(list(ExpenseCategory))
        create_expense(store, fake.sentence(nb_words=3).rstrip("."), ugx(5, 60), category)
    print("✅ Seeded 10 expenses")

    balance = personal_balance(store.snapshot())
    if balance > 0:
        amount = (balance / 2).quantize(Decimal("1"))
        withdraw(store, amount, "Personal Use")
        print(f"💰 Withdrew {amount} of {balance} personal balance")
finally:
    store.disconnect()
