# grocery/data/seed.py
import os
from decimal import Decimal

from grocery.data import models  # noqa: F401
from grocery.data.database import Base, SessionLocal, engine
from grocery.data.models.product import ProductModel
from grocery.services.user_service import UserService
from grocery.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {"name": "Tomatoes", "unit": "kg", "price": Decimal("1200.00"), "offer_price": Decimal("1000.00"), "category": "Vegetables"},
    {"name": "Irish potatoes", "unit": "kg", "price": Decimal("600.00"), "category": "Vegetables"},
    {"name": "Bananas", "unit": "bunch", "price": Decimal("2500.00"), "category": "Fruits"},
    {"name": "Avocados", "unit": "pcs", "price": Decimal("300.00"), "category": "Fruits"},
    {"name": "Fresh milk", "unit": "l", "price": Decimal("800.00"), "category": "Dairy"},
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        users = UserService(db)
        users.create_staff_user(
            "Store Seller",
            os.getenv("SEED_SELLER_EMAIL", "seller@example.com"),
            os.getenv("SEED_SELLER_PASSWORD", "seller123"),
            "seller",
        )
        users.create_staff_user(
            "Store Admin",
            os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
            os.getenv("SEED_ADMIN_PASSWORD", "admin123"),
            "admin",
        )

        # not forcing: only seed products if the catalog is empty
        if db.query(ProductModel).first():
            return
        db.add_all(ProductModel(description="", **p) for p in DEMO_PRODUCTS)
        db.commit()
        logger.info("seed_done", products=len(DEMO_PRODUCTS))
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    seed()
