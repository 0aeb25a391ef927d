# shop_service/seed.py
import logging
from decimal import Decimal

from sqlalchemy import exists, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.database import transaction
from shop_service.db.models import User, UserRole, Category, Product
from shop_service.db.users import get_user_by_email
from shop_service.security import PasswordEncoder

logger = logging.getLogger(__name__)

DEMO_EMAIL = "client@myshop.test"
DEMO_CATEGORY = "Electronique"


async def seed_data(db: AsyncSession, encoder: PasswordEncoder):
    """Creates the demo client, category and products if they are missing."""
    async with transaction(db):
        if not await get_user_by_email(db, DEMO_EMAIL):
            db.add(User(
                full_name="Client Test",
                email=DEMO_EMAIL,
                password_hash=encoder.encode("password"),
                phone_number="0600000000",
                address="Adresse de test",
                role=UserRole.CLIENT,
            ))
            logger.info("Seeded demo user %s", DEMO_EMAIL)

        result = await db.execute(select(Category).filter(func.lower(Category.name) == DEMO_CATEGORY.lower()))
        category = result.scalar_one_or_none()
        if not category:
            category = Category(name=DEMO_CATEGORY, description="Appareils et accessoires")
            db.add(category)
            await db.flush()

        has_products = await db.execute(select(exists().where(Product.category_id == category.id)))
        if not has_products.scalar():
            db.add_all([
                Product(
                    category=category,
                    name="Laptop 14",
                    description="Portable 14 pouces",
                    price=Decimal("8999.00"),
                    stock_quantity=10,
                    image_url="https://via.placeholder.com/300x200",
                ),
                Product(
                    category=category,
                    name="Casque Bluetooth",
                    description="Casque sans fil",
                    price=Decimal("599.00"),
                    stock_quantity=25,
                    image_url="https://via.placeholder.com/300x200",
                ),
            ])
            logger.info("Seeded demo products in %s", DEMO_CATEGORY)
