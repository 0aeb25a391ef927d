# shop_service/db/catalog.py
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import delete, exists, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.database import transaction
from shop_service.db.models import Category, Product, CartItem, OrderItem, Review
from shop_service.db.schemas import CategoryRequest, ProductRequest

logger = logging.getLogger(__name__)

# Sortable product properties, keyed by the names clients send
SORT_COLUMNS = {
    "price": Product.price,
    "createdAt": Product.created_at,
    "created_at": Product.created_at,
    "name": func.lower(Product.name),
}


# Categories

async def get_all_categories(db: AsyncSession):
    result = await db.execute(select(Category).order_by(Category.id))
    return result.scalars().all()


async def get_category_or_404(db: AsyncSession, category_id: int) -> Category:
    result = await db.execute(select(Category).filter(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def category_name_exists(db: AsyncSession, name: str) -> bool:
    result = await db.execute(select(exists().where(func.lower(Category.name) == name.lower())))
    return result.scalar()


async def create_category(db: AsyncSession, request: CategoryRequest):
    async with transaction(db):
        if await category_name_exists(db, request.name):
            raise HTTPException(status_code=400, detail="Category name already exists")
        category = Category(name=request.name, description=request.description)
        db.add(category)
    await db.refresh(category)
    logger.info("Created category %s %r", category.id, category.name)
    return category


async def update_category(db: AsyncSession, category_id: int, request: CategoryRequest):
    async with transaction(db):
        category = await get_category_or_404(db, category_id)
        renamed = category.name.lower() != request.name.lower()
        if renamed and await category_name_exists(db, request.name):
            raise HTTPException(status_code=400, detail="Category name already exists")
        category.name = request.name
        category.description = request.description
    return category


async def delete_category(db: AsyncSession, category_id: int):
    async with transaction(db):
        category = await get_category_or_404(db, category_id)
        has_products = await db.execute(select(exists().where(Product.category_id == category_id)))
        if has_products.scalar():
            raise HTTPException(status_code=400, detail="Cannot delete category with products")
        await db.delete(category)
    logger.info("Deleted category %s", category_id)


# Products

def parse_sort(sort: Optional[List[str]]):
    """
    Turns ``["price,desc", "name"]`` into ORDER BY clauses.

    Keys apply left to right, unknown properties are skipped.
    """
    clauses = []
    for entry in sort or []:
        prop, _, direction = entry.partition(",")
        column = SORT_COLUMNS.get(prop.strip())
        if column is None:
            logger.debug("Ignoring unknown sort property %r", prop)
            continue
        if direction.strip().lower() == "desc":
            clauses.append(column.desc())
        else:
            clauses.append(column.asc())
    return clauses


async def search_products(
    db: AsyncSession,
    category_id: Optional[int] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    search: Optional[str] = None,
    sort: Optional[List[str]] = None,
):
    query = select(Product)
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)
    if search is not None and search.strip():
        query = query.filter(Product.name.ilike(f"%{search.strip()}%"))

    query = query.order_by(*parse_sort(sort), Product.id)
    logger.debug(
        "Product search category=%s min=%s max=%s search=%r sort=%s",
        category_id, min_price, max_price, search, sort,
    )
    result = await db.execute(query)
    return result.scalars().all()


async def get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(select(Product).filter(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def validate_price_and_stock(price: Optional[Decimal], stock_quantity: Optional[int]):
    if price is None or price <= 0:
        raise HTTPException(status_code=400, detail="Price must be greater than zero")
    if stock_quantity is None or stock_quantity < 0:
        raise HTTPException(status_code=400, detail="Stock quantity must be positive")


async def create_product(db: AsyncSession, request: ProductRequest):
    validate_price_and_stock(request.price, request.stock_quantity)
    async with transaction(db):
        category = await get_category_or_404(db, request.category_id)
        product = Product(
            category=category,
            name=request.name,
            description=request.description,
            price=request.price,
            stock_quantity=request.stock_quantity,
            image_url=request.image_url,
        )
        db.add(product)
    logger.info("Created product %s %r in category %s", product.id, product.name, category.id)
    return product


async def update_product(db: AsyncSession, product_id: int, request: ProductRequest):
    validate_price_and_stock(request.price, request.stock_quantity)
    async with transaction(db):
        product = await get_product_or_404(db, product_id)
        category = await get_category_or_404(db, request.category_id)

        product.category = category
        product.name = request.name
        product.description = request.description
        product.price = request.price
        product.stock_quantity = request.stock_quantity
        product.image_url = request.image_url
    return product


async def delete_product(db: AsyncSession, product_id: int):
    async with transaction(db):
        product = await get_product_or_404(db, product_id)
        ordered = await db.execute(select(exists().where(OrderItem.product_id == product_id)))
        if ordered.scalar():
            raise HTTPException(status_code=400, detail="Cannot delete product linked to an order")

        # Cart lines and reviews go with the product
        await db.execute(delete(CartItem).filter(CartItem.product_id == product_id))
        await db.execute(delete(Review).filter(Review.product_id == product_id))
        await db.delete(product)
    logger.info("Deleted product %s", product_id)
