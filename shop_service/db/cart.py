# shop_service/db/cart.py
import logging

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.catalog import get_product_or_404
from shop_service.db.database import transaction
from shop_service.db.models import CartItem, Product
from shop_service.db.schemas import CartItemRequest, CartItemResponse
from shop_service.db.users import get_user_or_404

logger = logging.getLogger(__name__)


def to_cart_item_response(item: CartItem) -> CartItemResponse:
    product = item.product
    return CartItemResponse(
        id=item.id,
        product_id=product.id,
        product_name=product.name,
        image_url=product.image_url,
        unit_price=product.price,
        quantity=item.quantity,
        line_total=product.price * item.quantity,
    )


async def get_cart_lines(db: AsyncSession, user_id: int):
    result = await db.execute(
        select(CartItem).filter(CartItem.user_id == user_id).order_by(CartItem.id)
    )
    return result.scalars().all()


async def get_cart_items(db: AsyncSession, user_id: int):
    """Lines of a user's cart."""
    await get_user_or_404(db, user_id)
    items = await get_cart_lines(db, user_id)
    logger.debug("Cart of user %s has %d lines", user_id, len(items))
    return [to_cart_item_response(item) for item in items]


async def get_available_product(db: AsyncSession, product_id: int) -> Product:
    product = await get_product_or_404(db, product_id)
    if product.stock_quantity <= 0:
        raise HTTPException(status_code=400, detail="Product is out of stock")
    return product


def validate_stock(product: Product, quantity: int):
    if quantity is None or quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than zero")
    if quantity > product.stock_quantity:
        raise HTTPException(status_code=400, detail="Requested quantity exceeds stock")


async def get_owned_line_or_404(db: AsyncSession, user_id: int, cart_item_id: int) -> CartItem:
    result = await db.execute(
        select(CartItem).filter(CartItem.id == cart_item_id, CartItem.user_id == user_id)
    )
    cart_item = result.scalar_one_or_none()
    if not cart_item:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return cart_item


async def add_item(db: AsyncSession, user_id: int, request: CartItemRequest):
    """Adds a product to the cart, merging with the existing line for it."""
    async with transaction(db):
        await get_user_or_404(db, user_id)
        product = await get_available_product(db, request.product_id)
        validate_stock(product, request.quantity)

        result = await db.execute(
            select(CartItem).filter(CartItem.user_id == user_id, CartItem.product_id == product.id)
        )
        cart_item = result.scalar_one_or_none()
        if cart_item:
            new_quantity = cart_item.quantity + request.quantity
            validate_stock(product, new_quantity)
            cart_item.quantity = new_quantity
        else:
            cart_item = CartItem(user_id=user_id, product=product, quantity=request.quantity)
            db.add(cart_item)
    logger.debug("User %s cart: product %s quantity now %s", user_id, product.id, cart_item.quantity)
    return to_cart_item_response(cart_item)


async def update_item(db: AsyncSession, user_id: int, cart_item_id: int, request: CartItemRequest):
    async with transaction(db):
        await get_user_or_404(db, user_id)
        cart_item = await get_owned_line_or_404(db, user_id, cart_item_id)
        product = await get_available_product(db, request.product_id)
        validate_stock(product, request.quantity)

        if product.id != cart_item.product_id:
            other = await db.execute(
                select(CartItem.id).filter(CartItem.user_id == user_id, CartItem.product_id == product.id)
            )
            if other.scalar_one_or_none() is not None:
                raise HTTPException(status_code=400, detail="Product is already in the cart")

        cart_item.product = product
        cart_item.quantity = request.quantity
    return to_cart_item_response(cart_item)


async def remove_item(db: AsyncSession, user_id: int, cart_item_id: int):
    async with transaction(db):
        await get_user_or_404(db, user_id)
        cart_item = await get_owned_line_or_404(db, user_id, cart_item_id)
        await db.delete(cart_item)


async def clear_cart(db: AsyncSession, user_id: int):
    async with transaction(db):
        await get_user_or_404(db, user_id)
        await db.execute(delete(CartItem).filter(CartItem.user_id == user_id))
    logger.debug("Cleared cart of user %s", user_id)
