# shop_service/db/orders.py
"""
Checkout and order lifecycle.

Checkout turns a user's cart into an order in a single transaction:
the cart lines are read, stock is reserved line by line, the order and its
items are written with the computed total, a pending payment is attached for
online payments and the cart is emptied. Any failure rolls the whole thing
back. Status updates go through the transition table in
``shop_service.order_status``.
"""
import logging
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shop_service.db.cart import get_cart_lines
from shop_service.db.database import transaction
from shop_service.db.models import (
    CartItem,
    Order,
    OrderItem,
    OrderPaymentMethod,
    OrderStatus,
    Payment,
    PaymentStatus,
    Product,
    utcnow,
)
from shop_service.db.schemas import (
    CheckoutRequest,
    OrderItemResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
    PaymentResponse,
)
from shop_service.db.users import get_user_or_404
from shop_service.order_status import IllegalStatusTransition, StatusEffect, resolve_transition

logger = logging.getLogger(__name__)


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        total_amount=order.total_amount,
        order_status=order.order_status,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        shipping_name=order.shipping_name,
        shipping_address=order.shipping_address,
        shipping_phone=order.shipping_phone,
        shipping_email=order.shipping_email,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[
            OrderItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        payment=PaymentResponse.model_validate(order.payment) if order.payment else None,
    )


async def load_order(db: AsyncSession, order_id: int):
    # populate_existing so items and payment are read back fresh after a write
    result = await db.execute(
        select(Order)
        .filter(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_order_or_404(db: AsyncSession, order_id: int) -> Order:
    order = await load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def lock_product(db: AsyncSession, product_id: int):
    result = await db.execute(
        select(Product)
        .filter(Product.id == product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def reserve_stock(db: AsyncSession, cart_item: CartItem) -> Product:
    """Takes the cart line's quantity out of its product's stock."""
    product = await lock_product(db, cart_item.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found during checkout")
    requested = cart_item.quantity
    if requested <= 0:
        raise HTTPException(status_code=400, detail="Invalid quantity in cart")
    if requested > product.stock_quantity:
        logger.warning(
            "Checkout rejected: product %s has %s in stock, %s requested",
            product.id, product.stock_quantity, requested,
        )
        raise HTTPException(status_code=400, detail=f"Not enough stock for product: {product.name}")
    product.stock_quantity -= requested
    return product


async def checkout(db: AsyncSession, request: CheckoutRequest) -> OrderResponse:
    online = request.payment_method == OrderPaymentMethod.ONLINE_PAYMENT
    async with transaction(db):
        user = await get_user_or_404(db, request.user_id)

        cart_items = await get_cart_lines(db, user.id)
        if not cart_items:
            raise HTTPException(status_code=400, detail="Cart is empty")
        if online and request.payment_gateway is None:
            raise HTTPException(status_code=400, detail="Payment gateway is required for online payments")

        order = Order(
            user_id=user.id,
            order_status=OrderStatus.PROCESSING,
            payment_method=request.payment_method,
            payment_status=PaymentStatus.PENDING,
            shipping_name=request.shipping_name,
            shipping_address=request.shipping_address,
            shipping_phone=request.shipping_phone,
            shipping_email=request.shipping_email,
        )

        total = Decimal("0.00")
        for cart_item in cart_items:
            product = await reserve_stock(db, cart_item)
            order.items.append(OrderItem(
                product=product,
                quantity=cart_item.quantity,
                unit_price=product.price,
            ))
            total += product.price * cart_item.quantity

        if not order.items:
            raise HTTPException(status_code=400, detail="Order must contain at least one item")
        order.total_amount = total

        if online:
            order.payment = Payment(
                payment_method=request.payment_gateway,
                payment_status=PaymentStatus.PENDING,
                amount=total,
            )
        db.add(order)

        await db.execute(delete(CartItem).filter(CartItem.user_id == user.id))

    logger.info(
        "Order %s placed by user %s: %d items, total %s, %s",
        order.id, user.id, len(cart_items), total, request.payment_method.value,
    )
    return to_order_response(await load_order(db, order.id))


async def get_order(db: AsyncSession, order_id: int) -> OrderResponse:
    return to_order_response(await get_order_or_404(db, order_id))


async def get_orders_for_user(db: AsyncSession, user_id: int):
    await get_user_or_404(db, user_id)
    result = await db.execute(select(Order).filter(Order.user_id == user_id).order_by(Order.id))
    return [to_order_response(order) for order in result.scalars().all()]


async def get_all_orders(db: AsyncSession):
    result = await db.execute(select(Order).order_by(Order.id))
    return [to_order_response(order) for order in result.scalars().all()]


async def restore_stock(db: AsyncSession, order: Order):
    for item in order.items:
        product = await lock_product(db, item.product_id)
        product.stock_quantity += item.quantity
        logger.debug("Returned %s of product %s to stock", item.quantity, product.id)


async def update_order_status(db: AsyncSession, order_id: int, request: OrderStatusUpdateRequest) -> OrderResponse:
    async with transaction(db):
        order = await get_order_or_404(db, order_id)
        previous = order.order_status
        try:
            effect = resolve_transition(previous, request.order_status)
        except IllegalStatusTransition as e:
            logger.warning("Order %s: %s", order_id, e)
            raise HTTPException(status_code=400, detail=str(e)) from e

        if effect == StatusEffect.RESTORE_STOCK:
            await restore_stock(db, order)

        order.order_status = request.order_status

        if request.payment_status is not None:
            order.payment_status = request.payment_status
            payment = order.payment
            if payment is not None:
                payment.payment_status = request.payment_status
                if request.payment_status == PaymentStatus.SUCCESS and payment.payment_date is None:
                    payment.payment_date = utcnow()

    logger.info("Order %s status %s -> %s", order_id, previous.value, request.order_status.value)
    return to_order_response(await load_order(db, order_id))
