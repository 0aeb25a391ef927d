# shop_service/main.py
import logging
from decimal import Decimal
from typing import List, AsyncGenerator, Optional

from fastapi import FastAPI, Depends, HTTPException, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.config import settings
from shop_service.db import cart, catalog, orders, reviews, users
from shop_service.db.database import get_db, SessionLocal
from shop_service.db.init_db import init_db
from shop_service.db.schemas import (
    CartItemRequest,
    CartItemResponse,
    CategoryRequest,
    CategoryResponse,
    CheckoutRequest,
    OrderResponse,
    OrderStatusUpdateRequest,
    PaymentIntentRequest,
    PaymentIntentResponse,
    ProductRequest,
    ProductResponse,
    ReviewRequest,
    ReviewResponse,
    UserCreate,
    UserResponse,
)
from shop_service.logging_config import setup_logging
from shop_service.payments import PaymentGatewayError, StripeGateway, get_payment_gateway
from shop_service.security import PasswordEncoder, get_password_encoder
from shop_service.seed import seed_data

logger = logging.getLogger(__name__)


async def lifespan(app: FastAPI) -> AsyncGenerator:
    setup_logging()
    await init_db()
    if settings.SEED_DATA:
        async with SessionLocal() as db:
            await seed_data(db, get_password_encoder())
    yield


app = FastAPI(title="MyShop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed requests are reported as 400 like every other client error
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {"status": "shop_service running"}


# Users

@app.post("/api/users", response_model=UserResponse, status_code=201)
async def create_user(
    user: UserCreate,
    db: AsyncSession = Depends(get_db),
    encoder: PasswordEncoder = Depends(get_password_encoder),
):
    return await users.create_user(db, user, encoder)


@app.get("/api/users", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await users.get_all_users(db)


@app.get("/api/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await users.get_user_or_404(db, user_id)


# Categories

@app.post("/api/categories", response_model=CategoryResponse, status_code=201)
async def create_category(category: CategoryRequest, db: AsyncSession = Depends(get_db)):
    return await catalog.create_category(db, category)


@app.get("/api/categories", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await catalog.get_all_categories(db)


@app.get("/api/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog.get_category_or_404(db, category_id)


@app.put("/api/categories/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: int, category: CategoryRequest, db: AsyncSession = Depends(get_db)):
    return await catalog.update_category(db, category_id, category)


@app.delete("/api/categories/{category_id}", status_code=204)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    await catalog.delete_category(db, category_id)
    return Response(status_code=204)


# Products

@app.get("/api/products", response_model=List[ProductResponse])
async def read_products(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    min_price: Optional[Decimal] = Query(default=None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(default=None, alias="maxPrice"),
    search: Optional[str] = Query(default=None),
    sort: List[str] = Query(default=[]),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.search_products(db, category_id, min_price, max_price, search, sort)


@app.get("/api/products/{product_id}", response_model=ProductResponse)
async def read_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog.get_product_or_404(db, product_id)


@app.post("/api/products", response_model=ProductResponse, status_code=201)
async def create_product(product: ProductRequest, db: AsyncSession = Depends(get_db)):
    return await catalog.create_product(db, product)


@app.put("/api/products/{product_id}", response_model=ProductResponse)
async def update_product(product_id: int, product: ProductRequest, db: AsyncSession = Depends(get_db)):
    return await catalog.update_product(db, product_id, product)


@app.delete("/api/products/{product_id}", status_code=204)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await catalog.delete_product(db, product_id)
    return Response(status_code=204)


# Cart

@app.get("/api/users/{user_id}/cart", response_model=List[CartItemResponse])
async def get_cart(user_id: int, db: AsyncSession = Depends(get_db)):
    return await cart.get_cart_items(db, user_id)


@app.post("/api/users/{user_id}/cart", response_model=CartItemResponse, status_code=201)
async def add_to_cart(user_id: int, item: CartItemRequest, db: AsyncSession = Depends(get_db)):
    return await cart.add_item(db, user_id, item)


@app.put("/api/users/{user_id}/cart/{cart_item_id}", response_model=CartItemResponse)
async def update_cart_item(user_id: int, cart_item_id: int, item: CartItemRequest, db: AsyncSession = Depends(get_db)):
    return await cart.update_item(db, user_id, cart_item_id, item)


@app.delete("/api/users/{user_id}/cart/{cart_item_id}", status_code=204)
async def remove_from_cart(user_id: int, cart_item_id: int, db: AsyncSession = Depends(get_db)):
    await cart.remove_item(db, user_id, cart_item_id)
    return Response(status_code=204)


@app.delete("/api/users/{user_id}/cart", status_code=204)
async def clear_cart(user_id: int, db: AsyncSession = Depends(get_db)):
    await cart.clear_cart(db, user_id)
    return Response(status_code=204)


# Orders

@app.post("/api/orders/checkout", response_model=OrderResponse, status_code=201)
async def checkout(request: CheckoutRequest, db: AsyncSession = Depends(get_db)):
    return await orders.checkout(db, request)


@app.get("/api/orders", response_model=List[OrderResponse])
async def list_orders(user_id: Optional[int] = Query(default=None, alias="userId"), db: AsyncSession = Depends(get_db)):
    if user_id is not None:
        return await orders.get_orders_for_user(db, user_id)
    return await orders.get_all_orders(db)


@app.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await orders.get_order(db, order_id)


@app.patch("/api/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: int, request: OrderStatusUpdateRequest, db: AsyncSession = Depends(get_db)):
    return await orders.update_order_status(db, order_id, request)


# Reviews

@app.post("/api/reviews", response_model=ReviewResponse, status_code=201)
async def create_review(review: ReviewRequest, db: AsyncSession = Depends(get_db)):
    return await reviews.create_review(db, review)


@app.get("/api/reviews/product/{product_id}", response_model=List[ReviewResponse])
async def get_reviews_for_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await reviews.get_reviews_for_product(db, product_id)


@app.delete("/api/reviews/{review_id}", status_code=204)
async def delete_review(review_id: int, db: AsyncSession = Depends(get_db)):
    await reviews.delete_review(db, review_id)
    return Response(status_code=204)


# Payments

@app.post("/api/payment/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payment: PaymentIntentRequest,
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    try:
        return await gateway.create_payment_intent(payment.amount)
    except PaymentGatewayError:
        logger.exception("Payment intent creation failed for amount %s", payment.amount)
        raise HTTPException(status_code=500, detail="Payment intent creation failed")
