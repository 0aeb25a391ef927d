# shop_service/db/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from shop_service.db.models import (
    UserRole,
    OrderStatus,
    PaymentStatus,
    OrderPaymentMethod,
    PaymentGateway,
)


# Users
class UserCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=255)
    role: UserRole = UserRole.CLIENT


class UserResponse(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Categories
class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Products
class ProductRequest(BaseModel):
    """Body of both product creation and product update."""
    category_id: int
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=5000)
    # Price and stock bounds are business rules, checked in db.catalog
    price: Decimal
    stock_quantity: int
    image_url: Optional[str] = Field(default=None, max_length=255)


class ProductResponse(BaseModel):
    id: int
    category: CategoryResponse
    name: str
    description: Optional[str] = None
    price: Decimal
    stock_quantity: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Cart
class CartItemRequest(BaseModel):
    product_id: int
    quantity: int


class CartItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


# Orders
class CheckoutRequest(BaseModel):
    user_id: int
    shipping_name: str = Field(min_length=1, max_length=150)
    shipping_address: str = Field(min_length=1, max_length=255)
    shipping_phone: str = Field(min_length=1, max_length=20)
    shipping_email: EmailStr
    payment_method: OrderPaymentMethod
    payment_gateway: Optional[PaymentGateway] = None


class OrderStatusUpdateRequest(BaseModel):
    order_status: OrderStatus
    payment_status: Optional[PaymentStatus] = None


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal


class PaymentResponse(BaseModel):
    id: int
    payment_method: PaymentGateway
    payment_status: PaymentStatus
    amount: Decimal
    transaction_reference: Optional[str] = None
    payment_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total_amount: Decimal
    order_status: OrderStatus
    payment_method: OrderPaymentMethod
    payment_status: PaymentStatus
    shipping_name: str
    shipping_address: str
    shipping_phone: str
    shipping_email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemResponse] = []
    payment: Optional[PaymentResponse] = None


# Reviews
class ReviewRequest(BaseModel):
    product_id: int
    user_id: int
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=5000)


class ReviewResponse(BaseModel):
    id: int
    product_id: int
    user_id: int
    rating: int
    comment: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Payment intents
class PaymentIntentRequest(BaseModel):
    amount: int = Field(gt=0)  # major currency units


class PaymentIntentResponse(BaseModel):
    id: str
    client_secret: Optional[str] = None
    amount: int
    currency: str
    status: str
