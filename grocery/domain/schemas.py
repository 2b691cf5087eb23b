# grocery/domain/schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone_number: Optional[str] = Field(None, max_length=20)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: Optional[str] = None
    role: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    unit: str = Field("pcs", min_length=1, max_length=20)
    price: Decimal = Field(..., ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    in_stock: bool = True


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    price: Optional[Decimal] = Field(None, ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None


class StockIn(BaseModel):
    in_stock: Optional[bool] = Field(None, alias="inStock")

    model_config = ConfigDict(populate_by_name=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    unit: str
    price: Decimal
    offer_price: Optional[Decimal] = None
    image: Optional[str] = None
    category: Optional[str] = None
    in_stock: bool

    model_config = ConfigDict(from_attributes=True)


class AddressIn(BaseModel):
    """Required text fields are checked for blanks by AddressService, not here."""

    description: str = ""
    city: str = ""
    street: str = ""
    district: str = ""
    postal_code: Optional[str] = Field(None, max_length=20)
    phone_number: Optional[str] = Field(None, max_length=20)
    additional_info: Optional[str] = Field(None, max_length=500)
    is_default: bool = False


class AddressUpdate(BaseModel):
    description: Optional[str] = None
    city: Optional[str] = None
    street: Optional[str] = None
    district: Optional[str] = None
    postal_code: Optional[str] = Field(None, max_length=20)
    phone_number: Optional[str] = Field(None, max_length=20)
    additional_info: Optional[str] = Field(None, max_length=500)
    is_default: Optional[bool] = None


class AddressOut(BaseModel):
    id: int
    user_id: int
    description: str
    city: str
    street: str
    district: str
    postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    additional_info: Optional[str] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class CartQuantityIn(BaseModel):
    # zero or less removes the line
    quantity: int


class CartLineOut(BaseModel):
    product_id: int
    name: str
    unit: str
    image: Optional[str] = None
    price: Decimal
    quantity: int
    subtotal: Decimal


class CartOut(BaseModel):
    user_id: int
    version: int
    items: List[CartLineOut]
    total: Decimal


class PlaceOrderIn(BaseModel):
    address_id: Optional[int] = Field(None, alias="addressId")
    payment_type: Optional[str] = Field(None, alias="paymentType")
    callback_url: Optional[str] = Field(None, alias="callbackUrl")

    model_config = ConfigDict(populate_by_name=True)


class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    unit: str
    price: Decimal
    quantity: int
    product_image: Optional[str] = None
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    user_full_name: str
    user_email: str
    address_id: Optional[int] = None
    delivery_address: dict
    amount: Decimal
    payment_type: str
    payment_status: str
    status: str
    tx_ref: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlaceOrderOut(BaseModel):
    success: bool = True
    order: OrderOut
    payment_url: Optional[str] = Field(None, serialization_alias="paymentUrl")


class Pagination(BaseModel):
    total_orders: int = Field(..., serialization_alias="totalOrders")
    total_pages: int = Field(..., serialization_alias="totalPages")
    current_page: int = Field(..., serialization_alias="currentPage")
    has_next_page: bool = Field(..., serialization_alias="hasNextPage")
    has_prev_page: bool = Field(..., serialization_alias="hasPrevPage")


class OrderPageOut(BaseModel):
    success: bool = True
    orders: List[OrderOut]
    pagination: Pagination


class OrderStatusUpdateIn(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = Field(None, alias="paymentStatus")

    model_config = ConfigDict(populate_by_name=True)


class DailyStat(BaseModel):
    day: date = Field(..., serialization_alias="date")
    orders: int
    revenue: Decimal


class OrderStatisticsOut(BaseModel):
    total_orders: int = Field(..., serialization_alias="totalOrders")
    status_counts: dict = Field(..., serialization_alias="statusCounts")
    payment_status_counts: dict = Field(..., serialization_alias="paymentStatusCounts")
    total_revenue: Decimal = Field(..., serialization_alias="totalRevenue")
    daily_stats: List[DailyStat] = Field(..., serialization_alias="dailyStats")


class NotificationOut(BaseModel):
    id: int
    recipient_id: int
    order_id: int
    message: str
    is_read: bool
    type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPageOut(BaseModel):
    success: bool = True
    notifications: List[NotificationOut]
    total: int
    unread: int
    current_page: int = Field(..., serialization_alias="currentPage")
    total_pages: int = Field(..., serialization_alias="totalPages")


class MessageOut(BaseModel):
    success: bool = True
    message: str


class CustomerSummaryOut(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: Optional[str] = None
    status: str
    orders_count: int = Field(..., serialization_alias="ordersCount")
    spent: Decimal
    last_order: Optional[datetime] = Field(None, serialization_alias="lastOrder")


class CustomerPageOut(BaseModel):
    success: bool = True
    customers: List[CustomerSummaryOut]
    total_customers: int = Field(..., serialization_alias="totalCustomers")
    total_pages: int = Field(..., serialization_alias="totalPages")
    current_page: int = Field(..., serialization_alias="currentPage")


class CustomerDetailOut(UserOut):
    created_at: datetime
    addresses: List[AddressOut] = []
