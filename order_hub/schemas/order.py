"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict, model_validator
from typing import Any, Dict, List, Optional, Literal
from datetime import datetime

Platform = Literal['amazon', 'blinkit', 'flipkart', 'swiggy', 'organic']
OrderStatus = Literal['pending', 'confirmed', 'processing', 'dispatched', 'delivered', 'cancelled', 'returned']
SyncStatus = Literal['synced', 'pending', 'failed']

# Rounding slack for float money arithmetic
MONEY_TOLERANCE = 0.01


class Address(BaseModel):
    """Postal address"""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None


class Customer(BaseModel):
    """Customer details as captured on the order"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[Address] = None


class OrderItem(BaseModel):
    """Order line item. total_price must equal unit_price * quantity."""
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)
    total_price: float = Field(..., ge=0)
    sku: Optional[str] = None
    category: Optional[str] = None
    
    @model_validator(mode="after")
    def check_total_price(self):
        if abs(self.total_price - self.unit_price * self.quantity) > MONEY_TOLERANCE:
            raise ValueError(
                f"total_price {self.total_price} != unit_price {self.unit_price} x quantity {self.quantity}"
            )
        return self


class ShippingInfo(BaseModel):
    """Fulfillment details (the fee lives in shipping_fee)"""
    method: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    actual_delivery: Optional[datetime] = None


class OrderFinancials(BaseModel):
    """Money fields shared by normalized and manually created orders"""
    subtotal: float = Field(..., ge=0)
    tax: float = Field(0, ge=0)
    shipping_fee: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    total: float = Field(..., ge=0)
    currency: str = Field("INR", min_length=3, max_length=3)
    
    @model_validator(mode="after")
    def check_total(self):
        expected = self.subtotal + self.tax + self.shipping_fee - self.discount
        if abs(self.total - expected) > MONEY_TOLERANCE:
            raise ValueError(
                f"total {self.total} != subtotal + tax + shipping_fee - discount ({expected})"
            )
        return self


class NormalizedOrder(OrderFinancials):
    """Platform-agnostic order produced by a platform adapter"""
    platform: Platform
    platform_order_id: str = Field(..., min_length=1, max_length=100)
    order_number: str = Field(..., min_length=1, max_length=120)
    order_date: datetime
    status: OrderStatus = 'pending'
    customer: Customer
    items: List[OrderItem] = Field(..., min_length=1)
    shipping_info: Optional[ShippingInfo] = None
    platform_data: Dict[str, Any] = Field(default_factory=dict)


class OrderCreate(NormalizedOrder):
    """Schema for manual order creation by an admin"""
    order_number: Optional[str] = Field(None, min_length=1, max_length=120)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    actor: Optional[str] = Field(None, description="Who created the order")


class OrderUpdate(BaseModel):
    """
    Schema for editing an order (all fields optional)

    The platform key and order number cannot be changed. Money fields are
    checked together with the stored values once merged.
    """
    order_date: Optional[datetime] = None
    status: Optional[OrderStatus] = None
    customer: Optional[Customer] = None
    items: Optional[List[OrderItem]] = Field(None, min_length=1)
    subtotal: Optional[float] = Field(None, ge=0)
    tax: Optional[float] = Field(None, ge=0)
    shipping_fee: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    shipping_info: Optional[ShippingInfo] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    actor: Optional[str] = Field(None, description="Who edited the order")


class OrderStatusUpdate(BaseModel):
    """Schema for updating order status"""
    status: OrderStatus = Field(..., description="Order status")
    notes: Optional[str] = None
    actor: Optional[str] = Field(None, description="Who changed the status")


class StatusHistoryEntry(BaseModel):
    """One status-history log entry"""
    status: str
    timestamp: datetime
    actor: Optional[str] = None
    notes: Optional[str] = None
    
    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    platform: str
    platform_order_id: str
    order_number: str
    order_date: datetime
    status: str
    customer: Customer
    items: List[OrderItem]
    subtotal: float
    tax: float
    shipping_fee: float
    discount: float
    total: float
    currency: str
    shipping_info: Optional[ShippingInfo] = None
    platform_data: Dict[str, Any]
    status_history: List[StatusHistoryEntry]
    sync_status: str
    last_synced_at: Optional[datetime] = None
    tags: List[str]
    notes: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    skip: int
    limit: int
    total: int


class OrderListResponse(BaseModel):
    """Schema for list of orders response"""
    orders: list[OrderResponse]
    total: int
    pagination: Pagination
