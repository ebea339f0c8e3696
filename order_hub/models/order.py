"""
SQLAlchemy Order models
"""
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, JSON, ForeignKey,
    CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from order_hub.database import Base

PLATFORMS = ('amazon', 'blinkit', 'flipkart', 'swiggy', 'organic')
ORDER_STATUSES = ('pending', 'confirmed', 'processing', 'dispatched', 'delivered', 'cancelled', 'returned')
SYNC_STATUSES = ('synced', 'pending', 'failed')


def _in(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class Order(Base):
    """Canonical order collected from every platform"""
    
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    platform = Column(String(20), nullable=False, index=True)
    platform_order_id = Column(String(100), nullable=False, index=True)
    order_number = Column(String(120), nullable=False, unique=True, index=True)
    order_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default='pending', index=True)
    
    # Customer (denormalized)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(50), nullable=True)
    customer_address = Column(JSON(none_as_null=True), nullable=True)
    
    items = Column(JSON, nullable=False, default=list)
    
    # Financials
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    shipping_fee = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default='INR')
    
    # Fulfillment details, not the fee
    shipping_info = Column(JSON(none_as_null=True), nullable=True)
    
    platform_data = Column(JSON, nullable=False, default=dict)
    
    sync_status = Column(String(10), nullable=False, default='synced')
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    created_by = Column(String(255), nullable=True)
    updated_by = Column(String(255), nullable=True)
    
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        order_by="OrderStatusHistory.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    
    # Constraints
    __table_args__ = (
        UniqueConstraint('platform', 'platform_order_id', name='uq_orders_platform_order'),
        CheckConstraint(_in('platform', PLATFORMS), name='check_platform_valid'),
        CheckConstraint(_in('status', ORDER_STATUSES), name='check_status_valid'),
        CheckConstraint(_in('sync_status', SYNC_STATUSES), name='check_sync_status_valid'),
        CheckConstraint('subtotal >= 0 AND tax >= 0 AND shipping_fee >= 0 AND discount >= 0 AND total >= 0',
                        name='check_financials_non_negative'),
        Index('ix_orders_platform_order_date', 'platform', 'order_date'),
        Index('ix_orders_status_order_date', 'status', 'order_date'),
    )
    
    @property
    def customer(self) -> dict:
        return {
            "name": self.customer_name,
            "email": self.customer_email,
            "phone": self.customer_phone,
            "address": self.customer_address,
        }
    
    @property
    def total_items(self) -> int:
        return sum(item.get("quantity", 0) for item in self.items or [])
    
    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', platform='{self.platform}', status='{self.status}')>"


class OrderStatusHistory(Base):
    """Append-only log of status changes for an order"""
    
    __tablename__ = "order_status_history"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    actor = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    
    order = relationship("Order", back_populates="status_history")
    
    def __repr__(self):
        return f"<OrderStatusHistory(order_id={self.order_id}, status='{self.status}')>"
