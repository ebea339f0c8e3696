"""
Models package
"""
from order_hub.models.order import Order, OrderStatusHistory

__all__ = ["Order", "OrderStatusHistory"]
