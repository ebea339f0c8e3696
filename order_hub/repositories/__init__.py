"""
Repositories package
"""
from order_hub.repositories.order_repository import OrderRepository
from order_hub.repositories.analytics_repository import AnalyticsRepository

__all__ = ["OrderRepository", "AnalyticsRepository"]
