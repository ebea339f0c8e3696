"""
Services package
"""
from order_hub.services.analytics_service import AnalyticsService
from order_hub.services.order_ingestion import OrderIngestionScheduler, build_ingestion_scheduler
from order_hub.services.order_service import OrderService
from order_hub.services.platform_integration import PlatformIntegrationService

__all__ = [
    "AnalyticsService",
    "OrderIngestionScheduler",
    "build_ingestion_scheduler",
    "OrderService",
    "PlatformIntegrationService"
]
