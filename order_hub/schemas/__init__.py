"""
Schemas package
"""
from order_hub.schemas.order import (
    Address,
    Customer,
    OrderItem,
    ShippingInfo,
    NormalizedOrder,
    OrderCreate,
    OrderUpdate,
    OrderStatusUpdate,
    StatusHistoryEntry,
    OrderResponse,
    OrderListResponse
)
from order_hub.schemas.ingestion import (
    StatusAck,
    IngestionResult,
    PlatformFetchResult,
    FetchSummary,
    WebhookResult,
    SchedulerStatus,
    ManualFetchRequest
)

__all__ = [
    "Address",
    "Customer",
    "OrderItem",
    "ShippingInfo",
    "NormalizedOrder",
    "OrderCreate",
    "OrderUpdate",
    "OrderStatusUpdate",
    "StatusHistoryEntry",
    "OrderResponse",
    "OrderListResponse",
    "StatusAck",
    "IngestionResult",
    "PlatformFetchResult",
    "FetchSummary",
    "WebhookResult",
    "SchedulerStatus",
    "ManualFetchRequest"
]
