"""
Pydantic schemas for ingestion results, webhooks and scheduler status
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from order_hub.schemas.order import NormalizedOrder, OrderResponse


class StatusAck(BaseModel):
    """Acknowledgement returned by a platform for a status update"""
    success: bool
    message: Optional[str] = None


class IngestionResult(BaseModel):
    """Outcome of one upsert"""
    action: Literal['created', 'updated']
    order: OrderResponse


class SaveSummary(BaseModel):
    """Outcome of saving a batch of orders, up to the first store failure"""
    created: int = 0
    updated: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None


class PlatformFetchResult(BaseModel):
    """Outcome of fetching (and optionally saving) one platform's orders"""
    success: bool
    count: int = 0
    orders: List[NormalizedOrder] = Field(default_factory=list, exclude=True)
    created: int = 0
    updated: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None


class FetchSummary(BaseModel):
    """Outcome of a sweep or a manual fetch"""
    success: bool
    platform: Optional[str] = None
    total_orders: int = 0
    success_count: int = 0
    error_count: int = 0
    results: Dict[str, PlatformFetchResult] = Field(default_factory=dict)
    error: Optional[str] = None
    error_code: Optional[str] = None


class WebhookResult(BaseModel):
    """Structured outcome of webhook processing, never raised"""
    success: bool
    action: Optional[Literal['created', 'updated']] = None
    order: Optional[OrderResponse] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    fields: List[str] = Field(default_factory=list)


class SchedulerStatus(BaseModel):
    """Scheduler introspection"""
    running: bool
    active_job_count: int
    job_names: List[str]


class ManualFetchRequest(BaseModel):
    """Body of the manual trigger endpoint"""
    platform: Optional[str] = None
