"""
Pydantic schemas for analytics responses
"""
from pydantic import BaseModel
from typing import Dict, List, Literal
from datetime import datetime


class DashboardResponse(BaseModel):
    start_date: datetime
    end_date: datetime
    total_orders: int
    total_revenue: float
    average_order_value: float
    active_customers: int
    orders_by_status: Dict[str, int]
    orders_by_platform: Dict[str, int]


class PlatformStats(BaseModel):
    platform: str
    order_count: int
    revenue: float
    average_order_value: float


class PlatformStatsResponse(BaseModel):
    platforms: List[PlatformStats]


class RevenuePoint(BaseModel):
    """Revenue of one day, week or month"""
    period: str
    revenue: float
    order_count: int


class RevenueResponse(BaseModel):
    period: Literal['daily', 'weekly', 'monthly']
    start_date: datetime
    end_date: datetime
    revenue_data: List[RevenuePoint]


class TrendsResponse(BaseModel):
    """Current window against the window of equal length before it"""
    period: Literal['7d', '30d', '90d', '1y']
    start_date: datetime
    end_date: datetime
    total_revenue: float
    total_orders: int
    previous_revenue: float
    previous_orders: int
    revenue_change: float
    orders_change: float
    daily: List[RevenuePoint]
