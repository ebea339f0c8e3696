"""
Analytics endpoints
"""
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Literal, Optional

from order_hub.database import get_db
from order_hub.schemas.analytics import DashboardResponse, PlatformStatsResponse, RevenueResponse, TrendsResponse
from order_hub.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency to get AnalyticsService instance"""
    return AnalyticsService(db)


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard figures")
def get_dashboard(
    start_date: Optional[datetime] = Query(None, description="Window start (default: 30 days before end)"),
    end_date: Optional[datetime] = Query(None, description="Window end (default: now)"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Order count, revenue, average order value, active customers and
    breakdowns by status and platform
    """
    return service.get_dashboard(start_date=start_date, end_date=end_date)


@router.get("/platforms", response_model=PlatformStatsResponse, summary="Per-platform figures")
def get_platform_stats(service: AnalyticsService = Depends(get_analytics_service)):
    return service.get_platform_stats()


@router.get("/revenue", response_model=RevenueResponse, summary="Revenue over time")
def get_revenue(
    period: Literal["daily", "weekly", "monthly"] = Query("daily"),
    start_date: Optional[datetime] = Query(None, description="Window start (default: 30 days before end)"),
    end_date: Optional[datetime] = Query(None, description="Window end (default: now)"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Revenue and order count per day, week or month"""
    return service.get_revenue(period=period, start_date=start_date, end_date=end_date)


@router.get("/trends", response_model=TrendsResponse, summary="Order trends")
def get_trends(
    period: Literal["7d", "30d", "90d", "1y"] = Query("30d"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Revenue and order totals of the period against the previous period,
    with daily revenue
    """
    return service.get_trends(period=period)
