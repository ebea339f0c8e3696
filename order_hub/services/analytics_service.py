"""
Analytics Service - dashboard figures
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session

from order_hub.models.order import Order, ORDER_STATUSES, PLATFORMS
from order_hub.repositories.analytics_repository import AnalyticsRepository
from order_hub.schemas.analytics import (
    DashboardResponse,
    PlatformStats,
    PlatformStatsResponse,
    RevenuePoint,
    RevenueResponse,
    TrendsResponse,
)

DEFAULT_WINDOW_DAYS = 30

TREND_PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}


class AnalyticsService:

    def __init__(self, db: Session):
        self.repository = AnalyticsRepository(db)

    def get_dashboard(self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None) -> DashboardResponse:
        """Totals over a date window, the last 30 days by default"""
        start_date, end_date = self._window(start_date, end_date)

        total_orders, total_revenue, active_customers = self.repository.totals(start_date, end_date)

        by_status = dict.fromkeys(ORDER_STATUSES, 0)
        by_status.update(self.repository.count_by(Order.status, start_date, end_date))
        by_platform = dict.fromkeys(PLATFORMS, 0)
        by_platform.update(self.repository.count_by(Order.platform, start_date, end_date))

        return DashboardResponse(
            start_date=start_date,
            end_date=end_date,
            total_orders=total_orders,
            total_revenue=total_revenue,
            average_order_value=total_revenue / total_orders if total_orders else 0.0,
            active_customers=active_customers,
            orders_by_status=by_status,
            orders_by_platform=by_platform,
        )

    def get_platform_stats(self) -> PlatformStatsResponse:
        return PlatformStatsResponse(platforms=[
            PlatformStats(
                platform=platform,
                order_count=count,
                revenue=revenue,
                average_order_value=revenue / count if count else 0.0,
            )
            for platform, count, revenue in self.repository.platform_stats()
        ])

    def _window(self, start_date: Optional[datetime], end_date: Optional[datetime]):
        end_date = end_date or datetime.now(timezone.utc)
        return start_date or end_date - timedelta(days=DEFAULT_WINDOW_DAYS), end_date

    def get_revenue(
        self,
        period: str = "daily",
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> RevenueResponse:
        """Revenue and order count per day, week or month"""
        start_date, end_date = self._window(start_date, end_date)
        rows = self.repository.revenue_by_period(period, start_date, end_date)
        return RevenueResponse(
            period=period,
            start_date=start_date,
            end_date=end_date,
            revenue_data=[
                RevenuePoint(period=bucket, revenue=revenue, order_count=count)
                for bucket, revenue, count in rows
            ],
        )

    def get_trends(self, period: str = "30d", now: Optional[datetime] = None) -> TrendsResponse:
        """
        Totals of the last 7, 30, 90 or 365 days compared with the window
        just before, plus daily revenue.

        Changes are percentages, 0 when the previous window is empty.
        """
        end_date = now or datetime.now(timezone.utc)
        length = timedelta(days=TREND_PERIOD_DAYS[period])
        start_date = end_date - length

        total_orders, total_revenue, _ = self.repository.totals(start_date, end_date)
        previous_orders, previous_revenue, _ = self.repository.totals(
            start_date - length,
            start_date - timedelta(microseconds=1),
        )

        return TrendsResponse(
            period=period,
            start_date=start_date,
            end_date=end_date,
            total_revenue=total_revenue,
            total_orders=total_orders,
            previous_revenue=previous_revenue,
            previous_orders=previous_orders,
            revenue_change=_percent_change(total_revenue, previous_revenue),
            orders_change=_percent_change(total_orders, previous_orders),
            daily=[
                RevenuePoint(period=bucket, revenue=revenue, order_count=count)
                for bucket, revenue, count in self.repository.revenue_by_period("daily", start_date, end_date)
            ],
        )


def _percent_change(current: float, previous: float) -> float:
    if not previous:
        return 0.0
    return (current - previous) / previous * 100
