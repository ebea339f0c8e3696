"""
Analytics Repository - aggregate queries over orders
"""
from datetime import datetime
from typing import Dict, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func, desc

from order_hub.models.order import Order

SQLITE_PERIOD_FORMATS = {
    "daily": "%Y-%m-%d",
    "weekly": "%Y-W%W",
    "monthly": "%Y-%m",
}

POSTGRES_PERIOD_FORMATS = {
    "daily": "YYYY-MM-DD",
    "weekly": 'IYYY-"W"IW',
    "monthly": "YYYY-MM",
}


class AnalyticsRepository:
    """Aggregations used by the dashboard"""

    def __init__(self, db: Session):
        self.db = db

    def _in_window(self, query, start_date: datetime, end_date: datetime):
        return query.filter(Order.order_date >= start_date, Order.order_date <= end_date)

    def totals(self, start_date: datetime, end_date: datetime) -> Tuple[int, float, int]:
        """(order count, revenue, distinct customer emails)"""
        query = self.db.query(
            func.count(Order.id),
            func.coalesce(func.sum(Order.total), 0.0),
            func.count(func.distinct(Order.customer_email)),
        )
        count, revenue, customers = self._in_window(query, start_date, end_date).one()
        return int(count), float(revenue), int(customers)

    def count_by(self, column, start_date: datetime, end_date: datetime) -> Dict[str, int]:
        query = self.db.query(column, func.count(Order.id)).group_by(column)
        return {key: int(count) for key, count in self._in_window(query, start_date, end_date).all()}

    def platform_stats(self) -> List[Tuple[str, int, float]]:
        """(platform, order count, revenue) sorted by revenue"""
        revenue = func.coalesce(func.sum(Order.total), 0.0)
        rows = self.db.query(
            Order.platform,
            func.count(Order.id),
            revenue,
        ).group_by(Order.platform).order_by(desc(revenue)).all()
        return [(platform, int(count), float(total)) for platform, count, total in rows]

    def _bucket(self, period: str):
        """Order date truncated to a day, week or month, as text"""
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return func.strftime(SQLITE_PERIOD_FORMATS[period], Order.order_date)
        return func.to_char(Order.order_date, POSTGRES_PERIOD_FORMATS[period])

    def revenue_by_period(self, period: str, start_date: datetime, end_date: datetime) -> List[Tuple[str, float, int]]:
        """(bucket, revenue, order count) in ascending bucket order"""
        bucket = self._bucket(period).label("bucket")
        query = self.db.query(
            bucket,
            func.coalesce(func.sum(Order.total), 0.0),
            func.count(Order.id),
        )
        rows = self._in_window(query, start_date, end_date).group_by(bucket).order_by(bucket).all()
        return [(key, float(revenue), int(count)) for key, revenue, count in rows]
