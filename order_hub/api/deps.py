"""
Shared FastAPI dependencies
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from order_hub.database import get_db
from order_hub.services.order_ingestion import OrderIngestionScheduler
from order_hub.services.order_service import OrderService


def get_ingestion_scheduler(request: Request) -> OrderIngestionScheduler:
    """Scheduler built by the application's startup hook"""
    return request.app.state.ingestion_scheduler


def get_order_service(
    db: Session = Depends(get_db),
    scheduler: OrderIngestionScheduler = Depends(get_ingestion_scheduler)
) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db, integration=scheduler.integration)
