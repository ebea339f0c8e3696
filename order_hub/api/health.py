"""
Health check endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone

from order_hub import __version__
from order_hub.api.deps import get_ingestion_scheduler
from order_hub.database import get_db
from order_hub.config import settings
from order_hub.services.order_ingestion import OrderIngestionScheduler

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    scheduler: OrderIngestionScheduler = Depends(get_ingestion_scheduler)
):
    """
    Health check endpoint
    
    Checks:
    - Service status
    - Database connectivity
    - Ingestion scheduler state
    """
    # Check database
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
    
    scheduler_status = scheduler.get_status()
    
    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "database": db_status,
        "scheduler": scheduler_status.model_dump(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/")
def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": __version__,
        "docs": "/docs"
    }
