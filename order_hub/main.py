"""
FastAPI Application Entry Point - Order Hub
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from order_hub import __version__
from order_hub.config import settings
from order_hub.database import SessionLocal, init_db
from order_hub.logger import get_logger
from order_hub.api import analytics, health, orders, webhooks
from order_hub.services.order_ingestion import build_ingestion_scheduler

logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Order Hub",
    description="Collects marketplace orders into one canonical order store",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(orders.router)
app.include_router(webhooks.router)
app.include_router(analytics.router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database and the ingestion scheduler"""
    logger.info(f"Starting {settings.SERVICE_NAME}...")
    init_db()
    logger.info("Database initialized")
    
    scheduler = build_ingestion_scheduler(SessionLocal, settings)
    app.state.ingestion_scheduler = scheduler
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    logger.info(f"Order source: {settings.ORDER_SOURCE}, scheduler: {scheduler.get_status().model_dump()}")
    logger.info(f"{settings.SERVICE_NAME} is running on port {settings.SERVICE_PORT}")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the ingestion scheduler"""
    logger.info(f"Shutting down {settings.SERVICE_NAME}...")
    scheduler = getattr(app.state, "ingestion_scheduler", None)
    if scheduler is not None:
        scheduler.stop()
