"""
Webhook endpoints for platform integration

Platforms push order notifications here. Signatures are not verified.
"""
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from typing import Any, Optional

from order_hub.api.deps import get_ingestion_scheduler
from order_hub.logger import get_logger
from order_hub.schemas.ingestion import ManualFetchRequest
from order_hub.services.order_ingestion import OrderIngestionScheduler

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

ERROR_STATUS_CODES = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "unsupported_platform": status.HTTP_404_NOT_FOUND,
    "upstream_error": status.HTTP_502_BAD_GATEWAY,
    "persistence_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: Optional[str], error_code: Optional[str], **extra) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"success": False, "error": error, "error_code": error_code, **extra},
    )


@router.get("/status", summary="Get ingestion scheduler status")
def get_status(scheduler: OrderIngestionScheduler = Depends(get_ingestion_scheduler)):
    """Running flag, active job count and job names"""
    return {"success": True, "status": scheduler.get_status().model_dump()}


@router.post("/trigger-fetch", summary="Manually trigger order fetching")
async def trigger_fetch(
    request: Optional[ManualFetchRequest] = None,
    scheduler: OrderIngestionScheduler = Depends(get_ingestion_scheduler)
):
    """
    Fetch and upsert orders now

    - **platform**: one platform, or all platforms when omitted
    """
    platform = request.platform if request else None
    logger.info(f"Manually triggering fetch for platform: {platform or 'all'}")
    result = await scheduler.trigger_manual_fetch(platform)
    if not result.success:
        return error_response(result.error, result.error_code, result=result.model_dump(mode="json"))

    return {
        "success": True,
        "message": "Fetch completed successfully",
        "result": result.model_dump(mode="json"),
    }


@router.post("/{platform}", summary="Receive a platform order webhook")
async def receive_webhook(
    platform: str,
    payload: Any = Body(...),
    scheduler: OrderIngestionScheduler = Depends(get_ingestion_scheduler)
):
    """
    Ingest one order notification from a platform

    - **platform**: amazon, blinkit, flipkart, swiggy or organic
    """
    result = await scheduler.process_webhook(platform, payload)
    if not result.success:
        return error_response(result.error, result.error_code, fields=result.fields)

    return {
        "success": True,
        "action": result.action,
        "message": f"Order {result.action}: {result.order.order_number}",
        "order": result.order.model_dump(mode="json"),
    }
