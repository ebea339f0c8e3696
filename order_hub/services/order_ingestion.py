"""
Order Ingestion Scheduler - periodic sweeps, manual fetches and webhooks
"""
import asyncio
from typing import Callable, Dict, Iterable, List, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.orm import Session

from order_hub.config import Settings, settings as default_settings
from order_hub.exceptions import IngestionError, UnsupportedPlatformError, ValidationError
from order_hub.logger import get_logger
from order_hub.platforms.adapter import build_adapters
from order_hub.platforms.sources import OrderSource, build_order_source
from order_hub.platforms.status_maps import StatusMapper
from order_hub.schemas.ingestion import FetchSummary, PlatformFetchResult, SchedulerStatus, WebhookResult
from order_hub.services.platform_integration import PlatformIntegrationService

logger = get_logger(__name__)

FETCH_ALL_JOB = "fetch_all_orders"
FETCH_PRIORITY_JOB = "fetch_priority_platforms"


class OrderIngestionScheduler:
    """
    Drives the integration service on two interval jobs and handles
    on-demand ingestion. Owned by the application's startup hook.
    """

    def __init__(
        self,
        integration: PlatformIntegrationService,
        fetch_all_interval_minutes: int = 15,
        priority_interval_minutes: int = 30,
        priority_platforms: Iterable[str] = ("amazon", "flipkart"),
    ):
        self.integration = integration
        self.fetch_all_interval_minutes = fetch_all_interval_minutes
        self.priority_interval_minutes = priority_interval_minutes
        self.priority_platforms = list(priority_platforms)
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def start(self) -> None:
        """Register and start both sweep jobs. Must be called from a running event loop."""
        if self.is_running:
            logger.info("Order ingestion scheduler is already running")
            return

        logger.info("Starting order ingestion scheduler...")
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            self.sweep_all_platforms,
            "interval",
            minutes=self.fetch_all_interval_minutes,
            id=FETCH_ALL_JOB,
            name=FETCH_ALL_JOB,
            max_instances=1,
            coalesce=True,
        )
        scheduler.add_job(
            self.sweep_priority_platforms,
            "interval",
            minutes=self.priority_interval_minutes,
            id=FETCH_PRIORITY_JOB,
            name=FETCH_PRIORITY_JOB,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            f"Jobs scheduled: {FETCH_ALL_JOB} every {self.fetch_all_interval_minutes}m, "
            f"{FETCH_PRIORITY_JOB} every {self.priority_interval_minutes}m {self.priority_platforms}"
        )

    def stop(self) -> None:
        if not self.is_running:
            logger.info("Order ingestion scheduler is not running")
            return

        logger.info("Stopping order ingestion scheduler...")
        self._scheduler.remove_all_jobs()
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Order ingestion scheduler stopped")

    def get_status(self) -> SchedulerStatus:
        jobs = self._scheduler.get_jobs() if self._scheduler else []
        return SchedulerStatus(
            running=self.is_running,
            active_job_count=len(jobs),
            job_names=[job.id for job in jobs],
        )

    async def _save_platform(self, platform: str, result: PlatformFetchResult) -> PlatformFetchResult:
        """Upsert a successful platform fetch; failures are logged and recorded"""
        if not result.success:
            logger.warning(f"{platform}: {result.error}")
            return result

        summary = await asyncio.to_thread(self.integration.save_orders, result.orders)
        counts = {"created": summary.created, "updated": summary.updated}
        if summary.error:
            logger.error(
                f"{platform}: saving orders failed after {summary.created + summary.updated} "
                f"of {result.count}: {summary.error}"
            )
            return result.model_copy(update={
                **counts,
                "success": False,
                "error": summary.error,
                "error_code": summary.error_code,
            })

        logger.info(f"{platform}: {result.count} orders fetched ({summary.created} created, {summary.updated} updated)")
        return result.model_copy(update=counts)

    async def _sweep(self, platforms: Optional[List[str]] = None) -> FetchSummary:
        fetched = await self.integration.fetch_all_platforms(platforms)
        results: Dict[str, PlatformFetchResult] = {}
        for platform, result in fetched.items():
            results[platform] = await self._save_platform(platform, result)
        ok = [r for r in results.values() if r.success]
        summary = FetchSummary(
            success=True,
            total_orders=sum(r.count for r in ok),
            success_count=len(ok),
            error_count=len(results) - len(ok),
            results=results,
        )
        logger.info(
            f"Order ingestion completed: {summary.total_orders} orders processed, "
            f"{summary.success_count} platforms successful, {summary.error_count} platforms failed"
        )
        return summary

    async def sweep_all_platforms(self) -> FetchSummary:
        """Fetch and upsert orders from every platform"""
        logger.info("Running sweep: all platforms")
        return await self._sweep()

    async def sweep_priority_platforms(self) -> FetchSummary:
        """Fetch and upsert orders from the priority (high-volume) platforms"""
        logger.info(f"Running sweep: priority platforms {self.priority_platforms}")
        return await self._sweep(self.priority_platforms)

    async def trigger_manual_fetch(self, platform: Optional[str] = None) -> FetchSummary:
        """
        Fetch and upsert on demand, for one platform or all of them

        Errors are returned in the summary, not raised.
        """
        if platform is None:
            logger.info("Manually triggering fetch for all platforms...")
            return await self.sweep_all_platforms()

        logger.info(f"Manually triggering fetch for {platform}...")
        try:
            self.integration.get_adapter(platform)
        except UnsupportedPlatformError as e:
            return FetchSummary(success=False, platform=platform, error=str(e), error_code=e.error_code)

        summary = await self._sweep([platform])
        result = summary.results[platform]
        return summary.model_copy(update={
            "success": result.success,
            "platform": platform,
            "error": result.error,
            "error_code": result.error_code,
        })

    async def process_webhook(self, platform: str, payload) -> WebhookResult:
        """
        Validate required fields then ingest one webhook payload

        Signature verification is not performed. Errors are returned as a
        failed WebhookResult.
        """
        logger.info(f"Processing webhook from {platform}...")
        try:
            adapter = self.integration.get_adapter(platform)
            if not isinstance(payload, dict):
                raise ValidationError("Webhook body must be a JSON object")
            missing = adapter.missing_fields(payload)
            if missing:
                raise ValidationError(f"Invalid webhook data, missing: {', '.join(missing)}", fields=missing)

            result = await self.integration.ingest_webhook(platform, payload)
        except IngestionError as e:
            logger.error(f"Error processing webhook from {platform}: {e}")
            return WebhookResult(
                success=False,
                error=str(e),
                error_code=e.error_code,
                fields=getattr(e, "fields", []),
            )

        logger.info(f"Webhook processed: {result.action} order {result.order.order_number}")
        return WebhookResult(success=True, action=result.action, order=result.order)


def build_ingestion_scheduler(
    session_factory: Callable[[], Session],
    config: Settings = default_settings,
    source: Optional[OrderSource] = None,
) -> OrderIngestionScheduler:
    """Wire source, adapters, integration service and scheduler from settings"""
    adapters = build_adapters(
        source or build_order_source(config.ORDER_SOURCE),
        StatusMapper(policy=config.UNMAPPED_STATUS_POLICY),
    )
    integration = PlatformIntegrationService(
        adapters,
        session_factory,
        adapter_timeout=config.ADAPTER_TIMEOUT_SECONDS,
    )
    return OrderIngestionScheduler(
        integration,
        fetch_all_interval_minutes=config.FETCH_ALL_INTERVAL_MINUTES,
        priority_interval_minutes=config.PRIORITY_FETCH_INTERVAL_MINUTES,
        priority_platforms=config.PRIORITY_PLATFORMS,
    )
