"""
Platform Integration Service - routes calls to platform adapters and
persists normalized orders
"""
import asyncio
from typing import Callable, Dict, Iterable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from order_hub.exceptions import (
    IngestionError,
    PersistenceError,
    UnsupportedPlatformError,
    UpstreamAdapterError,
)
from order_hub.logger import get_logger
from order_hub.platforms.adapter import PlatformAdapter
from order_hub.repositories.order_repository import OrderRepository
from order_hub.schemas.ingestion import IngestionResult, PlatformFetchResult, SaveSummary, StatusAck
from order_hub.schemas.order import NormalizedOrder, OrderResponse

logger = get_logger(__name__)


class PlatformIntegrationService:
    """Dispatches fetch, webhook and status calls to the right adapter"""

    def __init__(
        self,
        adapters: Dict[str, PlatformAdapter],
        session_factory: Callable[[], Session],
        adapter_timeout: Optional[float] = None,
    ):
        self.adapters = adapters
        self.session_factory = session_factory
        self.adapter_timeout = adapter_timeout

    @property
    def platforms(self) -> List[str]:
        return list(self.adapters)

    def get_adapter(self, platform: str) -> PlatformAdapter:
        adapter = self.adapters.get(platform)
        if adapter is None:
            raise UnsupportedPlatformError(platform)
        return adapter

    async def fetch_platform(self, platform: str) -> List[NormalizedOrder]:
        """
        Fetch normalized orders from one platform

        Raises:
            UnsupportedPlatformError: If platform is not registered
            UpstreamAdapterError: If the adapter fails or exceeds the timeout
        """
        adapter = self.get_adapter(platform)
        try:
            return await asyncio.wait_for(adapter.fetch_orders(), timeout=self.adapter_timeout)
        except UpstreamAdapterError:
            raise
        except asyncio.TimeoutError:
            raise UpstreamAdapterError(platform, f"fetch timed out after {self.adapter_timeout}s")
        except Exception as e:
            raise UpstreamAdapterError(platform, str(e) or e.__class__.__name__)

    async def _fetch_isolated(self, platform: str) -> PlatformFetchResult:
        try:
            orders = await self.fetch_platform(platform)
        except IngestionError as e:
            logger.error(f"Error fetching from {platform}: {e}")
            return PlatformFetchResult(success=False, error=str(e), error_code=e.error_code)
        return PlatformFetchResult(success=True, count=len(orders), orders=orders)

    async def fetch_all_platforms(self, platforms: Optional[Iterable[str]] = None) -> Dict[str, PlatformFetchResult]:
        """
        Fetch orders from every (or the given) platform concurrently.
        One platform's failure is reported in its own result only.
        """
        names = list(platforms) if platforms is not None else self.platforms
        results = await asyncio.gather(*(self._fetch_isolated(name) for name in names))
        return dict(zip(names, results))

    async def update_order_status_on_platform(self, platform: str, order_id: str, status: str) -> StatusAck:
        """
        Push a status change to the platform

        Raises:
            UnsupportedPlatformError: If platform is not registered
            UpstreamAdapterError: If the platform call fails
        """
        adapter = self.get_adapter(platform)
        try:
            return await asyncio.wait_for(
                adapter.update_order_status(order_id, status),
                timeout=self.adapter_timeout
            )
        except UpstreamAdapterError:
            raise
        except asyncio.TimeoutError:
            raise UpstreamAdapterError(platform, f"status update timed out after {self.adapter_timeout}s")
        except Exception as e:
            raise UpstreamAdapterError(platform, str(e) or e.__class__.__name__)

    async def ingest_webhook(self, platform: str, payload: Dict) -> IngestionResult:
        """
        Transform one webhook payload and upsert it

        Raises:
            UnsupportedPlatformError: If platform is not registered
            ValidationError: If the payload is malformed
            PersistenceError: If the store write fails
        """
        adapter = self.get_adapter(platform)
        order = adapter.transform_webhook(payload)
        return await asyncio.to_thread(self.save_order, order, f"webhook:{platform}")

    def save_order(self, order: NormalizedOrder, actor: Optional[str] = None) -> IngestionResult:
        """
        Upsert one order keyed on (platform, platform_order_id)

        Blocking; async callers run it in a worker thread.

        Raises:
            PersistenceError: If the store write fails
        """
        with self.session_factory() as db:
            try:
                saved, created = OrderRepository(db).upsert(order, actor=actor or f"system:{order.platform}")
                response = OrderResponse.model_validate(saved)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error saving order {order.order_number}: {e}")
                raise PersistenceError(f"Could not save order {order.order_number}: {e.__class__.__name__}")

        action = "created" if created else "updated"
        logger.info(f"Order {action}: {response.order_number}")
        return IngestionResult(action=action, order=response)

    def save_orders(self, orders: Iterable[NormalizedOrder], actor: Optional[str] = None) -> SaveSummary:
        """
        Upsert a batch, one transaction per order

        Stops at the first PersistenceError and records it in the summary;
        orders saved before it stay counted.
        """
        summary = SaveSummary()
        for order in orders:
            try:
                result = self.save_order(order, actor=actor)
            except PersistenceError as e:
                summary.error = str(e)
                summary.error_code = e.error_code
                break
            if result.action == "created":
                summary.created += 1
            else:
                summary.updated += 1
        return summary
