"""
Order sources - where platform adapters get raw order payloads from
"""
import copy
import httpx
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from order_hub.config import settings
from order_hub.exceptions import UpstreamAdapterError
from order_hub.logger import get_logger
from order_hub.platforms.mock_data import MOCK_ORDERS

logger = get_logger(__name__)


class OrderSource(ABC):
    """Narrow I/O interface behind every platform adapter"""

    @abstractmethod
    async def fetch(self, platform: str) -> List[Dict]:
        """Return the platform's current order backlog as raw payloads"""

    @abstractmethod
    async def notify(self, platform: str, order_id: str, status: str) -> Dict:
        """Push a status change back to the platform"""


class MockOrderSource(OrderSource):
    """Returns fixed mock backlogs and acknowledges every status update"""

    def __init__(self, orders: Optional[Dict[str, List[Dict]]] = None):
        self.orders = orders if orders is not None else MOCK_ORDERS

    async def fetch(self, platform: str) -> List[Dict]:
        logger.info(f"Fetching orders from {platform} (mock)")
        return copy.deepcopy(self.orders.get(platform, []))

    async def notify(self, platform: str, order_id: str, status: str) -> Dict:
        logger.info(f"Updating {platform} order {order_id} status to {status} (mock)")
        return {"success": True, "message": "Status updated successfully"}


class HttpOrderSource(OrderSource):
    """Client for platform order APIs with retry on transport errors"""

    def __init__(
        self,
        base_urls: Optional[Dict[str, str]] = None,
        api_keys: Optional[Dict[str, str]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_urls = base_urls if base_urls is not None else settings.PLATFORM_API_URLS
        self.api_keys = api_keys if api_keys is not None else settings.PLATFORM_API_KEYS
        self.timeout = timeout
        self.transport = transport

    def _base_url(self, platform: str) -> str:
        base_url = self.base_urls.get(platform)
        if not base_url:
            raise UpstreamAdapterError(platform, "no API URL configured")
        return base_url.rstrip("/")

    def _headers(self, platform: str) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        api_key = self.api_keys.get(platform)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        reraise=True
    )
    async def _get_orders(self, platform: str) -> httpx.Response:
        async with self._client() as client:
            return await client.get(f"{self._base_url(platform)}/orders", headers=self._headers(platform))

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        reraise=True
    )
    async def _post_status(self, platform: str, order_id: str, status: str) -> httpx.Response:
        async with self._client() as client:
            return await client.post(
                f"{self._base_url(platform)}/orders/{order_id}/status",
                json={"status": status},
                headers=self._headers(platform)
            )

    async def fetch(self, platform: str) -> List[Dict]:
        """
        Fetch the order backlog of a platform

        Accepts either a bare JSON list or an object with an "orders" list.

        Raises:
            UpstreamAdapterError: On transport failure, non-200 status or unexpected body
        """
        try:
            response = await self._get_orders(platform)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise UpstreamAdapterError(platform, f"API unavailable: {e}")

        if response.status_code != 200:
            raise UpstreamAdapterError(platform, f"Unexpected status code: {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            raise UpstreamAdapterError(platform, "Response body is not JSON")

        orders = body.get("orders") if isinstance(body, dict) else body
        if not isinstance(orders, list):
            raise UpstreamAdapterError(platform, "Response does not contain an order list")
        return orders

    async def notify(self, platform: str, order_id: str, status: str) -> Dict:
        try:
            response = await self._post_status(platform, order_id, status)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise UpstreamAdapterError(platform, f"API unavailable: {e}")

        if response.status_code not in (200, 201, 202, 204):
            raise UpstreamAdapterError(platform, f"Unexpected status code: {response.status_code}")
        return {"success": True, "message": f"Status accepted with HTTP {response.status_code}"}


def build_order_source(kind: str = None) -> OrderSource:
    kind = kind or settings.ORDER_SOURCE
    if kind == "http":
        return HttpOrderSource()
    return MockOrderSource()
