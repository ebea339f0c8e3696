import httpx
import pytest

from order_hub.exceptions import UpstreamAdapterError
from order_hub.config import settings
from order_hub.platforms import HttpOrderSource, MockOrderSource, OrderSource, build_order_source

from tests.payloads import mock_payload

BASE_URLS = {"amazon": "https://amazon.test/api/"}


def http_source(handler):
    return HttpOrderSource(
        base_urls=BASE_URLS,
        api_keys={"amazon": "secret"},
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_accepts_bare_list():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[mock_payload("amazon")])

    orders = await http_source(handler).fetch("amazon")

    assert orders[0]["amazon_order_id"] == "AMZ-2024-001"
    assert seen["url"] == "https://amazon.test/api/orders"
    assert seen["auth"] == "Bearer secret"


@pytest.mark.asyncio
async def test_fetch_accepts_orders_envelope():
    def handler(request):
        return httpx.Response(200, json={"orders": [mock_payload("amazon")]})

    orders = await http_source(handler).fetch("amazon")
    assert len(orders) == 1


@pytest.mark.asyncio
async def test_fetch_non_200_raises():
    source = http_source(lambda request: httpx.Response(503, json={"message": "down"}))
    with pytest.raises(UpstreamAdapterError) as exc_info:
        await source.fetch("amazon")
    assert "503" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_non_json_raises():
    source = http_source(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(UpstreamAdapterError):
        await source.fetch("amazon")


@pytest.mark.asyncio
async def test_fetch_unexpected_shape_raises():
    source = http_source(lambda request: httpx.Response(200, json={"data": []}))
    with pytest.raises(UpstreamAdapterError):
        await source.fetch("amazon")


@pytest.mark.asyncio
async def test_fetch_without_configured_url():
    source = http_source(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(UpstreamAdapterError) as exc_info:
        await source.fetch("blinkit")
    assert exc_info.value.platform == "blinkit"


@pytest.mark.asyncio
async def test_notify_posts_status():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(202)

    ack = await http_source(handler).notify("amazon", "AMZ-2024-001", "dispatched")

    assert ack["success"] is True
    assert seen["method"] == "POST"
    assert seen["path"] == "/api/orders/AMZ-2024-001/status"
    assert b"dispatched" in seen["body"]


@pytest.mark.asyncio
async def test_notify_rejected():
    source = http_source(lambda request: httpx.Response(400))
    with pytest.raises(UpstreamAdapterError):
        await source.notify("amazon", "AMZ-2024-001", "dispatched")


@pytest.mark.asyncio
async def test_mock_source_returns_copies():
    source = MockOrderSource()
    first = await source.fetch("swiggy")
    first[0]["status"] = "changed"
    second = await source.fetch("swiggy")
    assert second[0]["status"] == "confirmed"
    assert await source.fetch("ebay") == []


def test_build_order_source():
    assert isinstance(build_order_source("mock"), MockOrderSource)
    assert isinstance(build_order_source("http"), HttpOrderSource)


def test_source_must_implement_interface():
    class FetchOnlySource(OrderSource):
        async def fetch(self, platform):
            return []

    with pytest.raises(TypeError):
        FetchOnlySource()


@pytest.mark.asyncio
async def test_fetch_retries_connect_error():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[mock_payload("amazon")])

    orders = await http_source(handler).fetch("amazon")

    assert len(calls) == 2
    assert orders[0]["amazon_order_id"] == "AMZ-2024-001"


@pytest.mark.asyncio
async def test_notify_retries_timeout():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200)

    ack = await http_source(handler).notify("amazon", "AMZ-2024-001", "delivered")

    assert len(calls) == 2
    assert ack["success"] is True


@pytest.mark.asyncio
async def test_fetch_gives_up_after_max_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamAdapterError) as exc_info:
        await http_source(handler).fetch("amazon")

    assert len(calls) == settings.MAX_RETRIES
    assert "API unavailable" in str(exc_info.value)
