import asyncio

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from order_hub.exceptions import PersistenceError, UnsupportedPlatformError, UpstreamAdapterError, ValidationError
from order_hub.database import Base, init_db
from order_hub.models.order import Order
from order_hub.platforms import MockOrderSource, StatusMapper, build_adapters
from order_hub.services.platform_integration import PlatformIntegrationService

from tests.payloads import amazon_webhook
from tests.sources import FailingSource, SlowSource


def make_integration(session_factory, source, timeout=None):
    return PlatformIntegrationService(build_adapters(source, StatusMapper()), session_factory, adapter_timeout=timeout)


@pytest.mark.asyncio
async def test_fetch_all_platforms(integration):
    results = await integration.fetch_all_platforms()

    assert set(results) == {"amazon", "blinkit", "flipkart", "swiggy", "organic"}
    assert all(r.success and r.count == 1 for r in results.values())


@pytest.mark.asyncio
async def test_fan_out_isolates_failing_adapter(session_factory):
    integration = make_integration(session_factory, FailingSource(["blinkit"]))
    results = await integration.fetch_all_platforms()

    assert results["blinkit"].success is False
    assert results["blinkit"].error_code == "upstream_error"
    assert "blinkit API down" in results["blinkit"].error
    for platform in ("amazon", "flipkart", "swiggy", "organic"):
        assert results[platform].success is True
        assert results[platform].count == 1


@pytest.mark.asyncio
async def test_fetch_platform_unknown(integration):
    with pytest.raises(UnsupportedPlatformError):
        await integration.fetch_platform("ebay")


@pytest.mark.asyncio
async def test_fetch_platform_wraps_adapter_errors(session_factory):
    integration = make_integration(session_factory, FailingSource(["amazon"]))
    with pytest.raises(UpstreamAdapterError) as exc_info:
        await integration.fetch_platform("amazon")
    assert exc_info.value.platform == "amazon"


@pytest.mark.asyncio
async def test_fetch_platform_times_out(session_factory):
    integration = make_integration(session_factory, SlowSource(), timeout=0.05)
    with pytest.raises(UpstreamAdapterError) as exc_info:
        await integration.fetch_platform("swiggy")
    assert "timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_ingest_webhook_create_then_update(integration, db):
    created = await integration.ingest_webhook("amazon", amazon_webhook())
    assert created.action == "created"
    assert created.order.platform == "amazon"
    assert created.order.order_number.startswith("AMZ-")
    assert created.order.status == "confirmed"
    assert created.order.items[0].total_price == 2500
    assert created.order.total == 2500

    updated = await integration.ingest_webhook("amazon", amazon_webhook(status="shipped"))
    assert updated.action == "updated"
    assert updated.order.id == created.order.id
    assert updated.order.status == "dispatched"
    assert len(updated.order.status_history) == len(created.order.status_history) + 1
    assert db.query(Order).count() == 1


@pytest.mark.asyncio
async def test_ingest_webhook_invalid_payload(integration):
    with pytest.raises(ValidationError):
        await integration.ingest_webhook("amazon", {"amazon_order_id": "only-id"})


@pytest.mark.asyncio
async def test_ingest_webhook_unknown_platform(integration):
    with pytest.raises(UnsupportedPlatformError):
        await integration.ingest_webhook("ebay", amazon_webhook())


def test_save_order_store_failure(integration, engine):
    order = integration.get_adapter("amazon").transform_webhook(amazon_webhook())
    Base.metadata.drop_all(bind=engine)
    with pytest.raises(PersistenceError):
        integration.save_order(order)


@pytest.mark.asyncio
async def test_save_orders_counts(integration):
    orders = await integration.fetch_platform("amazon")
    first = integration.save_orders(orders)
    second = integration.save_orders(orders)
    assert (first.created, first.updated) == (1, 0)
    assert (second.created, second.updated) == (0, 1)


@pytest.mark.asyncio
async def test_update_order_status_on_platform(integration):
    ack = await integration.update_order_status_on_platform("flipkart", "FLP-2024-001", "dispatched")
    assert ack.success is True
    with pytest.raises(UnsupportedPlatformError):
        await integration.update_order_status_on_platform("ebay", "1", "dispatched")


@pytest.fixture
def file_session_factory(tmp_path):
    """SQLite file database where each thread gets its own connection"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    init_db(bind=engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False)
    finally:
        engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_webhooks_for_one_order(file_session_factory):
    integration = make_integration(file_session_factory, MockOrderSource())

    results = await asyncio.gather(
        integration.ingest_webhook("amazon", amazon_webhook()),
        integration.ingest_webhook("amazon", amazon_webhook()),
    )

    assert sorted(r.action for r in results) == ["created", "updated"]
    assert results[0].order.id == results[1].order.id
    with file_session_factory() as db:
        order = db.query(Order).one()
        assert order.version == 2
        assert [h.status for h in order.status_history] == ["confirmed"]
