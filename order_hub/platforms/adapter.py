"""
Platform adapter - translates platform payloads into normalized orders
"""
from typing import Any, Dict, List, Optional
from pydantic import ValidationError as PydanticValidationError

from order_hub.exceptions import ValidationError
from order_hub.logger import get_logger
from order_hub.platforms.layouts import LAYOUTS, PayloadLayout, missing_fields, resolve
from order_hub.platforms.sources import OrderSource
from order_hub.platforms.status_maps import StatusMapper
from order_hub.schemas.ingestion import StatusAck
from order_hub.schemas.order import NormalizedOrder

logger = get_logger(__name__)


class PlatformAdapter:
    """
    One adapter per platform. Behavior is driven by data only: the payload
    layout, the status table held by the mapper and the order source.
    """

    def __init__(self, name: str, layout: PayloadLayout, source: OrderSource, status_mapper: StatusMapper):
        self.name = name
        self.layout = layout
        self.source = source
        self.status_mapper = status_mapper

    def __repr__(self):
        return f"<PlatformAdapter(name='{self.name}')>"

    def missing_fields(self, payload: Any) -> List[str]:
        """Required top-level fields absent from payload"""
        return missing_fields(payload, self.layout.required_fields)

    def order_number_for(self, platform_order_id: str) -> str:
        return f"{self.layout.order_prefix}-{platform_order_id}"

    def map_status(self, source_status: Any) -> str:
        return self.status_mapper.map(self.name, source_status)

    async def fetch_orders(self) -> List[NormalizedOrder]:
        """Fetch the platform backlog and normalize every payload"""
        payloads = await self.source.fetch(self.name)
        orders = [self.transform_webhook(payload) for payload in payloads]
        logger.info(f"{self.name}: {len(orders)} orders normalized")
        return orders

    async def update_order_status(self, order_id: str, status: str) -> StatusAck:
        ack = await self.source.notify(self.name, order_id, status)
        return StatusAck(**ack)

    def transform_webhook(self, payload: Dict[str, Any]) -> NormalizedOrder:
        """
        Map one platform payload into the canonical order shape.

        Item total_price is recomputed from price x quantity, subtotal is
        the sum of item totals.

        Raises:
            ValidationError: If a required field is absent or a value is malformed
        """
        missing = self.missing_fields(payload)
        if missing:
            raise ValidationError(
                f"Invalid {self.name} payload, missing: {', '.join(missing)}",
                fields=missing
            )

        layout = self.layout
        raw_items = resolve(payload, layout.items)
        if not isinstance(raw_items, list):
            raise ValidationError(f"Invalid {self.name} payload: '{layout.items}' must be a list", fields=[layout.items])

        items = [self._transform_item(index, raw_item) for index, raw_item in enumerate(raw_items)]
        platform_order_id = str(resolve(payload, layout.order_id))

        data = {
            "platform": self.name,
            "platform_order_id": platform_order_id,
            "order_number": self.order_number_for(platform_order_id),
            "order_date": resolve(payload, layout.order_date),
            "status": self.map_status(resolve(payload, layout.status)),
            "customer": {
                "name": resolve(payload, layout.customer_name),
                "email": resolve(payload, layout.customer_email),
                "phone": _optional_str(resolve(payload, layout.customer_phone)),
            },
            "items": items,
            "subtotal": sum(item["total_price"] for item in items),
            **self._charges(payload),
            "total": resolve(payload, layout.total),
            "platform_data": payload,
        }

        try:
            return NormalizedOrder.model_validate(data)
        except PydanticValidationError as e:
            errors = e.errors()
            # order-level errors come from the total check
            fields = [".".join(str(p) for p in err["loc"]) or layout.total for err in errors]
            detail = "; ".join(err["msg"] for err in errors)
            raise ValidationError(f"Invalid {self.name} payload: {detail}", fields=fields)

    def _charges(self, payload: Dict[str, Any]) -> Dict[str, float]:
        """Optional tax, shipping and discount amounts, 0 when absent"""
        charges = {}
        for name in ("tax", "shipping_fee", "discount"):
            path = getattr(self.layout, name)
            value = resolve(payload, path)
            try:
                charges[name] = 0.0 if value is None else float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid {self.name} payload: '{path}' must be numeric", fields=[path])
        return charges

    def _transform_item(self, index: int, raw_item: Any) -> Dict[str, Any]:
        layout = self.layout
        missing = missing_fields(raw_item, layout.required_item_fields)
        if missing:
            fields = [f"{layout.items}.{index}.{field}" for field in missing]
            raise ValidationError(f"Invalid {self.name} item #{index}, missing: {', '.join(missing)}", fields=fields)

        try:
            quantity = _whole_number(resolve(raw_item, layout.item_quantity))
            unit_price = float(resolve(raw_item, layout.item_price))
        except (TypeError, ValueError):
            raise ValidationError(
                f"Invalid {self.name} item #{index}: quantity must be a whole number and price numeric",
                fields=[f"{layout.items}.{index}"]
            )

        return {
            "product_id": str(resolve(raw_item, layout.item_product_id)),
            "name": resolve(raw_item, layout.item_name),
            "quantity": quantity,
            "unit_price": unit_price,
            "total_price": unit_price * quantity,
            "sku": _optional_str(resolve(raw_item, layout.item_sku)),
            "category": _optional_str(resolve(raw_item, layout.item_category)),
        }


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _whole_number(value: Any) -> int:
    """int() of value, refusing booleans and fractional amounts such as 1.9"""
    if isinstance(value, bool):
        raise TypeError("boolean quantity")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"quantity {value!r} is not a whole number")
    return int(number)


def build_adapters(source: OrderSource, status_mapper: StatusMapper) -> Dict[str, PlatformAdapter]:
    """One adapter per known platform layout, sharing source and mapper"""
    return {
        name: PlatformAdapter(name, layout, source, status_mapper)
        for name, layout in LAYOUTS.items()
    }
