"""
Field layouts of each platform's order payload.

Paths are dotted ("customer.email") and resolved against the raw JSON body.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class PayloadLayout:
    order_prefix: str
    order_id: str
    order_date: str
    status: str
    customer_name: str
    customer_email: str
    customer_phone: str
    item_product_id: str
    item_name: str
    items: str = "items"
    total: str = "total_amount"
    item_quantity: str = "quantity"
    item_price: str = "price"
    item_sku: str = "sku"
    item_category: str = "category"
    tax: str = "tax"
    shipping_fee: str = "shipping_fee"
    discount: str = "discount"
    
    @property
    def required_fields(self) -> Tuple[str, ...]:
        return (
            self.order_id,
            self.order_date,
            self.status,
            self.customer_name,
            self.customer_email,
            self.items,
            self.total,
        )
    
    @property
    def required_item_fields(self) -> Tuple[str, ...]:
        return (self.item_product_id, self.item_name, self.item_quantity, self.item_price)


LAYOUTS: Dict[str, PayloadLayout] = {
    "amazon": PayloadLayout(
        order_prefix="AMZ",
        order_id="amazon_order_id",
        order_date="order_date",
        status="status",
        customer_name="buyer_name",
        customer_email="buyer_email",
        customer_phone="buyer_phone",
        item_product_id="asin",
        item_name="title",
        shipping_fee="shipping_charge",
        discount="promotion_discount",
    ),
    "blinkit": PayloadLayout(
        order_prefix="BLK",
        order_id="blinkit_order_id",
        order_date="created_at",
        status="order_status",
        customer_name="customer_name",
        customer_email="customer_email",
        customer_phone="customer_phone",
        item_product_id="product_id",
        item_name="product_name",
        shipping_fee="delivery_fee",
    ),
    "flipkart": PayloadLayout(
        order_prefix="FLP",
        order_id="flipkart_order_id",
        order_date="order_date",
        status="status",
        customer_name="customer.name",
        customer_email="customer.email",
        customer_phone="customer.phone",
        item_product_id="product_id",
        item_name="title",
    ),
    "swiggy": PayloadLayout(
        order_prefix="SWG",
        order_id="swiggy_order_id",
        order_date="created_at",
        status="status",
        customer_name="customer.name",
        customer_email="customer.email",
        customer_phone="customer.phone",
        item_product_id="item_id",
        item_name="item_name",
        tax="taxes",
        shipping_fee="delivery_fee",
    ),
    "organic": PayloadLayout(
        order_prefix="ORG",
        order_id="order_id",
        order_date="created_at",
        status="status",
        customer_name="customer.name",
        customer_email="customer.email",
        customer_phone="customer.phone",
        item_product_id="product_id",
        item_name="name",
        shipping_fee="shipping",
    ),
}


def resolve(payload: Any, path: str, default: Any = None) -> Any:
    """Walk a dotted path through nested dicts"""
    value = payload
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


def is_blank(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def missing_fields(payload: Any, paths) -> List[str]:
    """Paths that are absent or empty in payload"""
    if not isinstance(payload, dict):
        return list(paths)
    return [p for p in paths if is_blank(resolve(payload, p))]
