"""
Platform adapters package
"""
from order_hub.platforms.adapter import PlatformAdapter, build_adapters
from order_hub.platforms.layouts import LAYOUTS, PayloadLayout
from order_hub.platforms.sources import OrderSource, MockOrderSource, HttpOrderSource, build_order_source
from order_hub.platforms.status_maps import STATUS_MAPS, StatusMapper

__all__ = [
    "PlatformAdapter",
    "build_adapters",
    "LAYOUTS",
    "PayloadLayout",
    "OrderSource",
    "MockOrderSource",
    "HttpOrderSource",
    "build_order_source",
    "STATUS_MAPS",
    "StatusMapper"
]
