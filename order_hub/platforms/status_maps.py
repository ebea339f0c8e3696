"""
Per-platform status vocabularies mapped onto the canonical order lifecycle
"""
from typing import Dict

from order_hub.exceptions import ValidationError
from order_hub.logger import get_logger

logger = get_logger(__name__)

FALLBACK_STATUS = "pending"

STATUS_MAPS: Dict[str, Dict[str, str]] = {
    "amazon": {
        "pending": "pending",
        "confirmed": "confirmed",
        "shipped": "dispatched",
        "delivered": "delivered",
        "cancelled": "cancelled",
        "returned": "returned",
    },
    "blinkit": {
        "confirmed": "confirmed",
        "preparing": "processing",
        "out_for_delivery": "dispatched",
        "delivered": "delivered",
        "cancelled": "cancelled",
    },
    "flipkart": {
        "confirmed": "confirmed",
        "processing": "processing",
        "shipped": "dispatched",
        "delivered": "delivered",
        "cancelled": "cancelled",
        "returned": "returned",
    },
    "swiggy": {
        "confirmed": "confirmed",
        "preparing": "processing",
        "out_for_delivery": "dispatched",
        "delivered": "delivered",
        "cancelled": "cancelled",
    },
    "organic": {
        "pending": "pending",
        "confirmed": "confirmed",
        "processing": "processing",
        "shipped": "dispatched",
        "delivered": "delivered",
        "cancelled": "cancelled",
        "returned": "returned",
    },
}


class StatusMapper:
    """
    Looks up canonical statuses in a platform -> {source -> canonical} table.

    policy="fallback" collapses unknown source statuses to "pending" (and logs
    a warning); policy="reject" raises ValidationError instead.
    """
    
    def __init__(self, tables: Dict[str, Dict[str, str]] = None, policy: str = "fallback"):
        if policy not in ("fallback", "reject"):
            raise ValueError(f"Unknown unmapped status policy: {policy}")
        self.tables = tables if tables is not None else STATUS_MAPS
        self.policy = policy
    
    def map(self, platform: str, source_status) -> str:
        table = self.tables.get(platform, {})
        key = str(source_status).strip().lower() if source_status is not None else ""
        if key in table:
            return table[key]
        
        if self.policy == "reject":
            raise ValidationError(
                f"Unmapped {platform} status: {source_status!r}",
                fields=["status"]
            )
        logger.warning(f"Unmapped {platform} status {source_status!r}, defaulting to '{FALLBACK_STATUS}'")
        return FALLBACK_STATUS
