"""
Order Service - Business Logic Layer
"""
import asyncio
import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from order_hub.exceptions import IngestionError, ValidationError
from order_hub.logger import get_logger
from order_hub.platforms.layouts import LAYOUTS
from order_hub.repositories.order_repository import OrderRepository
from order_hub.schemas.order import (
    OrderCreate,
    OrderFinancials,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderUpdate,
    Pagination,
)
from order_hub.services.platform_integration import PlatformIntegrationService

logger = get_logger(__name__)


class DuplicateOrderError(ValueError):
    """Order number or (platform, platform_order_id) already exists"""
    pass


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session, integration: Optional[PlatformIntegrationService] = None):
        self.repository = OrderRepository(db)
        self.integration = integration

    def get_all_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        sort_by: str = "order_date",
        sort_order: str = "desc",
        platform: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> OrderListResponse:
        """Get orders with filtering, sorting and pagination"""
        filters = dict(
            platform=platform,
            status=status,
            start_date=start_date,
            end_date=end_date,
            search=search,
        )
        orders = self.repository.get_all(skip=skip, limit=limit, sort_by=sort_by, sort_order=sort_order, **filters)
        total = self.repository.count(**filters)

        return OrderListResponse(
            orders=[OrderResponse.model_validate(o) for o in orders],
            total=total,
            pagination=Pagination(skip=skip, limit=limit, total=total)
        )

    def get_order_by_id(self, order_id: int) -> Optional[OrderResponse]:
        """Get order by ID"""
        order = self.repository.get_by_id(order_id)
        if not order:
            return None
        return OrderResponse.model_validate(order)

    def get_orders_by_customer(self, email: str) -> List[OrderResponse]:
        """Get orders by customer email"""
        orders = self.repository.get_by_customer_email(email)
        return [OrderResponse.model_validate(o) for o in orders]

    def create_order(self, order_data: OrderCreate) -> OrderResponse:
        """
        Create an order manually

        The order number defaults to the platform prefix plus a random suffix.

        Raises:
            DuplicateOrderError: If the order number or external key is taken
        """
        order_number = order_data.order_number or (
            f"{LAYOUTS[order_data.platform].order_prefix}-{uuid.uuid4().hex[:10].upper()}"
        )
        try:
            order = self.repository.create(order_data, order_number)
        except IntegrityError:
            self.repository.db.rollback()
            raise DuplicateOrderError(
                f"Order {order_number} or {order_data.platform}/{order_data.platform_order_id} already exists"
            )

        logger.info(f"Order created manually: {order.order_number}")
        return OrderResponse.model_validate(order)

    def update_order(self, order_id: int, order_data: OrderUpdate) -> Optional[OrderResponse]:
        """
        Edit an order. Only the fields sent are changed.

        Items sent without a subtotal replace the subtotal with their sum.

        Raises:
            ValidationError: If the merged money fields do not add up
        """
        order = self.repository.get_by_id(order_id)
        if not order:
            return None

        changes = order_data.model_dump(
            mode="json",
            exclude_unset=True,
            exclude_none=True,
            exclude={"actor", "order_date", "customer"}
        )
        if order_data.order_date is not None:
            changes["order_date"] = order_data.order_date
        if order_data.customer is not None:
            customer = order_data.customer.model_dump(mode="json")
            changes.update(
                customer_name=customer["name"],
                customer_email=customer["email"],
                customer_phone=customer["phone"],
                customer_address=customer["address"],
            )
        if "items" in changes and "subtotal" not in changes:
            changes["subtotal"] = sum(item["total_price"] for item in changes["items"])

        money = {
            field: changes.get(field, getattr(order, field))
            for field in ("subtotal", "tax", "shipping_fee", "discount", "total", "currency")
        }
        try:
            OrderFinancials.model_validate(money)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Order {order.order_number}: {e.errors()[0]['msg']}",
                fields=[".".join(str(p) for p in err["loc"]) or "total" for err in e.errors()]
            )

        edited = ", ".join(sorted(changes))
        order = self.repository.update(order_id, changes, actor=order_data.actor)
        logger.info(f"Order edited: {order.order_number} ({edited})")
        return OrderResponse.model_validate(order)

    async def update_order_status(self, order_id: int, status_data: OrderStatusUpdate) -> Optional[OrderResponse]:
        """
        Update order status and push it to the platform

        The platform write outcome is recorded in sync_status; a failed
        push does not fail the update.

        Returns:
            Updated order or None if not found
        """
        order = await asyncio.to_thread(
            self.repository.update_status,
            order_id,
            status_data.status,
            actor=status_data.actor,
            notes=status_data.notes
        )
        if not order:
            return None

        if self.integration is not None:
            try:
                ack = await self.integration.update_order_status_on_platform(
                    order.platform,
                    order.platform_order_id,
                    order.status
                )
                sync_status = "synced" if ack.success else "failed"
            except IngestionError as e:
                logger.warning(f"Status sync to {order.platform} failed for {order.order_number}: {e}")
                sync_status = "failed"
            order = await asyncio.to_thread(self.repository.set_sync_status, order.id, sync_status)

        return OrderResponse.model_validate(order)

    def delete_order(self, order_id: int) -> bool:
        """Delete order"""
        return self.repository.delete(order_id)
