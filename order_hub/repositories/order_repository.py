"""
Order Repository - Data Access Layer
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import asc, desc, or_
from sqlalchemy.dialects import postgresql, sqlite

from order_hub.models.order import Order, OrderStatusHistory
from order_hub.schemas.order import NormalizedOrder, OrderCreate

# Columns overwritten when an ingested order already exists
UPSERT_MUTABLE_COLUMNS = (
    "status",
    "order_date",
    "customer_name",
    "customer_email",
    "customer_phone",
    "items",
    "subtotal",
    "tax",
    "shipping_fee",
    "discount",
    "total",
    "currency",
    "platform_data",
    "sync_status",
    "last_synced_at",
    "updated_at",
)

SORTABLE_COLUMNS = {
    "order_date": Order.order_date,
    "total": Order.total,
    "status": Order.status,
    "platform": Order.platform,
    "created_at": Order.created_at,
}

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def order_values(order: NormalizedOrder) -> Dict[str, Any]:
    """Column values of a normalized order"""
    data = order.model_dump(mode="json")
    customer = data["customer"]
    return {
        "platform": order.platform,
        "platform_order_id": order.platform_order_id,
        "order_number": order.order_number,
        "order_date": order.order_date,
        "status": order.status,
        "customer_name": customer["name"],
        "customer_email": customer["email"],
        "customer_phone": customer.get("phone"),
        "customer_address": customer.get("address"),
        "items": data["items"],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shipping_fee": order.shipping_fee,
        "discount": order.discount,
        "total": order.total,
        "currency": order.currency,
        "shipping_info": data.get("shipping_info"),
        "platform_data": data["platform_data"],
    }


class OrderRepository:
    """Repository for Order CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        platform: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        search: Optional[str] = None,
        customer_email: Optional[str] = None,
    ):
        query = self.db.query(Order)
        if platform:
            query = query.filter(Order.platform == platform)
        if status:
            query = query.filter(Order.status == status)
        if start_date:
            query = query.filter(Order.order_date >= start_date)
        if end_date:
            query = query.filter(Order.order_date <= end_date)
        if customer_email:
            query = query.filter(Order.customer_email == customer_email)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Order.order_number.ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_email.ilike(pattern),
                Order.platform_order_id.ilike(pattern),
            ))
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        sort_by: str = "order_date",
        sort_order: str = "desc",
        **filters
    ) -> List[Order]:
        """Get orders matching filters with pagination"""
        column = SORTABLE_COLUMNS.get(sort_by, Order.order_date)
        direction = asc if sort_order == "asc" else desc
        return self._filtered(**filters).order_by(
            direction(column), desc(Order.id)
        ).offset(skip).limit(limit).all()

    def count(self, **filters) -> int:
        """Get total count of orders matching filters"""
        return self._filtered(**filters).count()

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        return self.db.query(Order).populate_existing().filter(Order.id == order_id).first()

    def get_by_external_key(self, platform: str, platform_order_id: str) -> Optional[Order]:
        """Get order by its (platform, platform_order_id) key"""
        return self.db.query(Order).filter(
            Order.platform == platform,
            Order.platform_order_id == platform_order_id
        ).first()

    def get_by_customer_email(self, email: str) -> List[Order]:
        """Get orders by customer email"""
        return self.db.query(Order).filter(
            Order.customer_email == email
        ).order_by(desc(Order.order_date)).all()

    def create(self, order_data: OrderCreate, order_number: str) -> Order:
        """
        Create a new order with its initial status-history entry

        Args:
            order_data: Validated order fields
            order_number: Order number to assign

        Returns:
            Created order
        """
        values = order_values(order_data)
        values["order_number"] = order_number
        now = _utcnow()
        order = Order(
            **values,
            tags=order_data.tags,
            notes=order_data.notes,
            sync_status="pending",
            created_by=order_data.actor,
            updated_by=order_data.actor,
        )
        order.status_history.append(OrderStatusHistory(
            status=order.status,
            timestamp=now,
            actor=order_data.actor,
            notes="Order created"
        ))
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def upsert(self, order: NormalizedOrder, actor: Optional[str] = None) -> Tuple[Order, bool]:
        """
        Insert or update an ingested order keyed on (platform, platform_order_id)

        A single INSERT ... ON CONFLICT DO UPDATE statement decides between
        insert and update, so concurrent ingestions of the same key serialize
        on the row lock. shipping_info is only overwritten when supplied.
        A history entry is added in the same transaction when the status
        differs from the last logged one.

        Returns:
            (order, created)
        """
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported on {dialect}")

        now = _utcnow()
        values = order_values(order)
        values.update(
            sync_status="synced",
            last_synced_at=now,
            created_by=actor,
            updated_by=actor,
            version=1,
            created_at=now,
            updated_at=now,
        )

        stmt = insert(Order).values(**values)
        excluded = stmt.excluded
        set_ = {column: excluded[column] for column in UPSERT_MUTABLE_COLUMNS}
        if order.shipping_info is not None:
            set_["shipping_info"] = excluded["shipping_info"]
        set_["updated_by"] = excluded["updated_by"]
        set_["version"] = Order.__table__.c.version + 1

        stmt = stmt.on_conflict_do_update(
            index_elements=["platform", "platform_order_id"],
            set_=set_,
        ).returning(Order.__table__.c.id, Order.__table__.c.version)

        row = self.db.execute(stmt).one()
        order_id, version = row[0], row[1]
        created = version == 1

        last_entry = self.db.query(OrderStatusHistory).filter(
            OrderStatusHistory.order_id == order_id
        ).order_by(desc(OrderStatusHistory.id)).first()

        if last_entry is None or last_entry.status != order.status:
            self.db.add(OrderStatusHistory(
                order_id=order_id,
                status=order.status,
                timestamp=now,
                actor=actor,
                notes=f"Ingested from {order.platform}" if created else f"Status updated by {order.platform}"
            ))

        self.db.commit()
        return self.get_by_id(order_id), created

    def update_status(
        self,
        order_id: int,
        new_status: str,
        actor: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Optional[Order]:
        """Update order status and append a history entry"""
        order = self.get_by_id(order_id)
        if not order:
            return None

        order.status = new_status
        order.updated_by = actor
        order.version = order.version + 1
        order.status_history.append(OrderStatusHistory(
            status=new_status,
            timestamp=_utcnow(),
            actor=actor,
            notes=notes
        ))
        self.db.commit()
        self.db.refresh(order)
        return order

    def update(
        self,
        order_id: int,
        values: Dict[str, Any],
        actor: Optional[str] = None
    ) -> Optional[Order]:
        """
        Overwrite the given columns of an order

        A status change is logged in the status history.
        """
        order = self.get_by_id(order_id)
        if not order:
            return None

        new_status = values.pop("status", None)
        for column, value in values.items():
            setattr(order, column, value)

        if new_status is not None and new_status != order.status:
            order.status = new_status
            order.status_history.append(OrderStatusHistory(
                status=new_status,
                timestamp=_utcnow(),
                actor=actor,
                notes="Order edited"
            ))

        order.updated_by = actor
        order.version = order.version + 1
        self.db.commit()
        self.db.refresh(order)
        return order

    def set_sync_status(self, order_id: int, sync_status: str) -> Optional[Order]:
        """Record the outcome of the last platform write"""
        order = self.get_by_id(order_id)
        if not order:
            return None

        order.sync_status = sync_status
        if sync_status == "synced":
            order.last_synced_at = _utcnow()
        self.db.commit()
        self.db.refresh(order)
        return order

    def delete(self, order_id: int) -> bool:
        """Delete order"""
        order = self.get_by_id(order_id)
        if not order:
            return False

        self.db.delete(order)
        self.db.commit()
        return True
