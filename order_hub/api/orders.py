"""
Order API endpoints
"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Literal, Optional

from order_hub.api.deps import get_order_service
from order_hub.exceptions import ValidationError
from order_hub.services.order_service import OrderService, DuplicateOrderError
from order_hub.schemas.order import (
    OrderCreate,
    OrderStatus,
    OrderStatusUpdate,
    OrderUpdate,
    OrderResponse,
    OrderListResponse,
    Platform
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=OrderListResponse, summary="Get all orders")
def get_orders(
    skip: int = Query(0, ge=0, description="Number of orders to skip"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of orders to return"),
    platform: Optional[Platform] = Query(None, description="Filter by platform"),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    start_date: Optional[datetime] = Query(None, description="Orders placed on or after"),
    end_date: Optional[datetime] = Query(None, description="Orders placed on or before"),
    search: Optional[str] = Query(None, description="Order number, customer or platform order id"),
    sort_by: Literal["order_date", "total", "status", "platform"] = Query("order_date"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve orders with filtering and pagination

    - **skip**: Number of orders to skip (default: 0)
    - **limit**: Maximum number of orders to return (default: 20, max: 100)
    """
    return service.get_all_orders(
        skip=skip,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        platform=platform,
        status=status,
        start_date=start_date,
        end_date=end_date,
        search=search
    )


@router.get("/platform/{platform}", response_model=OrderListResponse, summary="Get orders by platform")
def get_orders_by_platform(
    platform: Platform,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    service: OrderService = Depends(get_order_service)
):
    return service.get_all_orders(skip=skip, limit=limit, platform=platform)


@router.get("/customer/{email}", response_model=List[OrderResponse], summary="Get orders by customer")
def get_orders_by_customer(
    email: str,
    service: OrderService = Depends(get_order_service)
):
    """
    Get all orders for a specific customer

    - **email**: Customer email address
    """
    return service.get_orders_by_customer(email)


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve a specific order by ID

    - **order_id**: Order ID
    """
    order = service.get_order_by_id(order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
    return order


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED, summary="Create order")
def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """
    Create an order manually

    Item totals and the order total are validated against each other.
    """
    try:
        return service.create_order(order_data)
    except DuplicateOrderError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.put("/{order_id}", response_model=OrderResponse, summary="Update order")
def update_order(
    order_id: int,
    order_data: OrderUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Edit an order

    Only the fields sent are changed. A status change is logged in the
    status history; shipping_info carries tracking and delivery details.
    """
    try:
        order = service.update_order(order_id, order_data)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": str(e), "fields": e.fields}
        )
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse, summary="Update order status")
async def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Update order status

    - **order_id**: Order ID
    - **status**: pending, confirmed, processing, dispatched, delivered, cancelled or returned
    - **notes**: Optional note stored in the status history
    """
    order = await service.update_order_status(order_id, status_data)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete order")
def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    if not service.delete_order(order_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
