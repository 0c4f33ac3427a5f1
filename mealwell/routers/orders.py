"""
Order management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
import logging
import math

from mealwell.database import get_db
from mealwell.ratelimit import limiter
from mealwell.schemas.order import (
    OrderCreate, OrderStatusUpdate, OrderCancel, OrderResponse, OrderListResponse
)
from mealwell.services.order_service import OrderService
from mealwell.services.order_workflow import OrderStatus
from mealwell.auth.auth_handler import get_current_user, customer_required, chef_required

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=OrderResponse, status_code=201)
@limiter.limit("10/minute")
async def create_order(
    request: Request,
    order: OrderCreate,
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Place a new order"""
    try:
        return await OrderService(db).create_order(current_user["user_id"], order)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create order: {e}")
        raise HTTPException(status_code=500, detail="Failed to create order")

@router.get("/", response_model=OrderListResponse)
@limiter.limit("30/minute")
async def get_orders(
    request: Request,
    role: str = Query("customer", pattern="^(customer|chef)$", description="View orders as customer or chef"),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the caller's orders, newest first"""
    try:
        orders, total = await OrderService(db).list_orders(
            current_user["user_id"],
            as_chef=(role == "chef"),
            status_filter=status,
            page=page,
            page_size=page_size,
        )

        return OrderListResponse(
            orders=orders,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size)
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get orders: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve orders")

@router.get("/{order_id}", response_model=OrderResponse)
@limiter.limit("30/minute")
async def get_order(
    request: Request,
    order_id: int,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a specific order by ID"""
    try:
        return OrderService(db).get_order_for_user(order_id, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve order")

@router.put("/{order_id}/status", response_model=OrderResponse)
@limiter.limit("30/minute")
async def update_order_status(
    request: Request,
    order_id: int,
    update: OrderStatusUpdate,
    current_user: dict = Depends(chef_required),
    db: Session = Depends(get_db)
):
    """Advance an order along the fulfillment sequence"""
    try:
        return await OrderService(db).update_status(order_id, current_user["user_id"], update)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update order status")

@router.put("/{order_id}/cancel", response_model=OrderResponse)
@limiter.limit("10/minute")
async def cancel_order(
    request: Request,
    order_id: int,
    cancel: OrderCancel,
    current_user: dict = Depends(customer_required),
    db: Session = Depends(get_db)
):
    """Cancel an order before preparation starts"""
    try:
        return await OrderService(db).cancel_order(order_id, current_user["user_id"], cancel)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to cancel order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to cancel order")
