"""
Order service: creation, lookups and status changes
Handles the order lifecycle from placement to delivery or cancellation
"""

from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime
from typing import Optional, Tuple, List
import logging
import secrets

from mealwell.models.order import Order, OrderItem
from mealwell.models.chef import Chef
from mealwell.schemas.order import OrderCreate, OrderStatusUpdate, OrderCancel
from mealwell.services.events import EventBus, OrderDelivered
from mealwell.services.chef_service import ChefStatsService
from mealwell.services.order_workflow import (
    OrderStatus, PaymentStatus, InvalidTransitionError,
    ensure_transition, can_cancel, timestamp_field,
)
from mealwell.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "MW"
ORDER_NUMBER_ATTEMPTS = 10


def build_event_bus(db: Session) -> EventBus:
    """Event bus with the standard order event consumers attached"""
    bus = EventBus()
    bus.subscribe(OrderDelivered, ChefStatsService(db).handle_order_delivered)
    return bus


def stamp_status(order: Order, new_status: OrderStatus, when: Optional[datetime] = None) -> None:
    """Set the status and record the first time it was reached"""
    order.status = OrderStatus(new_status).value
    field = timestamp_field(new_status)
    if field and getattr(order, field) is None:
        setattr(order, field, when or datetime.utcnow())


class OrderService:
    """Service for order lifecycle operations"""

    def __init__(self, db: Session, events: Optional[EventBus] = None):
        self.db = db
        self.events = events if events is not None else build_event_bus(db)

    def _generate_order_number(self) -> str:
        """MW + YYYYMMDD + 4 random digits, retried until unused"""
        date_part = datetime.utcnow().strftime("%Y%m%d")
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            candidate = f"{ORDER_NUMBER_PREFIX}{date_part}{secrets.randbelow(10000):04d}"
            exists = self.db.query(Order.id).filter(Order.order_number == candidate).first()
            if not exists:
                return candidate
        raise DatabaseError("Could not allocate a unique order number")

    def get_order(self, order_id: int) -> Order:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if not order:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return order

    def chef_for_user(self, user_id: int) -> Optional[Chef]:
        return self.db.query(Chef).filter(Chef.user_id == user_id).first()

    def is_chef_of(self, order: Order, user_id: int) -> bool:
        chef = self.chef_for_user(user_id)
        return chef is not None and chef.id == order.chef_id

    def get_order_for_user(self, order_id: int, current_user: dict) -> Order:
        """Load an order visible to its customer, its chef or an admin"""
        order = self.get_order(order_id)
        user_id = current_user["user_id"]
        if (
            current_user.get("role") != "admin"
            and order.customer_id != user_id
            and not self.is_chef_of(order, user_id)
        ):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view this order")
        return order

    async def create_order(self, customer_id: int, order_data: OrderCreate) -> Order:
        """Persist a new pending order with a frozen final amount"""
        if not self.db.query(Chef.id).filter(Chef.id == order_data.chef_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chef not found")

        try:
            order = Order(
                order_number=self._generate_order_number(),
                customer_id=customer_id,
                chef_id=order_data.chef_id,
                total_amount=order_data.total_amount,
                discount=order_data.discount,
                gst=order_data.gst,
                final_amount=order_data.total_amount + order_data.gst - order_data.discount,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                delivery_address=order_data.delivery_address.dict() if order_data.delivery_address else None,
                delivery_date=order_data.delivery_date,
                delivery_slot=order_data.delivery_slot,
                customer_notes=order_data.customer_notes,
                items=[
                    OrderItem(**{**item.dict(), "meal_type": item.meal_type.value})
                    for item in order_data.items
                ],
            )
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)

        except DatabaseError:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create order: {e}")
            raise DatabaseError(f"Failed to create order: {str(e)}", e)

        logger.info(f"Created order {order.order_number} (id={order.id}) for customer {customer_id}")
        return order

    async def list_orders(
        self,
        user_id: int,
        as_chef: bool = False,
        status_filter: Optional[OrderStatus] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Order], int]:
        query = self.db.query(Order)
        if as_chef:
            chef = self.chef_for_user(user_id)
            if not chef:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chef profile not found")
            query = query.filter(Order.chef_id == chef.id)
        else:
            query = query.filter(Order.customer_id == user_id)

        if status_filter:
            query = query.filter(Order.status == OrderStatus(status_filter).value)

        total = query.count()
        orders = (
            query.order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return orders, total

    async def update_status(self, order_id: int, user_id: int, update: OrderStatusUpdate) -> Order:
        """Chef-driven move along the fulfillment sequence"""
        order = self.get_order(order_id)
        if not self.is_chef_of(order, user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the order's chef can update its status")

        try:
            ensure_transition(order.status, update.status)
        except InvalidTransitionError as e:
            logger.info(f"Rejected transition for order {order.order_number}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        try:
            stamp_status(order, update.status)
            if update.chef_notes is not None:
                order.chef_notes = update.chef_notes
            # Consumers write in this transaction and are committed with the status
            if update.status == OrderStatus.DELIVERED:
                self.events.publish(
                    OrderDelivered(order_id=order.id, chef_id=order.chef_id, item_count=order.item_count)
                )
            self.db.commit()
            self.db.refresh(order)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update order {order_id}: {e}")
            raise DatabaseError(f"Failed to update order status: {str(e)}", e)

        logger.info(f"Order {order.order_number} moved to {order.status}")
        return order

    async def cancel_order(self, order_id: int, user_id: int, cancel: OrderCancel) -> Order:
        """Customer cancellation, allowed until the chef starts preparing"""
        order = self.get_order(order_id)
        if order.customer_id != user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the ordering customer can cancel")

        if not can_cancel(order.status):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Order cannot be cancelled once it is {order.status}"
            )

        try:
            stamp_status(order, OrderStatus.CANCELLED)
            order.cancel_reason = cancel.cancel_reason
            order.cancelled_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(order)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to cancel order {order_id}: {e}")
            raise DatabaseError(f"Failed to cancel order: {str(e)}", e)

        logger.info(f"Order {order.order_number} cancelled by customer {user_id}")
        return order
