"""
Payment service backed by Razorpay

Creates provider orders for internal orders and verifies the signature the
provider hands back to the client after checkout. A verified signature is
the only thing that marks an order as paid.
"""

import hashlib
import hmac
import logging
import os
from typing import List, Optional

import razorpay
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from mealwell.models.order import Order
from mealwell.schemas.order import OrderItemResponse
from mealwell.schemas.payment import PaymentIntentCreate, PaymentVerification
from mealwell.services.events import EventBus
from mealwell.services.order_service import OrderService, stamp_status
from mealwell.services.order_workflow import OrderStatus, PaymentStatus
from mealwell.utils.error_handler import DatabaseError, PaymentProviderError

logger = logging.getLogger(__name__)

CURRENCY = "INR"
HISTORY_LIMIT = 50


def get_razorpay_client() -> razorpay.Client:
    """Dependency returning a Razorpay API client built from the environment"""
    return razorpay.Client(
        auth=(os.getenv("RAZORPAY_KEY_ID", ""), os.getenv("RAZORPAY_KEY_SECRET", ""))
    )


def to_minor_units(amount: float) -> int:
    """Rupees to paise"""
    return int(round(amount * 100))


def compute_signature(secret: str, razorpay_order_id: str, razorpay_payment_id: str) -> str:
    message = f"{razorpay_order_id}|{razorpay_payment_id}"
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def signature_matches(secret: str, razorpay_order_id: str, razorpay_payment_id: str, signature: str) -> bool:
    expected = compute_signature(secret, razorpay_order_id, razorpay_payment_id)
    return hmac.compare_digest(expected.encode(), signature.encode())


class PaymentService:
    """Service for payment intents, verification and history"""

    def __init__(
        self,
        db: Session,
        client=None,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        events: Optional[EventBus] = None,
    ):
        self.db = db
        self.client = client
        self.key_id = key_id if key_id is not None else os.getenv("RAZORPAY_KEY_ID", "")
        self.key_secret = key_secret if key_secret is not None else os.getenv("RAZORPAY_KEY_SECRET", "")
        self.orders = OrderService(db, events=events)

    def _intent_response(self, provider_order: dict, amount: int) -> dict:
        return {
            "razorpay_order_id": provider_order["id"],
            "amount": provider_order.get("amount", amount),
            "currency": provider_order.get("currency", CURRENCY),
            "key": self.key_id,
        }

    async def create_payment_intent(self, customer_id: int, intent: PaymentIntentCreate) -> dict:
        """
        Create a provider order scoped to one of the caller's orders.

        The provider order id is stored once. Later calls for the same unpaid
        order hand back that provider order so a checkout opened earlier can
        still be completed.
        """
        order = self.orders.get_order(intent.order_id)
        if order.customer_id != customer_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")

        if order.status == OrderStatus.CANCELLED.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order has been cancelled")
        if order.payment_status == PaymentStatus.PAID.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is already paid")

        amount = to_minor_units(intent.amount)

        if order.razorpay_order_id:
            try:
                provider_order = self.client.order.fetch(order.razorpay_order_id)
            except Exception as e:
                logger.error(f"Razorpay order fetch failed for order {order.id}: {e}")
                raise PaymentProviderError("Error fetching payment order", e)

            logger.info(f"Reusing Razorpay order {order.razorpay_order_id} for order {order.order_number}")
            return self._intent_response(provider_order, amount)

        options = {
            "amount": amount,
            "currency": CURRENCY,
            "receipt": f"order_{order.id}",
            "notes": {
                "orderId": str(order.id),
                "customerId": str(customer_id),
            },
        }

        try:
            provider_order = self.client.order.create(data=options)
        except Exception as e:
            logger.error(f"Razorpay order creation failed for order {order.id}: {e}")
            raise PaymentProviderError("Error creating payment order", e)

        try:
            order.razorpay_order_id = provider_order["id"]
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store Razorpay order id on order {order.id}: {e}")
            raise DatabaseError(f"Failed to store payment order: {str(e)}", e)

        logger.info(f"Created Razorpay order {provider_order['id']} for order {order.order_number}")
        return self._intent_response(provider_order, amount)

    async def verify_payment(self, verification: PaymentVerification) -> Order:
        """Mark an order paid once the provider signature checks out"""
        if not self.key_secret or not signature_matches(
            self.key_secret,
            verification.razorpay_order_id,
            verification.razorpay_payment_id,
            verification.razorpay_signature,
        ):
            logger.warning(f"Invalid payment signature for order {verification.order_id}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payment signature")

        order = self.orders.get_order(verification.order_id)

        if order.razorpay_order_id and order.razorpay_order_id != verification.razorpay_order_id:
            logger.warning(f"Payment order id mismatch for order {order.order_number}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment does not belong to this order")

        if order.payment_status == PaymentStatus.PAID.value:
            logger.info(f"Order {order.order_number} already paid, ignoring repeated verification")
            return order

        if order.status == OrderStatus.CANCELLED.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order has been cancelled")

        try:
            order.payment_status = PaymentStatus.PAID.value
            if order.status == OrderStatus.PENDING.value:
                stamp_status(order, OrderStatus.CONFIRMED)
            order.razorpay_order_id = verification.razorpay_order_id
            order.razorpay_payment_id = verification.razorpay_payment_id
            order.razorpay_signature = verification.razorpay_signature
            self.db.commit()
            self.db.refresh(order)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record payment for order {order.id}: {e}")
            raise DatabaseError(f"Failed to record payment: {str(e)}", e)

        logger.info(f"Payment verified for order {order.order_number}")
        return order

    async def payment_history(self, customer_id: int) -> List[dict]:
        orders = (
            self.db.query(Order)
            .filter(Order.customer_id == customer_id, Order.payment_status == PaymentStatus.PAID.value)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(HISTORY_LIMIT)
            .all()
        )
        return [
            {
                "order_id": order.id,
                "order_number": order.order_number,
                "amount": order.final_amount,
                "razorpay_payment_id": order.razorpay_payment_id,
                "razorpay_order_id": order.razorpay_order_id,
                "status": order.status,
                "payment_status": order.payment_status,
                "items": [OrderItemResponse.from_orm(item) for item in order.items],
                "chef_name": order.chef.display_name if order.chef else None,
                "delivery_address": order.delivery_address,
                "delivery_status": order.delivery_status,
                "created_at": order.created_at,
            }
            for order in orders
        ]
