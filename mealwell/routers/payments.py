"""
Payment endpoints: Razorpay order creation, signature verification and history
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
import logging

from mealwell.database import get_db
from mealwell.ratelimit import limiter
from mealwell.schemas.order import OrderResponse
from mealwell.schemas.payment import (
    PaymentIntentCreate, PaymentIntentResponse, PaymentVerification, PaymentHistoryResponse
)
from mealwell.services.payment_service import PaymentService, get_razorpay_client
from mealwell.auth.auth_handler import get_current_user, customer_required

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/create-order", response_model=PaymentIntentResponse)
@limiter.limit("10/minute")
async def create_payment_order(
    request: Request,
    intent: PaymentIntentCreate,
    current_user: dict = Depends(customer_required),
    razorpay_client=Depends(get_razorpay_client),
    db: Session = Depends(get_db)
):
    """Create a Razorpay order for one of the caller's orders"""
    try:
        service = PaymentService(db, client=razorpay_client)
        return await service.create_payment_intent(current_user["user_id"], intent)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Create Razorpay order error: {e}")
        raise HTTPException(status_code=500, detail="Error creating payment order")

@router.post("/verify", response_model=OrderResponse)
@limiter.limit("10/minute")
async def verify_payment(
    request: Request,
    verification: PaymentVerification,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Verify the Razorpay signature and mark the order paid"""
    try:
        return await PaymentService(db).verify_payment(verification)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Verify payment error: {e}")
        raise HTTPException(status_code=500, detail="Error verifying payment")

@router.get("/history", response_model=PaymentHistoryResponse)
@limiter.limit("30/minute")
async def get_payment_history(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Paid orders of the caller, newest first"""
    try:
        payments = await PaymentService(db).payment_history(current_user["user_id"])
        return PaymentHistoryResponse(payments=payments, count=len(payments))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get payment history error: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve payment history")
