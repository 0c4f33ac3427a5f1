"""
Pydantic schemas for payment operations
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from mealwell.schemas.order import DeliveryAddress, DeliveryStatus, OrderItemResponse

class PaymentIntentCreate(BaseModel):
    amount: float = Field(..., gt=0, description="Amount in INR")
    order_id: int

class PaymentIntentResponse(BaseModel):
    razorpay_order_id: str
    amount: int = Field(..., description="Amount in paise")
    currency: str
    key: str

class PaymentVerification(BaseModel):
    """Values returned to the client by Razorpay checkout"""
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    order_id: int

class PaymentHistoryEntry(BaseModel):
    order_id: int
    order_number: str
    amount: float
    razorpay_payment_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    status: str
    payment_status: str
    items: List[OrderItemResponse]
    chef_name: Optional[str] = None
    delivery_address: Optional[DeliveryAddress] = None
    delivery_status: DeliveryStatus
    created_at: Optional[datetime] = None

class PaymentHistoryResponse(BaseModel):
    payments: List[PaymentHistoryEntry]
    count: int
