"""
Pydantic schemas for Order operations
"""

from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
import re

from mealwell.services.order_workflow import (
    OrderStatus, PaymentStatus, MealType, FULFILLMENT_STATUSES
)

class DeliveryAddress(BaseModel):
    street: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)

class OrderItemBase(BaseModel):
    """A meal line on an order"""
    meal_name: str = Field(..., min_length=1, max_length=200)
    meal_type: MealType = Field(..., description="breakfast, lunch, dinner or snack")
    price: float = Field(..., ge=0, description="Unit price in INR")
    quantity: int = Field(1, ge=1)
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)

class OrderItemResponse(OrderItemBase):
    id: int

    class Config:
        from_attributes = True

class OrderCreate(BaseModel):
    """Schema for placing a new order"""
    chef_id: int = Field(..., description="Chef fulfilling the order")
    items: List[OrderItemBase] = Field(..., min_length=1, description="At least one meal")
    total_amount: float = Field(..., ge=0)
    discount: float = Field(0.0, ge=0)
    gst: float = Field(0.0, ge=0)
    delivery_address: Optional[DeliveryAddress] = None
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_slot: Optional[str] = Field(None, max_length=30)
    customer_notes: Optional[str] = Field(None, max_length=1000)

    @validator('delivery_date')
    def validate_delivery_date(cls, v):
        if v is None:
            return v
        if not re.match(r'^\d{4}-\d{2}-\d{2}$', v):
            raise ValueError('Delivery date must be in format YYYY-MM-DD')
        return v

class OrderStatusUpdate(BaseModel):
    """Chef request to advance an order"""
    status: OrderStatus
    chef_notes: Optional[str] = Field(None, max_length=1000)

    @validator('status')
    def validate_status(cls, v):
        if v not in FULFILLMENT_STATUSES:
            allowed = ", ".join(sorted(s.value for s in FULFILLMENT_STATUSES))
            raise ValueError(f'Status must be one of: {allowed}')
        return v

class OrderCancel(BaseModel):
    cancel_reason: str = Field(..., min_length=1, max_length=500)

    @validator('cancel_reason')
    def validate_cancel_reason(cls, v):
        if not v.strip():
            raise ValueError('Cancel reason is required')
        return v.strip()

class DeliveryStatus(BaseModel):
    confirmed: Optional[datetime] = None
    preparing: Optional[datetime] = None
    ready: Optional[datetime] = None
    out_for_delivery: Optional[datetime] = None
    delivered: Optional[datetime] = None

class OrderResponse(BaseModel):
    """Schema for order responses"""
    id: int
    order_number: str
    customer_id: int
    chef_id: int
    items: List[OrderItemResponse]
    total_amount: float
    discount: float
    gst: float
    final_amount: float
    status: OrderStatus
    payment_status: PaymentStatus
    delivery_status: DeliveryStatus
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    delivery_address: Optional[DeliveryAddress] = None
    delivery_date: Optional[str] = None
    delivery_slot: Optional[str] = None
    customer_notes: Optional[str] = None
    chef_notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderListResponse(BaseModel):
    """Schema for paginated order list responses"""
    orders: List[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
