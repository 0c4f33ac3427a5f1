"""
Order model for database operations
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from mealwell.database import Base

class Order(Base):
    """Order entity model"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(20), unique=True, index=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    chef_id = Column(Integer, ForeignKey("chefs.id"), index=True, nullable=False)

    total_amount = Column(Float, nullable=False)
    discount = Column(Float, default=0.0, nullable=False)
    gst = Column(Float, default=0.0, nullable=False)
    final_amount = Column(Float, nullable=False)  # frozen at creation

    status = Column(String(30), default="pending", nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)

    # Set once, the first time status reaches the matching value
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    preparing_at = Column(DateTime(timezone=True), nullable=True)
    ready_at = Column(DateTime(timezone=True), nullable=True)
    out_for_delivery_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)

    razorpay_order_id = Column(String(64), nullable=True, index=True)
    razorpay_payment_id = Column(String(64), nullable=True)
    razorpay_signature = Column(String(128), nullable=True)

    delivery_address = Column(JSON, nullable=True)
    delivery_date = Column(String(20), nullable=True)
    delivery_slot = Column(String(30), nullable=True)
    customer_notes = Column(Text, nullable=True)
    chef_notes = Column(Text, nullable=True)
    cancel_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )
    chef = relationship("Chef", lazy="joined")

    @property
    def delivery_status(self) -> dict:
        return {
            "confirmed": self.confirmed_at,
            "preparing": self.preparing_at,
            "ready": self.ready_at,
            "out_for_delivery": self.out_for_delivery_at,
            "delivered": self.delivered_at,
        }

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    """Single meal line on an order"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    meal_name = Column(String(200), nullable=False)
    meal_type = Column(String(20), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fats = Column(Float, nullable=True)

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, meal_name='{self.meal_name}', quantity={self.quantity})>"
