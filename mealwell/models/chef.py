"""
Chef profile model
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from mealwell.database import Base

class Chef(Base):
    """Home chef profile with its delivery aggregates"""
    __tablename__ = "chefs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    display_name = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False, index=True)
    cuisines = Column(JSON, default=list, nullable=False)
    specialties = Column(JSON, default=list, nullable=False)
    price_per_meal = Column(Float, default=350.0, nullable=False)
    experience_years = Column(Integer, default=0, nullable=False)
    weekly_capacity = Column(Integer, default=50, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    # Aggregates, written only by ChefStatsService
    rating = Column(Float, default=5.0, nullable=False)
    reviews_count = Column(Integer, default=0, nullable=False)
    meals_delivered = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<Chef(id={self.id}, display_name='{self.display_name}', meals_delivered={self.meals_delivered})>"
