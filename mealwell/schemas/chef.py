"""
Pydantic schemas for chef profiles
"""

from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

ALLOWED_CUISINES = ['Indian', 'Continental', 'Asian', 'Mediterranean', 'Vegan', 'Keto', 'All']
ALLOWED_SPECIALTIES = [
    'Diabetic-Friendly', 'Heart-Healthy', 'Weight Loss', 'High Protein', 'Low Sodium', 'Vegan', 'All'
]

class ChefCreate(BaseModel):
    """Schema for creating the caller's chef profile"""
    display_name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)
    cuisines: List[str] = Field(default_factory=list)
    specialties: List[str] = Field(default_factory=list)
    price_per_meal: float = Field(350.0, gt=0, description="Price per meal in INR")
    experience_years: int = Field(0, ge=0)
    weekly_capacity: int = Field(50, ge=1, description="Maximum meals per week")

    @validator('cuisines')
    def validate_cuisines(cls, v):
        unknown = [c for c in v if c not in ALLOWED_CUISINES]
        if unknown:
            raise ValueError(f'Unknown cuisines: {", ".join(unknown)}')
        return v

    @validator('specialties')
    def validate_specialties(cls, v):
        unknown = [s for s in v if s not in ALLOWED_SPECIALTIES]
        if unknown:
            raise ValueError(f'Unknown specialties: {", ".join(unknown)}')
        return v

class ChefResponse(BaseModel):
    """Public chef profile"""
    id: int
    user_id: int
    display_name: str
    location: str
    cuisines: List[str]
    specialties: List[str]
    price_per_meal: float
    experience_years: int
    weekly_capacity: int
    is_available: bool
    rating: float
    reviews_count: int
    meals_delivered: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
