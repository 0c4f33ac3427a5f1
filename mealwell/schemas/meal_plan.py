"""
Pydantic schemas for meal plan generation
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from mealwell.services.nutrition import DEFAULT_MEAL_TYPES

class MealPlanRequest(BaseModel):
    """User profile and preferences for a 7-day plan"""
    age: int = Field(..., ge=1, le=120)
    gender: str = Field(..., description="male, female or other")
    height: float = Field(..., gt=0, description="Height in cm")
    weight: float = Field(..., gt=0, description="Weight in kg")
    activity_level: str = Field("sedentary", description="sedentary, light, moderate, active or very_active")
    goal: str = Field("maintain", description="lose_weight, maintain or gain_muscle")
    diet_type: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    health_conditions: List[str] = Field(default_factory=list)
    custom_restrictions: Optional[str] = Field(None, max_length=500)
    meals_per_day: Optional[int] = Field(None, ge=1, le=8)
    selected_meal_types: List[str] = Field(default_factory=list)

    @property
    def meal_types(self) -> List[str]:
        return self.selected_meal_types or list(DEFAULT_MEAL_TYPES)

class MealPlanResponse(BaseModel):
    success: bool = True
    plan: Dict[str, Any]
    message: Optional[str] = None
