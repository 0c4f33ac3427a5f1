"""
AI meal plan endpoint
"""

from fastapi import APIRouter, Depends, Request
import logging

from mealwell.ratelimit import limiter
from mealwell.schemas.meal_plan import MealPlanRequest, MealPlanResponse
from mealwell.services.meal_planner import MealPlanner, get_meal_planner
from mealwell.auth.auth_handler import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/generate-plan", response_model=MealPlanResponse)
@limiter.limit("5/minute")
async def generate_meal_plan(
    request: Request,
    plan_request: MealPlanRequest,
    current_user: dict = Depends(get_current_user),
    planner: MealPlanner = Depends(get_meal_planner)
):
    """Generate a 7-day meal plan, falling back to calculated targets when AI is unavailable"""
    plan, message = await planner.generate(plan_request)
    logger.info(f"Meal plan generated for user {current_user['user_id']} (fallback={message is not None})")
    return MealPlanResponse(success=True, plan=plan, message=message)
