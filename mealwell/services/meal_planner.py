"""
AI meal plan generation with a deterministic fallback
"""

import asyncio
import json
import logging
import os
import re
from typing import Dict, Optional, Tuple

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from mealwell.schemas.meal_plan import MealPlanRequest
from mealwell.services.nutrition import build_fallback_plan

logger = logging.getLogger(__name__)

AI_TIMEOUT_SECONDS = 60
DEFAULT_MODEL = "gpt-4o-mini"

MESSAGE_AI_UNAVAILABLE = "Generated fallback plan (AI service unavailable)"
MESSAGE_AI_ERROR = "Generated fallback plan (AI service error)"

PLAN_PROMPT = """
Generate a HIGHLY PERSONALIZED and DETAILED 7-day meal plan JSON for a user with the following profile:
- Age: {age}
- Gender: {gender}
- Height: {height} cm
- Weight: {weight} kg
- Activity Level: {activity_level}
- Primary Goal: {goal}
- Diet Preference: {diet_type}
- Allergies: {allergies} (MUST BE STRICTLY AVOIDED)
- Health Conditions: {health_conditions}
- Custom Restrictions: {custom_restrictions}
- Meals Per Day: {meals_per_day}
- Meal Types: {meal_types}

Rules:
1. Meals must differ from day to day; do not repeat main dishes on consecutive days.
2. Strictly respect allergies, diet preference and custom restrictions.
3. If the diet preference includes vegetarian or vegan, exclude meat, fish and eggs.
4. Prefer Indian dishes familiar to Indian users unless told otherwise.
5. Daily calories and macros must match the user's BMR and TDEE.
6. Only generate meals for these types: {meal_types}.

Return ONLY a JSON object, without markdown or backticks, in this structure:
{{
  "calories": number,
  "protein": number,
  "carbs": number,
  "fats": number,
  "bmi": number,
  "bmr": number,
  "tdee": number,
  "tips": [five strings],
  "days": [
    {{
      "day": 1,
      "meals": {{
        "<meal type>": {{
          "calories": number,
          "items": [{{"name": string, "protein": number, "carbs": number, "fats": number}}]
        }}
      }}
    }}
  ]
}}
"""


def parse_plan_response(content: str) -> Dict:
    """
    Extract the plan object from an LLM reply.

    Strips markdown code fences and any prose around the outermost JSON
    object. Raises ValueError when no JSON object can be decoded.
    """
    cleaned = content.replace("```json", "").replace("```", "").strip()

    json_match = re.search(r'\{.*\}', cleaned, re.DOTALL)
    json_str = json_match.group(0) if json_match else cleaned

    try:
        plan = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(plan, dict) or "days" not in plan:
        raise ValueError("AI response is missing the days list")
    return plan


class MealPlanner:
    """Generates meal plans with an LLM, falling back to the nutrition calculator"""

    def __init__(self, llm=None, openai_api_key: Optional[str] = None, timeout: float = AI_TIMEOUT_SECONDS):
        self.timeout = timeout
        self.llm = llm
        if self.llm is None:
            api_key = openai_api_key or os.getenv("OPENAI_API_KEY")
            if api_key:
                self.llm = ChatOpenAI(
                    model=os.getenv("MEAL_PLAN_MODEL", DEFAULT_MODEL),
                    api_key=api_key,
                    temperature=0.7,
                )
            else:
                logger.info("AI meal planning disabled - OPENAI_API_KEY not set")

    @property
    def enabled(self) -> bool:
        return self.llm is not None

    def _fallback(self, request: MealPlanRequest) -> Dict:
        return build_fallback_plan(
            age=request.age,
            gender=request.gender,
            height=request.height,
            weight=request.weight,
            activity_level=request.activity_level,
            goal=request.goal,
            meal_types=request.meal_types,
        )

    def _build_prompt(self, request: MealPlanRequest) -> str:
        meal_types = ", ".join(request.meal_types)
        return PLAN_PROMPT.format(
            age=request.age,
            gender=request.gender,
            height=request.height,
            weight=request.weight,
            activity_level=request.activity_level,
            goal=request.goal,
            diet_type=", ".join(request.diet_type) or "None",
            allergies=", ".join(request.allergies) or "None",
            health_conditions=", ".join(request.health_conditions) or "None",
            custom_restrictions=request.custom_restrictions or "None",
            meals_per_day=request.meals_per_day or 3,
            meal_types=meal_types,
        )

    async def generate(self, request: MealPlanRequest) -> Tuple[Dict, Optional[str]]:
        """Return (plan, message); message is set only when the fallback was used"""
        if not self.enabled:
            logger.info("Returning fallback plan, AI service unavailable")
            return self._fallback(request), MESSAGE_AI_UNAVAILABLE

        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke([HumanMessage(content=self._build_prompt(request))]),
                timeout=self.timeout,
            )
            return parse_plan_response(response.content), None
        except asyncio.TimeoutError:
            logger.error(f"AI meal plan generation timed out after {self.timeout}s")
        except Exception as e:
            logger.error(f"AI meal plan generation failed: {e}")

        logger.info("Returning fallback plan due to AI error")
        return self._fallback(request), MESSAGE_AI_ERROR


def get_meal_planner() -> MealPlanner:
    return MealPlanner()
