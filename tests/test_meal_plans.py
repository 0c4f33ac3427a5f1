"""
Tests for the nutrition calculator and AI meal plan generation
"""

import asyncio

import pytest

from conftest import client, register, app
from mealwell.schemas.meal_plan import MealPlanRequest
from mealwell.services.meal_planner import (
    MealPlanner, get_meal_planner, parse_plan_response,
    MESSAGE_AI_UNAVAILABLE, MESSAGE_AI_ERROR,
)
from mealwell.services.nutrition import calculate_nutrition, build_fallback_plan

REFERENCE_PROFILE = {
    "age": 30,
    "gender": "male",
    "height": 175,
    "weight": 70,
    "activity_level": "sedentary",
    "goal": "lose_weight",
}


class FakeMessage:
    def __init__(self, content):
        self.content = content

class FakeLLM:
    """Minimal stand-in for a LangChain chat model"""

    def __init__(self, content=None, error=None, delay=0):
        self.content = content
        self.error = error
        self.delay = delay
        self.prompts = []

    async def ainvoke(self, messages):
        self.prompts.append(messages[0].content)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return FakeMessage(self.content)


class TestNutritionCalculator:
    """Test cases for calorie and macro targets"""

    def test_reference_values(self):
        targets = calculate_nutrition(**REFERENCE_PROFILE)
        assert targets["bmr"] == 1653.75
        assert targets["tdee"] == 1984
        assert targets["target_calories"] == 1484
        assert targets["protein"] == 111
        assert targets["fats"] == 58
        assert targets["carbs"] == 130

    def test_female_and_goal_adjustments(self):
        profile = dict(REFERENCE_PROFILE, gender="female", goal="gain_muscle", activity_level="moderate")
        targets = calculate_nutrition(**profile)
        assert targets["bmr"] == 10 * 70 + 6.25 * 175 - 5 * 30 - 161
        assert targets["tdee"] == round(targets["bmr"] * 1.55)
        assert targets["target_calories"] == targets["tdee"] + 500

    def test_unknown_activity_level_counts_as_sedentary(self):
        sedentary = calculate_nutrition(**REFERENCE_PROFILE)
        unknown = calculate_nutrition(**dict(REFERENCE_PROFILE, activity_level="couch_potato"))
        assert unknown["tdee"] == sedentary["tdee"]

    def test_maintain_goal_keeps_tdee(self):
        targets = calculate_nutrition(**dict(REFERENCE_PROFILE, goal="maintain"))
        assert targets["target_calories"] == targets["tdee"]

    def test_exact_halves_round_to_even(self):
        # 1653.75 * 1.2 evaluates to exactly 1984.5
        assert calculate_nutrition(**REFERENCE_PROFILE)["tdee"] == 1984

        targets = calculate_nutrition(43, "male", 141, 40, "moderate", "maintain")
        assert targets["target_calories"] == 1660
        assert targets["protein"] == 124


class TestFallbackPlan:
    """Test cases for the seven-day fallback plan"""

    def test_plan_shape(self):
        plan = build_fallback_plan(**REFERENCE_PROFILE)
        assert plan["calories"] == 1484
        assert plan["bmi"] == 22.9
        assert len(plan["tips"]) == 5
        assert [day["day"] for day in plan["days"]] == list(range(1, 8))
        assert set(plan["days"][0]["meals"]) == {"breakfast", "lunch", "dinner"}

    def test_meal_calories_follow_ratios(self):
        plan = build_fallback_plan(**REFERENCE_PROFILE)
        meals = plan["days"][0]["meals"]
        assert meals["breakfast"]["calories"] == round(1484 * 0.3)
        assert meals["lunch"]["calories"] == round(1484 * 0.35)
        assert meals["dinner"]["calories"] == round(1484 * 0.35)

    def test_ratios_renormalised_for_selected_meal_types(self):
        plan = build_fallback_plan(**REFERENCE_PROFILE, meal_types=["breakfast", "snacks"])
        meals = plan["days"][0]["meals"]
        assert meals["breakfast"]["calories"] == round(1484 * (0.3 / 0.4))
        assert meals["snacks"]["calories"] == round(1484 * (0.1 / 0.4))

    def test_variations_cycle_every_three_days(self):
        plan = build_fallback_plan(**REFERENCE_PROFILE)
        names = [day["meals"]["lunch"]["items"][0]["name"] for day in plan["days"]]
        assert names[0] == names[3] == names[6]
        assert len(set(names[:3])) == 3

    def test_unknown_meal_type_uses_lunch_dishes(self):
        plan = build_fallback_plan(**REFERENCE_PROFILE, meal_types=["brunch"])
        meal = plan["days"][0]["meals"]["brunch"]
        assert meal["calories"] == 1484
        assert meal["items"][0]["name"] == "Grilled Chicken Breast with Quinoa"


class TestParsePlanResponse:
    """Test cases for cleaning up LLM replies"""

    def test_plain_json(self):
        assert parse_plan_response('{"calories": 1800, "days": []}') == {"calories": 1800, "days": []}

    def test_markdown_fences_and_prose_removed(self):
        content = 'Here is your plan:\n```json\n{"calories": 2000, "days": [{"day": 1}]}\n```\nEnjoy!'
        assert parse_plan_response(content)["days"] == [{"day": 1}]

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_plan_response("Sorry, I cannot help with that.")
        with pytest.raises(ValueError):
            parse_plan_response('{"calories": 2000,}')
        with pytest.raises(ValueError):
            parse_plan_response('{"calories": 2000}')


class TestMealPlanner:
    """Test cases for AI generation and its fallback"""

    def request(self, **overrides):
        return MealPlanRequest(**dict(REFERENCE_PROFILE, **overrides))

    def test_without_llm_returns_fallback(self):
        planner = MealPlanner(openai_api_key="")
        plan, message = asyncio.run(planner.generate(self.request()))
        assert message == MESSAGE_AI_UNAVAILABLE
        assert plan["calories"] == 1484

    def test_llm_plan_returned(self):
        llm = FakeLLM(content='```json\n{"calories": 1500, "days": [{"day": 1, "meals": {}}]}\n```')
        planner = MealPlanner(llm=llm)
        plan, message = asyncio.run(planner.generate(self.request(allergies=["peanuts"], selected_meal_types=["lunch"])))
        assert message is None
        assert plan["calories"] == 1500
        assert "peanuts" in llm.prompts[0]
        assert "Meal Types: lunch" in llm.prompts[0]

    def test_llm_error_falls_back(self):
        planner = MealPlanner(llm=FakeLLM(error=RuntimeError("quota exceeded")))
        plan, message = asyncio.run(planner.generate(self.request()))
        assert message == MESSAGE_AI_ERROR
        assert plan["protein"] == 111

    def test_unparseable_reply_falls_back(self):
        planner = MealPlanner(llm=FakeLLM(content="not json at all"))
        plan, message = asyncio.run(planner.generate(self.request()))
        assert message == MESSAGE_AI_ERROR
        assert len(plan["days"]) == 7

    def test_timeout_falls_back(self):
        planner = MealPlanner(llm=FakeLLM(content='{"days": []}', delay=1), timeout=0.05)
        plan, message = asyncio.run(planner.generate(self.request()))
        assert message == MESSAGE_AI_ERROR
        assert plan["calories"] == 1484


class TestGeneratePlanEndpoint:
    """Test cases for POST /api/ai/generate-plan"""

    def test_fallback_through_api(self, customer_headers):
        app.dependency_overrides[get_meal_planner] = lambda: MealPlanner(openai_api_key="")
        try:
            response = client.post("/api/ai/generate-plan", headers=customer_headers, json=REFERENCE_PROFILE)
        finally:
            app.dependency_overrides.pop(get_meal_planner, None)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == MESSAGE_AI_UNAVAILABLE
        assert data["plan"]["calories"] == 1484
        assert len(data["plan"]["days"]) == 7

    def test_ai_plan_through_api(self):
        headers = register("customer", "Plan Seeker")
        llm = FakeLLM(content='{"calories": 1700, "days": [{"day": 1, "meals": {}}]}')
        app.dependency_overrides[get_meal_planner] = lambda: MealPlanner(llm=llm)
        try:
            response = client.post("/api/ai/generate-plan", headers=headers, json=REFERENCE_PROFILE)
        finally:
            app.dependency_overrides.pop(get_meal_planner, None)

        assert response.status_code == 200
        assert response.json()["plan"]["calories"] == 1700
        assert response.json()["message"] is None

    def test_invalid_profile_rejected(self, customer_headers):
        response = client.post("/api/ai/generate-plan", headers=customer_headers,
                               json=dict(REFERENCE_PROFILE, height=-10))
        assert response.status_code == 400
