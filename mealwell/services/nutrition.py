"""
Nutrition targets and the deterministic fallback meal plan

Used whenever the AI planner is unavailable. Calorie needs follow the
Mifflin-St Jeor equation; macros are split 30/35/35 (protein/fat/carbs)
by calories.
"""

from typing import Dict, List, Optional, Sequence

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

GOAL_ADJUSTMENTS = {
    "lose_weight": -500,
    "gain_muscle": 500,
}

DEFAULT_MEAL_TYPES = ["breakfast", "lunch", "dinner"]

MEAL_RATIOS = {
    "breakfast": 0.3,
    "lunch": 0.35,
    "dinner": 0.35,
    "snacks": 0.1,
}
DEFAULT_MEAL_RATIO = 0.25

# (name, protein g, carbs g, fats g)
MEAL_VARIATIONS = {
    "breakfast": [
        ("Oatmeal with berries & nuts", 15, 45, 10),
        ("Scrambled Eggs with Spinach & Toast", 20, 30, 15),
        ("Greek Yogurt Parfait with Granola", 25, 35, 5),
    ],
    "lunch": [
        ("Grilled Chicken Breast with Quinoa", 40, 45, 10),
        ("Turkey Wrap with Hummus & Veggies", 35, 40, 12),
        ("Lentil Soup with Brown Rice", 25, 55, 8),
    ],
    "dinner": [
        ("Baked Salmon with Asparagus", 35, 10, 20),
        ("Stir-fried Tofu with Broccoli", 30, 20, 15),
        ("Lean Beef Stir-fry with Peppers", 40, 15, 18),
    ],
    "snacks": [
        ("Apple & Almond Butter", 4, 25, 15),
        ("Protein Shake", 25, 5, 2),
        ("Carrot Sticks with Hummus", 5, 15, 8),
    ],
}

TIPS = [
    "Stay hydrated: Drink at least 3-4 liters of water daily",
    "Protein timing: Distribute protein intake evenly across meals",
    "Vegetable intake: Fill half your plate with colorful vegetables",
    "Sleep quality: Aim for 7-9 hours of quality sleep",
    "Meal prep: Prepare meals in advance to stay on track",
]

PLAN_DAYS = 7


def calculate_nutrition(
    age: float,
    gender: str,
    height: float,
    weight: float,
    activity_level: str,
    goal: str,
) -> Dict[str, float]:
    """
    Daily calorie and macro targets.

    Args:
        age: years
        gender: "male" adds 5 to BMR, anything else subtracts 161
        height: centimetres
        weight: kilograms
        activity_level: key of ACTIVITY_MULTIPLIERS, unknown values count as sedentary
        goal: "lose_weight" / "gain_muscle" shift the target by 500 kcal

    Returns:
        dict with bmr, tdee, target_calories, protein, fats, carbs
    """
    bmr = 10 * weight + 6.25 * height - 5 * age
    bmr += 5 if gender == "male" else -161

    tdee = round(bmr * ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER))
    target_calories = tdee + GOAL_ADJUSTMENTS.get(goal, 0)

    return {
        "bmr": bmr,
        "tdee": tdee,
        "target_calories": target_calories,
        "protein": round(target_calories * 0.3 / 4),
        "fats": round(target_calories * 0.35 / 9),
        "carbs": round(target_calories * 0.35 / 4),
    }


def _day_meals(day_index: int, meal_types: Sequence[str], target_calories: float, total_ratio: float) -> Dict:
    meals = {}
    for meal_type in meal_types:
        ratio = MEAL_RATIOS.get(meal_type, DEFAULT_MEAL_RATIO) / total_ratio
        variations = MEAL_VARIATIONS.get(meal_type, MEAL_VARIATIONS["lunch"])
        name, protein, carbs, fats = variations[day_index % len(variations)]
        meals[meal_type] = {
            "calories": round(target_calories * ratio),
            "items": [{"name": name, "protein": protein, "carbs": carbs, "fats": fats}],
        }
    return meals


def build_fallback_plan(
    age: float,
    gender: str,
    height: float,
    weight: float,
    activity_level: str,
    goal: str,
    meal_types: Optional[List[str]] = None,
) -> Dict:
    """Seven-day plan cycling through the canned dishes of each meal type"""
    meal_types = list(meal_types) if meal_types else list(DEFAULT_MEAL_TYPES)
    targets = calculate_nutrition(age, gender, height, weight, activity_level, goal)

    total_ratio = sum(MEAL_RATIOS.get(t, DEFAULT_MEAL_RATIO) for t in meal_types) or 1

    return {
        "calories": targets["target_calories"],
        "protein": targets["protein"],
        "carbs": targets["carbs"],
        "fats": targets["fats"],
        "bmi": round(weight / (height / 100) ** 2, 1),
        "bmr": targets["bmr"],
        "tdee": targets["tdee"],
        "tips": list(TIPS),
        "days": [
            {"day": i + 1, "meals": _day_meals(i, meal_types, targets["target_calories"], total_ratio)}
            for i in range(PLAN_DAYS)
        ],
    }
