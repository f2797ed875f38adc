"""
Static meal catalog for subscription plans.

Each plan lists its meal categories in display order; a plan order must pick
exactly one item per category.
"""

from typing import Dict, List, Optional

from domain.enums import PlanType


MEAL_OPTIONS: Dict[str, dict] = {
    PlanType.PROTEIN.value: {
        "category": "High Protein Plan",
        "meals": {
            "proteinSources": [
                {"name": "Chicken Breast", "protein": "31g"},
                {"name": "Fish Fillet", "protein": "26g"},
                {"name": "Mutton", "protein": "25g"},
                {"name": "Omelet", "protein": "11g"},
                {"name": "Pork", "protein": "38g"},
                {"name": "Prawns", "protein": "24g"},
            ],
            "carbs": [
                {"name": "White Rice", "carbs": "45g"},
                {"name": "Brown Rice", "carbs": "40g"},
                {"name": "Sweet Potato", "carbs": "35g"},
                {"name": "Whole Wheat Bread", "carbs": "44g"},
            ],
            "veggies": [
                {"name": "Broccoli"},
                {"name": "Spinach"},
                {"name": "Zucchini"},
                {"name": "Carrots"},
                {"name": "Bell Peppers"},
            ],
            "salad": [
                {"name": "Green Salad"},
                {"name": "Fruit Salad"},
                {"name": "Chicken Caesar Salad"},
                {"name": "Greek Salad"},
            ],
        },
    },
    PlanType.KETO.value: {
        "category": "Keto Plan",
        "meals": {
            "proteinSources": [
                {"name": "Eggs", "protein": "13g"},
                {"name": "Bacon", "protein": "37g"},
                {"name": "Salmon", "protein": "26g"},
                {"name": "Grilled Chicken Legs", "protein": "25g"},
            ],
            "fats": [
                {"name": "Avocado", "fat": "15g"},
                {"name": "Cheese", "fat": "20g"},
                {"name": "Almonds", "fat": "14g"},
                {"name": "Curd", "fat": "12g"},
            ],
            "veggies": [
                {"name": "Zucchini Noodles"},
                {"name": "Veg Rice"},
                {"name": "Mushroom Stir Fry"},
            ],
            "snacks": [
                {"name": "Paneer Kebab"},
                {"name": "Potato Fries"},
            ],
        },
    },
    PlanType.VEGAN.value: {
        "category": "Vegan Plan",
        "meals": {
            "proteinSources": [
                {"name": "Tofu Soup", "protein": "10g"},
                {"name": "Lentils", "protein": "9g"},
                {"name": "Chickpeas", "protein": "19g"},
                {"name": "Mushroom", "protein": "20g"},
            ],
            "carbs": [
                {"name": "Quinoa", "carbs": "39g"},
                {"name": "Brown Rice", "carbs": "42g"},
                {"name": "Pasta", "carbs": "40g"},
            ],
            "veggies": [
                {"name": "Spinach"},
                {"name": "Broccoli"},
                {"name": "Bell Peppers"},
            ],
            "snacks": [
                {"name": "Dark Chocolate"},
                {"name": "Vegan Smoothie"},
            ],
        },
    },
    PlanType.WEIGHTLOSS.value: {
        "category": "Weight Loss Plan",
        "meals": {
            "proteinSources": [
                {"name": "Grilled Chicken", "protein": "30g"},
                {"name": "Paneer", "protein": "18g"},
                {"name": "Boiled Eggs", "protein": "13g"},
                {"name": "Tuna", "protein": "25g"},
            ],
            "carbs": [
                {"name": "Oats", "carbs": "27g"},
                {"name": "Sweet Potato", "carbs": "35g"},
                {"name": "Brown Rice", "carbs": "40g"},
            ],
            "veggies": [
                {"name": "Broccoli"},
                {"name": "Cucumber"},
                {"name": "Lettuce"},
                {"name": "Zucchini"},
            ],
            "snacks": [
                {"name": "Greek Yogurt with Berries"},
                {"name": "Roasted Corn"},
            ],
        },
    },
}


def get_plan(plan_type: str) -> Optional[dict]:
    """Catalog entry for a plan type (case-insensitive), or None."""
    return MEAL_OPTIONS.get((plan_type or "").lower())


def plan_categories(plan_type: str) -> List[str]:
    """Meal categories for a plan, in catalog order."""
    plan = get_plan(plan_type)
    return list(plan["meals"].keys()) if plan else []


def find_item(plan_type: str, category: str, item_name: str) -> Optional[dict]:
    """Look up a catalog item by name within a plan category (case-insensitive)."""
    plan = get_plan(plan_type)
    if not plan:
        return None
    wanted = item_name.strip().lower()
    for item in plan["meals"].get(category, []):
        if item["name"].lower() == wanted:
            return item
    return None
