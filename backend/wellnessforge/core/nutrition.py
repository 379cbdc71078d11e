"""Nutrition Calculations - Pure functions over meal entries.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, datetime
from typing import Iterable

from .models import FoodItem, MealEntry, NutritionTotals


# Keyword -> nutrition facts for the foods the meal scanner can recognize.
FOOD_DATABASE: dict[str, FoodItem] = {
    "apple": FoodItem(name="Apple", calories=95, protein=0, carbs=25, fats=0),
    "banana": FoodItem(name="Banana", calories=105, protein=1, carbs=27, fats=0),
    "egg": FoodItem(name="Boiled Egg", calories=78, protein=6, carbs=0, fats=5),
    "chicken_breast": FoodItem(name="Chicken Breast (100g)", calories=165, protein=31, carbs=0, fats=4),
    "salad": FoodItem(name="Garden Salad", calories=50, protein=2, carbs=10, fats=0),
    "pizza": FoodItem(name="Pizza Slice", calories=285, protein=12, carbs=36, fats=10),
}

MATCH_MIN_CONFIDENCE = 0.2
MATCH_TOP_N = 10


def calculate_nutrition_totals(entries: Iterable[MealEntry]) -> NutritionTotals:
    """Sum macros over a set of meal entries.

    Args:
        entries: Meal entries, already limited to the window of interest

    Returns:
        NutritionTotals (all zeros for an empty set)
    """
    entries = list(entries)

    return NutritionTotals(
        calories=sum(e.calories for e in entries),
        protein=sum(e.protein for e in entries),
        carbs=sum(e.carbs for e in entries),
        fats=sum(e.fats for e in entries),
    )


def filter_entries_for_day(entries: Iterable[MealEntry], day: date) -> list[MealEntry]:
    """Keep the entries logged on the given day, preserving order."""
    return [e for e in entries if e.logged_at.date() == day]


def match_food(classifications: Iterable[tuple[str, float]]) -> FoodItem | None:
    """Map image-classifier labels to a known food.

    Scans the top results in rank order and locks on the first label that
    contains a database keyword with confidence above the minimum.

    Args:
        classifications: Ranked (label, confidence) pairs from the classifier

    Returns:
        Matching FoodItem, or None if nothing qualifies
    """
    for rank, (label, confidence) in enumerate(classifications):
        if rank >= MATCH_TOP_N:
            break
        lower_label = label.lower()
        keyword = next((k for k in FOOD_DATABASE if k in lower_label), None)
        if keyword is not None and confidence > MATCH_MIN_CONFIDENCE:
            return FOOD_DATABASE[keyword]

    return None


def meal_from_food(item: FoodItem, logged_at: datetime) -> MealEntry:
    """Build a loggable meal entry from a food table row."""
    return MealEntry(
        name=item.name,
        calories=item.calories,
        protein=item.protein,
        carbs=item.carbs,
        fats=item.fats,
        logged_at=logged_at,
    )
