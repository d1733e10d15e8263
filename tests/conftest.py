"""
Pytest configuration and fixtures for CuraChef tests.
"""

import os

import pytest

# Set test environment before importing curachef modules
os.environ["CURACHEF_ENV"] = "development"
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")

from curachef.core.schemas import Recipe, User, UserPreferences
from curachef.db.users import JsonUserStore


@pytest.fixture
def sample_recipe_data():
    """Sample recipe as the model returns it (camelCase)."""
    return {
        "title": "Chicken Fried Rice",
        "description": "Smoky wok-tossed rice with chicken and broccoli",
        "ingredients": ["2 cups cooked rice", "200g chicken breast", "1 head broccoli"],
        "instructions": [
            "Dice the chicken",
            "Stir-fry chicken until golden",
            "Add broccoli and rice, toss on high heat",
        ],
        "prepTime": "10 minutes",
        "cookTime": "15 minutes",
        "servings": "2 servings",
        "imagePrompt": "A steaming bowl of fried rice with broccoli florets",
    }


@pytest.fixture
def sample_recipe(sample_recipe_data):
    return Recipe.model_validate(sample_recipe_data)


@pytest.fixture
def second_recipe_data(sample_recipe_data):
    return {
        **sample_recipe_data,
        "title": "Broccoli Chicken Biryani",
        "description": "Fragrant layered rice",
    }


@pytest.fixture
def sample_nutrition_data():
    return {
        "mealName": "Chicken Salad",
        "calories": {"total": 650, "perServing": 325},
        "macros": {"protein": "45g", "carbohydrates": "20g", "fat": "30g"},
        "vitamins": [{"name": "Vitamin A", "amount": "120mcg"}],
        "minerals": [{"name": "Iron", "amount": "3mg"}],
    }


@pytest.fixture
def sample_dietary_plan_data(sample_recipe_data):
    return {
        "condition": "Type 2 Diabetes",
        "foodsToFavor": ["leafy greens", "legumes"],
        "foodsToAvoid": ["sugary drinks"],
        "guidelines": "Keep carbohydrate portions consistent across meals.",
        "recipes": [sample_recipe_data],
    }


@pytest.fixture
def sample_plan_data():
    return {
        "title": "Lean Week",
        "summary": "High protein, moderate carbs.",
        "days": [
            {
                "day": "Day 1",
                "meals": [
                    {"name": "Breakfast", "recipe": {"title": "Masala Oats", "description": "Savory oats"}},
                    {"name": "Dinner", "recipe": {"title": "Dal Tadka", "description": "Tempered lentils"}},
                ],
                "dailyTotals": {"calories": 1800, "protein": "120g", "carbs": "150g", "fat": "60g"},
            }
        ],
    }


@pytest.fixture
def sample_preferences():
    return UserPreferences(
        dietary_restrictions=["Vegan"],
        allergies=["Peanuts"],
        favorite_cuisines=["Indian", "Thai"],
        daily_calorie_goal=2000,
        health_goals=["Heart Health"],
        other_health_goals="more fiber",
        budget="budget-friendly",
    )


@pytest.fixture
def user_store(tmp_path):
    """Empty JSON user store in a temp directory."""
    return JsonUserStore(tmp_path / "users.json")


@pytest.fixture
def signed_in_user(sample_preferences):
    """A user object for sessions that skip the bcrypt round trip."""
    return User(email="cook@example.com", password_hash="not-a-hash", preferences=sample_preferences)
