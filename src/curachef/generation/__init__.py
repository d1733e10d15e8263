"""
CuraChef - Generation.

Single-shot and streamed calls against the AI boundary.
"""

from curachef.generation.invoker import (
    generate_content,
    generate_nutrition_for_recipe,
    generate_recipe_for_plan,
    generate_recipes_stream,
    identify_ingredients,
)

__all__ = [
    "generate_content",
    "generate_nutrition_for_recipe",
    "generate_recipe_for_plan",
    "generate_recipes_stream",
    "identify_ingredients",
]
