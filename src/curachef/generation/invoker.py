"""
CuraChef - Generation Invoker.

Executes one logical request against the AI boundary and returns the
structured result. Two modes:

- Single-shot: one request, one structured response.
- Streaming: text fragments are concatenated in arrival order and the
  buffer is parsed once, after the stream ends. The stream is a transport
  optimization only; no partial JSON is ever interpreted.

Any failure (transport, empty payload, unparseable JSON, schema mismatch)
becomes GenerationFailed with a fixed user-facing message. Nothing is
retried and nothing is cached.
"""

import logging
from collections.abc import Callable

from pydantic import BaseModel

from curachef.core.features import Feature, MedicalCondition, PlanDuration
from curachef.core.schemas import (
    IdentifiedIngredients,
    NutritionInfo,
    Recipe,
    UserPreferences,
)
from curachef.errors import GenerationFailed, InvalidFeature
from curachef.llm.client import ImageData, call_llm, call_llm_stream
from curachef.prompts.resolver import (
    build_meal_recipe_prompt,
    build_recipe_nutrition_prompt,
    resolve_prompt_and_schema,
)
from curachef.prompts.templates import IDENTIFY_INGREDIENTS_PROMPT

logger = logging.getLogger(__name__)

CONTENT_FAILED = "Failed to parse response from AI."
STREAM_FAILED = "Failed to stream recipes from AI."
IDENTIFY_FAILED = "Failed to identify ingredients from the image."
MEAL_RECIPE_FAILED = "Failed to generate the full recipe."
RECIPE_NUTRITION_FAILED = "Failed to generate nutritional information for the recipe."


async def generate_content(
    feature: Feature,
    text_input: str,
    condition: MedicalCondition = MedicalCondition.NONE,
    image: ImageData | None = None,
    preferences: UserPreferences | None = None,
    plan_duration: PlanDuration | None = None,
) -> BaseModel:
    """
    Single-shot generation for a feature.

    The image is only sent for image-capable features, and is placed
    before the prompt text.

    Returns:
        Instance of the feature's response model
        (RecipeList, NutritionInfo, DietaryPlan or PersonalizedPlan)

    Raises:
        GenerationFailed: Boundary error or unparseable response
        InvalidFeature: Feature has no template
    """
    request = resolve_prompt_and_schema(feature, text_input, condition, preferences, plan_duration)
    attached = image if request.image_capable else None

    try:
        return await call_llm(
            response_model=request.response_model,
            prompt=request.prompt,
            call_kind=request.feature.value,
            image=attached,
            image_first=True,
        )
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error generating content for {request.feature.value}: {e}")
        raise GenerationFailed(CONTENT_FAILED) from e


async def generate_recipes_stream(
    feature: Feature,
    text_input: str,
    condition: MedicalCondition = MedicalCondition.NONE,
    preferences: UserPreferences | None = None,
    on_complete: Callable[[list[Recipe]], None] | None = None,
) -> list[Recipe]:
    """
    Streamed recipe generation.

    Buffers the whole stream, parses it once as the feature's response
    model and hands the extracted recipe list to on_complete. Non-recipe
    fields (medical plan guidance) are left for the caller to merge.

    Returns:
        The recipes, in the order the model produced them

    Raises:
        GenerationFailed: Stream error, or the buffer is not valid JSON
        InvalidFeature: Feature does not stream recipes
    """
    request = resolve_prompt_and_schema(feature, text_input, condition, preferences)
    if not request.streams:
        raise InvalidFeature(f"{request.feature.value} does not stream recipes.")

    buffer = ""
    try:
        async for fragment in call_llm_stream(
            response_model=request.response_model,
            prompt=request.prompt,
            call_kind=request.feature.value,
        ):
            buffer += fragment

        result = request.response_model.model_validate_json(buffer)
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error streaming recipes for {request.feature.value}: {e}")
        raise GenerationFailed(STREAM_FAILED) from e

    recipes = list(getattr(result, "recipes", None) or [])
    logger.debug(f"Streamed {len(recipes)} recipes for {request.feature.value}")

    if on_complete is not None:
        on_complete(recipes)
    return recipes


async def identify_ingredients(image: ImageData) -> str:
    """
    Identify food ingredients in a photo.

    Returns:
        A single comma-separated ingredient string
    """
    try:
        result = await call_llm(
            response_model=IdentifiedIngredients,
            prompt=IDENTIFY_INGREDIENTS_PROMPT,
            call_kind="identify",
            image=image,
            image_first=False,
        )
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error identifying ingredients: {e}")
        raise GenerationFailed(IDENTIFY_FAILED) from e

    return result.ingredients.strip()


async def generate_recipe_for_plan(
    meal_title: str,
    meal_description: str,
    preferences: UserPreferences | None = None,
) -> Recipe:
    """Expand a plan meal (title + description) into one full recipe."""
    prompt = build_meal_recipe_prompt(meal_title, meal_description, preferences)
    try:
        return await call_llm(
            response_model=Recipe,
            prompt=prompt,
            call_kind="meal_recipe",
        )
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error generating recipe for plan meal {meal_title!r}: {e}")
        raise GenerationFailed(MEAL_RECIPE_FAILED) from e


async def generate_nutrition_for_recipe(recipe: Recipe) -> NutritionInfo:
    """Nutritional breakdown for one generated recipe."""
    prompt = build_recipe_nutrition_prompt(recipe)
    try:
        return await call_llm(
            response_model=NutritionInfo,
            prompt=prompt,
            call_kind="recipe_nutrition",
        )
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error generating nutrition for {recipe.title!r}: {e}")
        raise GenerationFailed(RECIPE_NUTRITION_FAILED) from e
