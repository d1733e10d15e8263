"""
CuraChef - Prompt/Schema Resolver.

Maps (feature, input state) to exactly one prompt and one structured-output
schema. Never performs I/O.

The schema is carried as a pydantic model class: the LLM client derives the
JSON schema from it and parses the response back into it.
"""

from dataclasses import dataclass

from pydantic import BaseModel

from curachef.core.features import (
    CONDITION_PROMPT_LABELS,
    Feature,
    MedicalCondition,
    PlanDuration,
    get_feature_info,
)
from curachef.core.schemas import (
    DietaryPlan,
    NutritionInfo,
    PersonalizedPlan,
    Recipe,
    RecipeList,
    UserPreferences,
)
from curachef.errors import InvalidFeature, NotAGenerationFeature
from curachef.prompts import templates
from curachef.prompts.preferences import format_preferences_for_prompt


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the invoker needs for one boundary call."""

    feature: Feature
    prompt: str
    response_model: type[BaseModel]
    streams: bool = False
    image_capable: bool = False

    @property
    def schema(self) -> dict:
        """JSON schema descriptor handed to the boundary."""
        return self.response_model.model_json_schema(by_alias=True)


def resolve_prompt_and_schema(
    feature: Feature | str,
    text_input: str,
    condition: MedicalCondition = MedicalCondition.NONE,
    preferences: UserPreferences | None = None,
    plan_duration: PlanDuration | None = None,
) -> GenerationRequest:
    """
    Resolve the prompt and output schema for a feature.

    Args:
        feature: The feature to generate for
        text_input: Free text from the user (ingredients, meal description)
        condition: Selected medical condition (planner only)
        preferences: The user's preferences, injected into every template
        plan_duration: Plan granularity (personalized planner only)

    Returns:
        GenerationRequest with prompt text and response model

    Raises:
        NotAGenerationFeature: For USER_PREFERENCES
        InvalidFeature: For values that are not a Feature
    """
    try:
        info = get_feature_info(feature)
    except ValueError:
        raise InvalidFeature("Invalid feature selected.") from None

    feature = info.feature
    preference_string = format_preferences_for_prompt(preferences)

    if feature == Feature.RECIPE_GENERATOR:
        prompt = templates.RECIPE_GENERATOR_TEMPLATE.format(
            text_input=text_input,
            preferences=preference_string,
            image_prompt_instruction=templates.RECIPE_IMAGE_PROMPT_INSTRUCTION,
        )
        response_model = RecipeList

    elif feature == Feature.LEFTOVER_RECOMMENDER:
        prompt = templates.LEFTOVER_RECOMMENDER_TEMPLATE.format(
            text_input=text_input,
            preferences=preference_string,
            image_prompt_instruction=templates.RECIPE_IMAGE_PROMPT_INSTRUCTION,
        )
        response_model = RecipeList

    elif feature == Feature.NUTRITIONAL_ANALYZER:
        prompt = templates.NUTRITIONAL_ANALYZER_TEMPLATE.format(
            image_instruction=templates.IMAGE_INSTRUCTION,
            text_input=text_input,
        )
        response_model = NutritionInfo

    elif feature == Feature.MEDICAL_DIETARY_PLANNER:
        prompt = templates.MEDICAL_DIETARY_PLANNER_TEMPLATE.format(
            condition=CONDITION_PROMPT_LABELS[MedicalCondition(condition)],
            text_input=text_input,
            preferences=preference_string,
            image_prompt_instruction=templates.RECIPE_IMAGE_PROMPT_INSTRUCTION,
        )
        response_model = DietaryPlan

    elif feature == Feature.PERSONALIZED_DIETARY_PLANNER:
        duration = PlanDuration(plan_duration) if plan_duration else PlanDuration.WEEKLY
        prompt = templates.PERSONALIZED_PLAN_TEMPLATE.format(
            duration=duration.value,
            preferences=preference_string,
        )
        response_model = PersonalizedPlan

    elif feature == Feature.USER_PREFERENCES:
        raise NotAGenerationFeature("This feature does not generate content directly.")

    else:
        raise InvalidFeature("Invalid feature selected.")

    return GenerationRequest(
        feature=feature,
        prompt=prompt,
        response_model=response_model,
        streams=info.streams,
        image_capable=info.image_capable,
    )


def build_meal_recipe_prompt(
    title: str,
    description: str,
    preferences: UserPreferences | None = None,
) -> str:
    """Prompt for expanding a plan meal stub into a full recipe."""
    return templates.MEAL_RECIPE_TEMPLATE.format(
        title=title,
        description=description,
        preferences=format_preferences_for_prompt(preferences),
    )


def build_recipe_nutrition_prompt(recipe: Recipe) -> str:
    """Prompt for the nutritional breakdown of a generated recipe."""
    return templates.RECIPE_NUTRITION_TEMPLATE.format(
        title=recipe.title,
        servings=recipe.servings,
        ingredients=", ".join(recipe.ingredients),
    )
