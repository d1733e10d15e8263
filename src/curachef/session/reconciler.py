"""
CuraChef - Result Reconciler.

Merges one generation outcome into a feature's result slot.

Rules:
- Every feature except the medical planner replaces the field it owns.
- The medical planner is two-step. Guidance (condition, foods, guidelines)
  is written first by a single-shot call; the streamed recipes are then
  merged into that plan without touching its other fields.
"""

from pydantic import BaseModel, Field

from curachef.core.features import Feature
from curachef.core.schemas import (
    DietaryPlan,
    NutritionInfo,
    PersonalizedPlan,
    Recipe,
    RecipeList,
    WireModel,
)


class FeatureResult(WireModel):
    """
    Per-feature result slot.

    Holds at most one kind of result. The medical planner keeps its
    recipes inside `dietary_plan`, not in `recipes`.
    """

    recipes: list[Recipe] = Field(default_factory=list)
    nutrition_info: NutritionInfo | None = None
    dietary_plan: DietaryPlan | None = None
    personalized_plan: PersonalizedPlan | None = None

    def is_empty(self) -> bool:
        return self == EMPTY_RESULT

    @property
    def all_recipes(self) -> list[Recipe]:
        """Recipes to display, wherever the feature keeps them."""
        if self.dietary_plan is not None:
            return list(self.dietary_plan.recipes)
        return list(self.recipes)


EMPTY_RESULT = FeatureResult()


def _expect(outcome: BaseModel, expected: type[BaseModel], feature: Feature) -> None:
    if not isinstance(outcome, expected):
        raise TypeError(
            f"{feature.value} expects {expected.__name__}, got {type(outcome).__name__}"
        )


def reconcile(
    slot: FeatureResult,
    feature: Feature,
    outcome: BaseModel | None,
) -> FeatureResult:
    """
    Merge a generation outcome into a slot.

    Args:
        slot: The feature's current slot (never mutated)
        feature: Feature the outcome belongs to
        outcome: Parsed response model, or None for "nothing to merge"

    Returns:
        The new slot

    Raises:
        TypeError: Outcome type does not belong to the feature
    """
    if outcome is None:
        return slot

    if feature in (Feature.RECIPE_GENERATOR, Feature.LEFTOVER_RECOMMENDER):
        _expect(outcome, RecipeList, feature)
        return slot.model_copy(update={"recipes": list(outcome.recipes)})

    if feature == Feature.NUTRITIONAL_ANALYZER:
        _expect(outcome, NutritionInfo, feature)
        return slot.model_copy(update={"nutrition_info": outcome})

    if feature == Feature.MEDICAL_DIETARY_PLANNER:
        if isinstance(outcome, DietaryPlan):
            # Guidance step: recipes always come from the stream
            guidance = outcome.model_copy(update={"recipes": []})
            return slot.model_copy(update={"dietary_plan": guidance})

        _expect(outcome, RecipeList, feature)
        if slot.dietary_plan is None:
            # No guidance to attach to; keep the recipes visible anyway
            return slot.model_copy(update={"recipes": list(outcome.recipes)})
        merged = slot.dietary_plan.model_copy(update={"recipes": list(outcome.recipes)})
        return slot.model_copy(update={"dietary_plan": merged})

    if feature == Feature.PERSONALIZED_DIETARY_PLANNER:
        _expect(outcome, PersonalizedPlan, feature)
        return slot.model_copy(update={"personalized_plan": outcome})

    raise TypeError(f"{feature.value} has no result slot")
