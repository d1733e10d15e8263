"""
CuraChef - Model Router.

Selects model and sampling settings per call kind.

Call kinds are feature values plus the auxiliary calls:
- identify: ingredient identification from a photo
- meal_recipe: expanding a plan meal into a full recipe
- recipe_nutrition: nutrition for a generated recipe
"""

from typing import TypedDict

from curachef.config import settings


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float
    max_tokens: int


# Lower = more deterministic, higher = more creative
CALL_TEMPERATURE: dict[str, float] = {
    "recipe-generator": 0.7,
    "leftover-recommender": 0.7,
    "medical-dietary-planner": 0.4,  # Guidance should stay conservative
    "personalized-dietary-planner": 0.6,
    "nutritional-analyzer": 0.2,
    "identify": 0.1,
    "meal_recipe": 0.5,
    "recipe_nutrition": 0.2,
}

# Plans are long; everything else fits the default
CALL_MAX_TOKENS: dict[str, int] = {
    "personalized-dietary-planner": 16_000,
}

DEFAULT_TEMPERATURE = 0.5
DEFAULT_MAX_TOKENS = 4_096


def get_model() -> str:
    """Get the configured model name."""
    return settings.curachef_model


def get_call_config(call_kind: str) -> ModelConfig:
    """
    Get model configuration for a call kind.

    Args:
        call_kind: Feature value or auxiliary call name

    Returns:
        Model configuration with model, temperature and token cap
    """
    return {
        "model": get_model(),
        "temperature": CALL_TEMPERATURE.get(call_kind, DEFAULT_TEMPERATURE),
        "max_tokens": CALL_MAX_TOKENS.get(call_kind, DEFAULT_MAX_TOKENS),
    }
