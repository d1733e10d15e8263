"""
CuraChef - Feature System.

Each feature is one selectable capability with its own prompt template,
output schema and result shape:
- RECIPE_GENERATOR: recipes from available ingredients (streamed)
- NUTRITIONAL_ANALYZER: breakdown of a described/photographed meal
- LEFTOVER_RECOMMENDER: new meals from leftovers (streamed)
- MEDICAL_DIETARY_PLANNER: condition guidance, then recipes (streamed)
- PERSONALIZED_DIETARY_PLANNER: multi-day plan from preferences only
- USER_PREFERENCES: settings page, never generates
"""

from dataclasses import dataclass
from enum import Enum


class Feature(str, Enum):
    """Selectable application features."""

    RECIPE_GENERATOR = "recipe-generator"
    NUTRITIONAL_ANALYZER = "nutritional-analyzer"
    LEFTOVER_RECOMMENDER = "leftover-recommender"
    MEDICAL_DIETARY_PLANNER = "medical-dietary-planner"
    PERSONALIZED_DIETARY_PLANNER = "personalized-dietary-planner"
    USER_PREFERENCES = "user-preferences"


class MedicalCondition(str, Enum):
    """Conditions supported by the medical dietary planner."""

    NONE = "none"
    TYPE_2_DIABETES = "type-2-diabetes"
    HYPERTENSION = "hypertension"
    CELIAC_DISEASE = "celiac-disease"
    HIGH_CHOLESTEROL = "high-cholesterol"


class PlanDuration(str, Enum):
    """Granularity of a personalized dietary plan."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class BudgetTier(str, Enum):
    BUDGET_FRIENDLY = "budget-friendly"
    MODERATE = "moderate"
    PREMIUM = "premium"


# Labels used inside prompts. NONE reads as general health if it ever
# reaches a template; the session rejects it before that for the planner.
CONDITION_PROMPT_LABELS: dict[MedicalCondition, str] = {
    MedicalCondition.TYPE_2_DIABETES: "Type 2 Diabetes",
    MedicalCondition.HYPERTENSION: "Hypertension",
    MedicalCondition.CELIAC_DISEASE: "Celiac Disease (Gluten-Free)",
    MedicalCondition.HIGH_CHOLESTEROL: "High Cholesterol",
    MedicalCondition.NONE: "General Health",
}

# Labels used by selectors in the front end
CONDITION_LABELS: dict[MedicalCondition, str] = {
    MedicalCondition.NONE: "Select a Condition",
    MedicalCondition.TYPE_2_DIABETES: "Type 2 Diabetes",
    MedicalCondition.HYPERTENSION: "Hypertension",
    MedicalCondition.CELIAC_DISEASE: "Celiac Disease",
    MedicalCondition.HIGH_CHOLESTEROL: "High Cholesterol",
}

DIETARY_RESTRICTIONS = ["Non-Vegetarian", "Vegetarian", "Vegan", "Gluten-Free", "Dairy-Free", "Low-Carb"]
ALLERGIES = ["Peanuts", "Tree Nuts", "Milk", "Eggs", "Soy", "Wheat", "Fish", "Shellfish", "Sesame"]
CUISINE_CHOICES = ["Italian", "Mexican", "Indian", "Chinese", "Thai", "Mediterranean", "Japanese", "American"]
HEALTH_GOALS = [
    "Weight Loss",
    "Muscle Gain",
    "Heart Health",
    "Improved Energy",
    "Digestive Health",
    "Stress Reduction",
    "General Wellness",
]
BUDGET_LABELS: dict[BudgetTier, str] = {
    BudgetTier.BUDGET_FRIENDLY: "Budget-Friendly",
    BudgetTier.MODERATE: "Moderate",
    BudgetTier.PREMIUM: "Premium",
}


# Feature behavior configuration
FEATURE_CONFIG = {
    Feature.RECIPE_GENERATOR: {
        "title": "Recipe Generator",
        "description": "Enter your available ingredients, and our AI will suggest delicious recipes, helping you minimize food waste.",
        "button_text": "Generate Recipes",
        "generates": True,
        "streams": True,
        "image_capable": False,
    },
    Feature.NUTRITIONAL_ANALYZER: {
        "title": "Nutritional Analyzer",
        "description": "Describe a meal or list its ingredients to get a detailed breakdown of calories, macros, vitamins, and minerals.",
        "button_text": "Analyze Nutrition",
        "generates": True,
        "streams": False,
        "image_capable": True,   # Image goes to the model directly
    },
    Feature.LEFTOVER_RECOMMENDER: {
        "title": "Leftover Recommender",
        "description": "Don't let leftovers go to waste! Tell us what you have, and we'll suggest creative new meals to make from them.",
        "button_text": "Find Recommendations",
        "generates": True,
        "streams": True,
        "image_capable": False,
    },
    Feature.MEDICAL_DIETARY_PLANNER: {
        "title": "Medical Dietary Planner",
        "description": "Select a medical condition to receive curated recipes and dietary guidelines that align with your specific health needs.",
        "button_text": "Create Dietary Plan",
        "generates": True,
        "streams": True,         # Recipes stream after the guidance call
        "image_capable": False,
    },
    Feature.PERSONALIZED_DIETARY_PLANNER: {
        "title": "Personalized Dietary Plan",
        "description": "Get a daily, weekly, or monthly meal plan tailored to your health goals, dietary needs, and preferences.",
        "button_text": "Generate Plan",
        "generates": True,
        "streams": False,
        "image_capable": False,
    },
    Feature.USER_PREFERENCES: {
        "title": "My Preferences",
        "description": "Set your dietary preferences, favorite cuisines, and health goals to get recipes tailored just for you.",
        "button_text": "Save Preferences",
        "generates": False,
        "streams": False,
        "image_capable": False,
    },
}

GENERATION_FEATURES: tuple[Feature, ...] = tuple(
    feature for feature, config in FEATURE_CONFIG.items() if config["generates"]
)


@dataclass(frozen=True)
class FeatureInfo:
    """Read-only view over FEATURE_CONFIG for one feature."""

    feature: Feature

    @property
    def config(self) -> dict:
        return FEATURE_CONFIG[self.feature]

    @property
    def title(self) -> str:
        return self.config["title"]

    @property
    def description(self) -> str:
        return self.config["description"]

    @property
    def button_text(self) -> str:
        return self.config["button_text"]

    @property
    def generates(self) -> bool:
        return self.config["generates"]

    @property
    def streams(self) -> bool:
        return self.config["streams"]

    @property
    def image_capable(self) -> bool:
        return self.config["image_capable"]


def get_feature_info(feature: Feature) -> FeatureInfo:
    """Get the feature info, raising ValueError for unknown values."""
    return FeatureInfo(Feature(feature))
