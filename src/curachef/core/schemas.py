"""
CuraChef - Data Contracts.

Pydantic models shared by the prompt resolver, the generation invoker,
the session state and the user store.

Field names are snake_case in Python and camelCase on the wire, so the
JSON schema handed to the model and the stored user records keep the
shape the front end expects (`prepTime`, `foodsToFavor`, ...).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from curachef.core.features import BudgetTier


class WireModel(BaseModel):
    """Base for all contracts: camelCase aliases, immutable instances."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Serialize with camelCase keys for JSON storage/display."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Users
# =============================================================================


class UserPreferences(WireModel):
    """
    Dietary preferences owned by a user.

    Allergies are hard exclusions. Only changed through an explicit save.
    """

    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    favorite_cuisines: list[str] = Field(default_factory=list)
    daily_calorie_goal: int | None = None
    health_goals: list[str] = Field(default_factory=list)
    other_health_goals: str = ""
    budget: BudgetTier | None = None

    @field_validator("daily_calorie_goal", mode="before")
    @classmethod
    def _blank_calorie_goal(cls, value):
        # Forms submit "" for an untouched number input
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    @field_validator("daily_calorie_goal")
    @classmethod
    def _positive_calorie_goal(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("daily calorie goal must be a positive integer")
        return value

    @field_validator("budget", mode="before")
    @classmethod
    def _blank_budget(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def is_empty(self) -> bool:
        return self == UserPreferences()


class User(WireModel):
    """A registered user. `email` is the unique identifier."""

    email: str
    password_hash: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)


# =============================================================================
# Recipes
# =============================================================================


class Recipe(WireModel):
    """A full recipe. Only valid with every field present."""

    title: str = Field(description="The creative and appealing name of the recipe.")
    description: str = Field(description="A short, enticing description of the dish.")
    ingredients: list[str] = Field(description="A list of all ingredients with quantities.")
    instructions: list[str] = Field(description="Step-by-step cooking instructions.")
    prep_time: str = Field(description='Estimated preparation time (e.g., "15 minutes").')
    cook_time: str = Field(description='Estimated cooking time (e.g., "30 minutes").')
    servings: str = Field(description='Number of servings the recipe makes (e.g., "4 servings").')
    image_prompt: str = Field(
        description=(
            "A detailed, descriptive prompt for an AI image generator to create a visually "
            'appealing photo of the final dish. Example: "A close-up of a golden-brown roasted '
            'chicken, glistening with herbs, on a rustic wooden platter, surrounded by roasted '
            'root vegetables."'
        )
    )

    def ingredients_text(self) -> str:
        """Ingredients one per line, as copied to the clipboard."""
        return "\n".join(self.ingredients)


class RecipeList(WireModel):
    """Envelope for recipe-producing features."""

    recipes: list[Recipe] = Field(default_factory=list)


class IdentifiedIngredients(WireModel):
    """Result of identifying ingredients in a photo."""

    ingredients: str = Field(description="A comma-separated list of ingredients identified in the image.")


# =============================================================================
# Nutrition
# =============================================================================


class Calories(WireModel):
    total: float
    per_serving: float


class Macros(WireModel):
    protein: str = Field(description="e.g., '25g'")
    carbohydrates: str = Field(description="e.g., '40g'")
    fat: str = Field(description="e.g., '15g'")


class Nutrient(WireModel):
    name: str
    amount: str


class NutritionInfo(WireModel):
    """Nutritional breakdown of a meal or a recipe."""

    meal_name: str = Field(description="A descriptive name for the meal analyzed.")
    calories: Calories
    macros: Macros
    vitamins: list[Nutrient] = Field(default_factory=list)
    minerals: list[Nutrient] = Field(default_factory=list)


# =============================================================================
# Plans
# =============================================================================


class DietaryPlan(WireModel):
    """Condition-specific guidance. `recipes` arrives separately (streamed)."""

    condition: str
    foods_to_favor: list[str] = Field(default_factory=list)
    foods_to_avoid: list[str] = Field(default_factory=list)
    guidelines: str = ""
    recipes: list[Recipe] = Field(default_factory=list)


class RecipeStub(WireModel):
    """Title and description only. Expanded into a Recipe on demand."""

    title: str = Field(description="The creative and appealing name of the recipe.")
    description: str = Field(description="A short, enticing description of the dish to show in the plan overview.")


class PlanMeal(WireModel):
    name: str = Field(description="The name of the meal (e.g., 'Breakfast', 'Lunch').")
    recipe: RecipeStub


class DailyTotals(WireModel):
    calories: float
    protein: str = Field(description="e.g., '120g'")
    carbs: str = Field(description="e.g., '150g'")
    fat: str = Field(description="e.g., '60g'")


class PlanDay(WireModel):
    day: str = Field(description="The day of the plan (e.g., 'Monday', 'Day 1').")
    meals: list[PlanMeal]
    daily_totals: DailyTotals


class PersonalizedPlan(WireModel):
    """Multi-day meal plan. Meals carry stubs, not full recipes."""

    title: str = Field(description="The overall title of the dietary plan, reflecting the user's goals.")
    summary: str = Field(description="A brief summary of the plan's focus and benefits.")
    days: list[PlanDay]
