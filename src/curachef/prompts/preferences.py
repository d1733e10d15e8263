"""
CuraChef - Preference Formatter.

Turns a UserPreferences record into one instruction sentence for prompt
injection. Pure and deterministic; empty fields are skipped.
"""

from curachef.core.schemas import UserPreferences

NO_PREFERENCES = "The user has no specific preferences set."


def format_preferences_for_prompt(preferences: UserPreferences | None) -> str:
    """
    Format preferences as a natural-language constraint string.

    One clause per populated category, in a fixed order: restrictions,
    allergies, cuisines, calorie goal, health goals (with the free-text
    addendum), budget.

    Args:
        preferences: The user's saved preferences (None means unset)

    Returns:
        Instruction sentence, or NO_PREFERENCES when nothing is set
    """
    if preferences is None:
        return NO_PREFERENCES

    parts: list[str] = []

    # HARD CONSTRAINTS
    if preferences.dietary_restrictions:
        parts.append(f"Dietary Restrictions: {', '.join(preferences.dietary_restrictions)}.")
    if preferences.allergies:
        parts.append(
            "The user is allergic to the following and these ingredients MUST BE AVOIDED: "
            f"{', '.join(preferences.allergies)}."
        )

    # TASTE
    if preferences.favorite_cuisines:
        parts.append(f"Favorite Cuisines: {', '.join(preferences.favorite_cuisines)}.")
    if preferences.daily_calorie_goal:
        parts.append(f"Approximate daily calorie goal: {preferences.daily_calorie_goal} kcal.")

    goals = list(preferences.health_goals)
    if preferences.other_health_goals.strip():
        goals.append(preferences.other_health_goals.strip())
    if goals:
        parts.append(f"Health Goals: {', '.join(goals)}.")

    if preferences.budget:
        parts.append(f"The recipes should be {preferences.budget.value}.")

    if not parts:
        return NO_PREFERENCES
    return f"The user has the following preferences, which you must adhere to: {' '.join(parts)}"
