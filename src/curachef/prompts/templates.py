"""
CuraChef - Prompt Templates.

One template per generating feature plus the auxiliary calls
(ingredient identification, meal expansion, recipe nutrition).
Placeholders are filled with str.format by the resolver.
"""

IMAGE_INSTRUCTION = (
    "If an image is provided, analyze the meal in the image. "
    "Combine this with any text description. Prioritize the image content."
)

RECIPE_IMAGE_PROMPT_INSTRUCTION = (
    "For each recipe, also provide a detailed, descriptive `imagePrompt` suitable for an "
    "AI image generator to create a visually appealing photo of the final dish."
)


RECIPE_GENERATOR_TEMPLATE = (
    "Generate 3-4 diverse and creative recipes from the following available ingredients: {text_input}. "
    "Ensure a variety of cuisines, including a mix of Indian and South Indian recipes. "
    "The recipes should be suitable for a home cook. {preferences} {image_prompt_instruction}"
)

LEFTOVER_RECOMMENDER_TEMPLATE = (
    "I have some leftovers. Here's what I have: {text_input}. "
    "Suggest 2-3 creative new meals to avoid food waste. "
    "Ensure a variety of cuisines, including a mix of Indian and South Indian recipes if possible "
    "with the ingredients. {preferences} {image_prompt_instruction}"
)

NUTRITIONAL_ANALYZER_TEMPLATE = (
    "Analyze the nutritional content of the meal or ingredients. {image_instruction} "
    "Here's the description: {text_input}. Provide a detailed breakdown."
)

MEDICAL_DIETARY_PLANNER_TEMPLATE = """Act as a registered dietitian. A user with {condition} has the following ingredients: {text_input}.
1. Provide "Foods to Favor" and "Foods to Avoid" for their condition.
2. Give key dietary guidelines.
3. Generate 2-3 recipes suitable for them using their ingredients, strictly adhering to their dietary needs ({condition}). Include a variety of cuisines, such as a mix of Indian and South Indian dishes if possible. {preferences} {image_prompt_instruction}"""

PERSONALIZED_PLAN_TEMPLATE = """Act as an expert nutritionist. Create a comprehensive {duration} dietary plan for a user based on their specific preferences.
The plan should be creative, delicious, and easy to follow for a home cook.

**User Preferences (You MUST adhere to all of these):**
{preferences}

**Your Task:**
1.  Generate a complete {duration} meal plan. For each day, provide meals for Breakfast, Lunch, and Dinner. You can optionally add 1-2 healthy snacks.
2.  For EVERY meal, provide just a creative `title` and a short, enticing `description`. DO NOT generate the full recipe (ingredients, instructions, etc.) in this initial plan. The full recipe will be requested later.
3.  Ensure the meal titles are diverse and align with the user's favorite cuisines.
4.  Calculate and provide the estimated total calories, protein, carbs, and fat for each day.
5.  The plan's title and summary should reflect the user's main health goals.
6.  Strictly avoid any ingredients the user is allergic to.
7.  Adhere to all dietary restrictions mentioned.
"""


# =============================================================================
# Auxiliary calls
# =============================================================================

IDENTIFY_INGREDIENTS_PROMPT = (
    "Analyze the provided image and identify all the food ingredients present. "
    "List them as a single, comma-separated string. Be concise and accurate."
)

MEAL_RECIPE_TEMPLATE = """Generate a complete recipe for a dish titled "{title}".
The dish is described as: "{description}".
The recipe should be suitable for a home cook and must follow all the user's preferences.

**User Preferences:**
{preferences}

Generate the full recipe details: title, description, ingredients, instructions, prep time, cook time, servings, and a visually descriptive image prompt for an AI image generator. The title and description you generate in the recipe must match the input title and description."""

RECIPE_NUTRITION_TEMPLATE = (
    'Analyze the nutritional content of the following recipe: "{title}". '
    "The recipe serves {servings}. Ingredients: {ingredients}. "
    "Provide a detailed breakdown including total calories, calories per serving, "
    "macronutrients (protein, carbohydrates, fat in grams), and a list of 5 key vitamins "
    "and 5 key minerals with their amounts."
)
