"""
CuraChef - AI kitchen companion.

Features:
- Recipe Generator / Leftover Recommender: recipes from what you have
- Nutritional Analyzer: calorie, macro and micronutrient breakdowns
- Medical Dietary Planner: condition-aware guidance plus recipes
- Personalized Dietary Plan: daily, weekly or monthly meal plans
"""

__version__ = "1.0.0"
