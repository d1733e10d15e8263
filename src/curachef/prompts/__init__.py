"""
CuraChef - Prompt construction.

Feature -> (prompt, schema) resolution and preference formatting.
"""

from curachef.prompts.preferences import format_preferences_for_prompt
from curachef.prompts.resolver import GenerationRequest, resolve_prompt_and_schema

__all__ = [
    "GenerationRequest",
    "format_preferences_for_prompt",
    "resolve_prompt_and_schema",
]
