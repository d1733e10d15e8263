"""
CuraChef - LLM Client.

Provides structured LLM calls via Instructor and raw streaming.
"""

from curachef.llm.client import ImageData, call_llm, call_llm_stream, get_client
from curachef.llm.model_router import get_model

__all__ = [
    "ImageData",
    "get_client",
    "call_llm",
    "call_llm_stream",
    "get_model",
]
