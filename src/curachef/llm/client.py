"""
CuraChef - LLM Client.

Wraps OpenAI with Instructor for structured single-shot outputs, and
exposes a raw token stream for streamed generation.
All boundary calls go through here for consistency and prompt logging.

Every call is made exactly once. Retrying is left to the user.
"""

import base64
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any, TypeVar

import instructor
from openai import AsyncOpenAI
from pydantic import BaseModel

from curachef.config import settings
from curachef.errors import GenerationFailed
from curachef.llm.model_router import get_call_config
from curachef.llm.prompt_logger import log_prompt

# Type variable for generic structured output
T = TypeVar("T", bound=BaseModel)

# Singleton client instances
_client: instructor.AsyncInstructor | None = None
_raw_client: AsyncOpenAI | None = None


@dataclass(frozen=True)
class ImageData:
    """Raw image bytes handed over by a file picker or camera capture."""

    data: bytes
    mime_type: str = "image/jpeg"

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str = "image/jpeg") -> "ImageData":
        return cls(data=base64.b64decode(encoded), mime_type=mime_type)

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _api_key() -> str:
    key = settings.openai_api_key
    if not key:
        raise GenerationFailed(
            "OPENAI_API_KEY is not set. Add it to your environment or .env file."
        )
    return key


def get_raw_async_client() -> AsyncOpenAI:
    """Get the plain AsyncOpenAI client (used for streaming)."""
    global _raw_client

    if _raw_client is None:
        _raw_client = AsyncOpenAI(api_key=_api_key())

    return _raw_client


def get_client() -> instructor.AsyncInstructor:
    """
    Get the Instructor-wrapped AsyncOpenAI client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        _client = instructor.from_openai(get_raw_async_client())

    return _client


def build_user_content(
    prompt: str,
    image: ImageData | None = None,
    *,
    image_first: bool = True,
) -> list[dict[str, Any]]:
    """
    Build the content parts of the user message.

    With image_first the image leads, so the model treats it as primary
    context and the text as a supplement.
    """
    parts: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
    if image is not None:
        image_part = {"type": "image_url", "image_url": {"url": image.to_data_uri()}}
        if image_first:
            parts.insert(0, image_part)
        else:
            parts.append(image_part)
    return parts


def build_response_format(response_model: type[BaseModel]) -> dict[str, Any]:
    """JSON-schema response format for raw (non-Instructor) calls."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": response_model.__name__,
            "schema": response_model.model_json_schema(by_alias=True),
        },
    }


async def call_llm(
    *,
    response_model: type[T],
    prompt: str,
    call_kind: str,
    image: ImageData | None = None,
    image_first: bool = True,
) -> T:
    """
    Make a structured single-shot LLM call.

    Args:
        response_model: Pydantic model class for the response
        prompt: The full prompt text
        call_kind: Feature value or auxiliary call name (model config + logging)
        image: Optional image attached to the request
        image_first: Place the image before the text part

    Returns:
        Instance of response_model with validated data

    Example:
        recipe = await call_llm(
            response_model=Recipe,
            prompt="Generate a complete recipe for ...",
            call_kind="meal_recipe",
        )
    """
    client = get_client()
    config = get_call_config(call_kind)
    model = config["model"]

    messages = [
        {"role": "user", "content": build_user_content(prompt, image, image_first=image_first)},
    ]

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            response_model=response_model,
            max_retries=1,  # Single attempt
            temperature=config["temperature"],
            max_tokens=config["max_tokens"],
        )

        log_prompt(
            call_kind=call_kind,
            model=model,
            prompt=prompt,
            response_model=response_model,
            has_image=image is not None,
            response=response,
        )

        return response

    except Exception as e:
        log_prompt(
            call_kind=call_kind,
            model=model,
            prompt=prompt,
            response_model=response_model,
            has_image=image is not None,
            error=str(e),
        )
        raise


async def call_llm_stream(
    *,
    response_model: type[BaseModel],
    prompt: str,
    call_kind: str,
) -> AsyncGenerator[str, None]:
    """
    Stream the raw text of a structured LLM call.

    Yields text fragments in arrival order. Their concatenation is one
    JSON document matching response_model; parsing is the caller's job.
    """
    client = get_raw_async_client()
    config = get_call_config(call_kind)
    model = config["model"]

    full_response = ""
    try:
        stream = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            response_format=build_response_format(response_model),
            temperature=config["temperature"],
            max_tokens=config["max_tokens"],
            stream=True,
        )

        async for chunk in stream:
            if not chunk.choices:
                continue
            token = chunk.choices[0].delta.content
            if token:
                full_response += token
                yield token

    except Exception as e:
        log_prompt(
            call_kind=call_kind,
            model=model,
            prompt=prompt,
            response_model=response_model,
            streamed=True,
            error=str(e),
        )
        raise

    log_prompt(
        call_kind=call_kind,
        model=model,
        prompt=prompt,
        response_model=response_model,
        streamed=True,
        response=full_response,
    )
