"""
CuraChef - Prompt Logger.

Writes one markdown file per boundary call: prompt, output schema and the
parsed response (or the error). Files are numbered in call order inside a
per-run directory under prompt_logs/.

Enabled via CURACHEF_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel

LOG_PROMPTS = os.getenv("CURACHEF_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

_run_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True, log_dir: Path | None = None) -> None:
    """Turn prompt logging on or off for this process, optionally moving the log root."""
    global LOG_PROMPTS, LOG_DIR
    LOG_PROMPTS = enabled
    if log_dir is not None:
        LOG_DIR = Path(log_dir)
    if enabled:
        LOG_DIR.mkdir(parents=True, exist_ok=True)


def _run_dir() -> Path:
    global _run_id
    if _run_id is None:
        _run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = LOG_DIR / _run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def _next_log_path(call_kind: str) -> Path:
    global _call_counter
    _call_counter += 1
    return _run_dir() / f"{_call_counter:02d}_{call_kind}.md"


def _code_block(text: str, lang: str = "") -> str:
    return f"```{lang}\n{text}\n```\n"


def _render_response(response: Any) -> str:
    # Streamed calls hand over the raw buffer
    if isinstance(response, str):
        return _code_block(response)
    if isinstance(response, BaseModel):
        response = response.model_dump(mode="json", by_alias=True)
    try:
        return _code_block(json.dumps(response, indent=2, default=str), "json")
    except (TypeError, ValueError) as e:
        return _code_block(str(response)) + f"\n(Serialization error: {e})\n"


def log_prompt(
    *,
    call_kind: str,
    model: str,
    prompt: str,
    response_model: type[BaseModel],
    has_image: bool = False,
    streamed: bool = False,
    response: Any = None,
    error: str | None = None,
) -> Path | None:
    """
    Record one boundary call.

    Args:
        call_kind: Feature value or auxiliary call name
        model: Model the call went to
        prompt: Prompt text sent as the user message
        response_model: Schema the response was parsed into
        has_image: An image part was attached
        streamed: The response arrived as a token stream
        response: Parsed model, or the raw buffer for streams
        error: Error text if the call failed

    Returns:
        The written file, or None when logging is off
    """
    if not LOG_PROMPTS:
        return None

    flags = [name for name, on in (("image attached", has_image), ("streamed", streamed)) if on]
    schema = json.dumps(response_model.model_json_schema(by_alias=True), indent=2)

    sections = [
        f"# LLM Call: {call_kind}\n",
        f"**Time:** {datetime.now().isoformat()}",
        f"**Model:** {model}",
        f"**Response Model:** {response_model.__name__}",
    ]
    if flags:
        sections.append(f"**Flags:** {', '.join(flags)}")
    sections += ["\n---\n", "## Prompt\n", _code_block(prompt)]
    sections += ["<details><summary>Output schema</summary>\n", _code_block(schema, "json"), "</details>\n"]
    sections += ["---\n", "## Response\n"]

    if error:
        sections.append(f"**ERROR:** {error}\n")
    elif response is not None:
        sections.append(_render_response(response))
    else:
        sections.append("(No response)\n")

    filepath = _next_log_path(call_kind)
    filepath.write_text("\n".join(sections), encoding="utf-8")
    return filepath


def reset_session() -> None:
    """Start a new run directory and restart numbering."""
    global _run_id, _call_counter
    _run_id = None
    _call_counter = 0
