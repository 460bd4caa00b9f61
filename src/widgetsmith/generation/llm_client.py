"""
Text generation through the Anthropic API, plus helpers that pull code and
JSON out of the responses.
"""
import json
import os
import re
from typing import Any

import anthropic

from widgetsmith.support.exceptions import GenerationClientError
from widgetsmith.support.models import LLMConfig


def get_api_key(config: LLMConfig) -> str:
    api_key = os.environ.get(config.api_key_env_var)
    if not api_key:
        raise GenerationClientError(
            f"API key not found in environment variable {config.api_key_env_var}."
        )
    return api_key


def call_llm(system_prompt: str, prompt: str, config: LLMConfig, max_tokens: int | None = None) -> str:
    """
    Send one system/user prompt pair and return the text of the reply.
    Raises GenerationClientError on a missing key, an error status or a
    transport failure. Requests are never retried.
    """
    client = anthropic.Anthropic(api_key=get_api_key(config), max_retries=0)

    try:
        message = client.messages.create(
            model=config.model,
            max_tokens=max_tokens or config.max_tokens,
            temperature=config.temperature,
            system=system_prompt,
            messages=[
                {"role": "user", "content": prompt}
            ]
        )
    except anthropic.APIStatusError as e:
        body = e.response.text if e.response is not None else str(e)
        raise GenerationClientError(
            f"Anthropic API error: {e.status_code} - {body}",
            status_code=e.status_code,
            body=body,
        ) from e
    except anthropic.APIError as e:
        raise GenerationClientError(f"Anthropic API call failed: {e}") from e

    return "".join(
        block.text for block in message.content if getattr(block, "type", "text") == "text"
    )


def extract_code_block(response: str, language: str = "typescript") -> str:
    """
    Body of the first fenced block in `language`, else of the first fenced
    block of any language, else the stripped response.
    """
    match = re.search(rf"```{re.escape(language)}[ \t]*\n(.*?)```", response, re.DOTALL)
    if not match:
        match = re.search(r"```[\w-]*[ \t]*\n(.*?)```", response, re.DOTALL)

    if match:
        return match.group(1).strip()
    return response.strip()


def extract_json(response: str) -> Any | None:
    """
    Decode the first ```json block, or the whole response when it is a bare
    JSON object. Returns None when nothing decodes.
    """
    match = re.search(r"```json[ \t]*\n(.*?)```", response, re.DOTALL)
    if match:
        candidate = match.group(1).strip()
    else:
        candidate = response.strip()
        if not (candidate.startswith("{") and candidate.endswith("}")):
            return None

    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None
