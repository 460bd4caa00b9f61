"""
Unit tests for the generation client.
"""
from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from widgetsmith.generation.llm_client import call_llm, extract_code_block, extract_json
from widgetsmith.support.exceptions import GenerationClientError
from widgetsmith.support.models import LLMConfig

API_URL = "https://api.anthropic.com/v1/messages"


def text_message(text):
    block = MagicMock()
    block.type = "text"
    block.text = text
    message = MagicMock()
    message.content = [block]
    return message


def test_call_llm_missing_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(GenerationClientError, match="ANTHROPIC_API_KEY"):
        call_llm("system", "prompt", LLMConfig())


@patch("widgetsmith.generation.llm_client.anthropic.Anthropic")
def test_call_llm_success(mock_client_cls, monkeypatch):
    monkeypatch.setenv("MY_KEY", "secret")
    client = mock_client_cls.return_value
    client.messages.create.return_value = text_message("hello")

    config = LLMConfig(model="claude-test", api_key_env_var="MY_KEY")
    assert call_llm("system", "prompt", config, max_tokens=99) == "hello"

    mock_client_cls.assert_called_once_with(api_key="secret", max_retries=0)
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 99
    assert kwargs["temperature"] == 0.2
    assert kwargs["system"] == "system"
    assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]


@patch("widgetsmith.generation.llm_client.anthropic.Anthropic")
def test_call_llm_error_status(mock_client_cls, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "secret")
    response = httpx.Response(529, text="overloaded", request=httpx.Request("POST", API_URL))
    mock_client_cls.return_value.messages.create.side_effect = anthropic.APIStatusError(
        "overloaded", response=response, body=None
    )

    with pytest.raises(GenerationClientError) as exc_info:
        call_llm("system", "prompt", LLMConfig())

    assert str(exc_info.value) == "Anthropic API error: 529 - overloaded"
    assert exc_info.value.status_code == 529
    assert exc_info.value.body == "overloaded"


@patch("widgetsmith.generation.llm_client.anthropic.Anthropic")
def test_call_llm_transport_failure(mock_client_cls, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "secret")
    mock_client_cls.return_value.messages.create.side_effect = anthropic.APIConnectionError(
        request=httpx.Request("POST", API_URL)
    )

    with pytest.raises(GenerationClientError, match="Anthropic API call failed"):
        call_llm("system", "prompt", LLMConfig())


def test_extract_code_block():
    response = "Here you go:\n```typescript\nexport class A {}\n```\nDone."
    assert extract_code_block(response) == "export class A {}"

    other = "```ts\nconst a = 1;\n```"
    assert extract_code_block(other) == "const a = 1;"

    assert extract_code_block("  plain text  ") == "plain text"


def test_extract_json():
    assert extract_json('Analysis:\n```json\n{"hasTable": true}\n```') == {"hasTable": True}
    assert extract_json('{"hasTable": false}') == {"hasTable": False}
    assert extract_json("```json\n{not json}\n```") is None
    assert extract_json("no json here") is None
