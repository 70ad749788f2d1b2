"""Tests for the LLM client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest
from anthropic import APIConnectionError, APIStatusError

from blogforge.config import Settings
from blogforge.errors import (
    ErrorKind,
    LLMConnectionError,
    LLMNotConfiguredError,
    LLMUpstreamError,
    OutlineParseError,
    classify,
)
from blogforge.llm.client import ClaudeClient
from blogforge.llm.prompts import render
from tests.conftest import make_mock_response


def _status_error(code: int) -> APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(code, request=request)
    return APIStatusError("boom", response=response, body=None)


def test_generate_returns_text(mock_claude_client: ClaudeClient) -> None:
    """Test that generate() returns the text from Claude's response."""
    mock_claude_client._client.messages.create.return_value = make_mock_response(
        "Hello, this is a test response."
    )

    result = mock_claude_client.generate(
        [{"role": "user", "content": "Say hello"}],
        system="You are a test assistant.",
    )

    assert result == "Hello, this is a test response."
    assert mock_claude_client._total_input_tokens == 100
    assert mock_claude_client._total_output_tokens == 200
    kwargs = mock_claude_client._client.messages.create.call_args.kwargs
    assert kwargs["system"] == "You are a test assistant."
    assert kwargs["model"] == "claude-sonnet-4-20250514"


def test_complete_sends_single_user_message(mock_claude_client: ClaudeClient) -> None:
    mock_claude_client._client.messages.create.return_value = make_mock_response("ok")

    assert mock_claude_client.complete("Write an outline") == "ok"

    kwargs = mock_claude_client._client.messages.create.call_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "Write an outline"}]
    assert "system" not in kwargs
    assert kwargs["max_tokens"] == 1024


def test_usage_summary_accumulates(mock_claude_client: ClaudeClient) -> None:
    """Test that token usage accumulates across calls."""
    mock_claude_client._client.messages.create.return_value = make_mock_response(
        "Response 1", input_tokens=50, output_tokens=100
    )
    mock_claude_client.complete("1")

    mock_claude_client._client.messages.create.return_value = make_mock_response(
        "Response 2", input_tokens=75, output_tokens=150
    )
    mock_claude_client.complete("2")

    summary = mock_claude_client.usage_summary
    assert summary["total_input_tokens"] == 125
    assert summary["total_output_tokens"] == 250
    assert summary["api_calls"] == 2


def test_missing_api_key_fails_before_calling(settings: Settings) -> None:
    client = ClaudeClient(settings.model_copy(update={"anthropic_api_key": ""}))
    client._client = MagicMock()

    with pytest.raises(LLMNotConfiguredError):
        client.complete("anything")

    client._client.messages.create.assert_not_called()


@pytest.mark.parametrize(
    ("code", "kind"),
    [
        (401, ErrorKind.UPSTREAM_REJECTED),
        (400, ErrorKind.UPSTREAM_REJECTED),
        (429, ErrorKind.UPSTREAM_TRANSIENT),
        (529, ErrorKind.UPSTREAM_TRANSIENT),
    ],
)
def test_status_errors_are_classified(
    mock_claude_client: ClaudeClient, code: int, kind: ErrorKind
) -> None:
    mock_claude_client._client.messages.create.side_effect = _status_error(code)

    with pytest.raises(LLMUpstreamError) as excinfo:
        mock_claude_client.complete("hi")

    assert excinfo.value.status_code == code
    assert excinfo.value.kind is kind
    assert str(excinfo.value) == f"AI API error: {code}"


def test_no_retry_by_default(mock_claude_client: ClaudeClient) -> None:
    mock_claude_client._client.messages.create.side_effect = _status_error(503)

    with pytest.raises(LLMUpstreamError):
        mock_claude_client.complete("hi")

    assert mock_claude_client._client.messages.create.call_count == 1


def test_connection_error_maps_to_network(mock_claude_client: ClaudeClient) -> None:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    mock_claude_client._client.messages.create.side_effect = APIConnectionError(request=request)

    with pytest.raises(LLMConnectionError) as excinfo:
        mock_claude_client.complete("hi")

    assert classify(excinfo.value) is ErrorKind.NETWORK


def test_classify_fallbacks() -> None:
    assert classify(OutlineParseError("bad")) is ErrorKind.MALFORMED_OUTPUT
    assert classify(httpx.ConnectTimeout("slow")) is ErrorKind.NETWORK
    assert classify(RuntimeError("?")) is ErrorKind.INTERNAL


def test_render_outline_template() -> None:
    """Test that Jinja2 templates render correctly."""
    rendered = render(
        "outline.j2",
        topic="Index Funds",
        voice_instructions="Voice: Expert Authority",
        tone="professional",
        target_length=1500,
        keywords=["index funds", "ETF"],
        research=None,
    )

    assert 'blog post about "Index Funds"' in rendered
    assert "Target length: 1500 words" in rendered
    assert "index funds, ETF" in rendered
    assert "Research Data Available" not in rendered
