"""Wrapper around the Anthropic Claude SDK."""

from __future__ import annotations

import logging

from anthropic import Anthropic, APIConnectionError, APIStatusError
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from blogforge.config import Settings
from blogforge.errors import (
    ErrorKind,
    LLMConnectionError,
    LLMError,
    LLMNotConfiguredError,
    LLMUpstreamError,
)

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    """Return True only for transient failures (rate-limits, server errors, network).

    Rejected requests (401, 400, ...) will never succeed without a
    change to the request or the configuration.
    """
    return isinstance(exc, LLMError) and exc.kind in (
        ErrorKind.UPSTREAM_TRANSIENT,
        ErrorKind.NETWORK,
    )


class ClaudeClient:
    """Thin wrapper providing error translation, optional retries and usage tracking."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.anthropic_api_key
        # The SDK retries on its own by default; attempts are governed here instead
        self._client = Anthropic(
            api_key=settings.anthropic_api_key or "not-configured",
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )
        self._model = settings.model
        self._max_tokens = settings.max_tokens
        self._temperature = settings.temperature
        self._max_attempts = max(1, settings.llm_max_attempts)
        self._total_input_tokens = 0
        self._total_output_tokens = 0
        self._call_count = 0

    @property
    def model(self) -> str:
        return self._model

    def generate(
        self,
        messages: list[dict],
        *,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a message to Claude and return the text response."""
        if not self._api_key:
            raise LLMNotConfiguredError("ANTHROPIC_API_KEY is not set")

        retrying = Retrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            reraise=True,
        )
        return retrying(
            self._create,
            messages,
            system=system,
            max_tokens=max_tokens or self._max_tokens,
            temperature=temperature if temperature is not None else self._temperature,
        )

    def complete(self, prompt: str, *, system: str | None = None) -> str:
        """Single-turn convenience: one user message in, text out."""
        return self.generate([{"role": "user", "content": prompt}], system=system)

    def _create(
        self,
        messages: list[dict],
        *,
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> str:
        kwargs: dict = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system

        self._call_count += 1
        try:
            response = self._client.messages.create(**kwargs)
        except APIStatusError as exc:
            logger.warning("Model API returned %s", exc.status_code)
            raise LLMUpstreamError(f"AI API error: {exc.status_code}", exc.status_code) from exc
        except APIConnectionError as exc:
            raise LLMConnectionError(f"AI API unreachable: {exc}") from exc

        self._total_input_tokens += response.usage.input_tokens
        self._total_output_tokens += response.usage.output_tokens
        return response.content[0].text

    @property
    def usage_summary(self) -> dict:
        return {
            "total_input_tokens": self._total_input_tokens,
            "total_output_tokens": self._total_output_tokens,
            "api_calls": self._call_count,
        }
