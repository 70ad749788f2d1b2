"""Exception hierarchy and the error kinds recorded on failed jobs."""

from __future__ import annotations

from enum import Enum

import httpx


class ErrorKind(str, Enum):
    NOT_CONFIGURED = "not_configured"
    UPSTREAM_TRANSIENT = "upstream_transient"
    UPSTREAM_REJECTED = "upstream_rejected"
    NETWORK = "network"
    MALFORMED_OUTPUT = "malformed_output"
    ABANDONED = "abandoned"
    INTERNAL = "internal"


class BlogforgeError(Exception):
    """Base class for all errors raised by blogforge."""

    kind: ErrorKind = ErrorKind.INTERNAL


class ConfigurationError(BlogforgeError):
    kind = ErrorKind.NOT_CONFIGURED


class InvalidTransition(BlogforgeError):
    """A job status change that would move backward or leave a terminal state."""


class OutlineParseError(BlogforgeError):
    kind = ErrorKind.MALFORMED_OUTPUT


class LLMError(BlogforgeError):
    """Failure talking to the language model service."""


class LLMNotConfiguredError(LLMError):
    kind = ErrorKind.NOT_CONFIGURED


class LLMUpstreamError(LLMError):
    """The model service answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        if status_code == 429 or status_code >= 500:
            self.kind = ErrorKind.UPSTREAM_TRANSIENT
        else:
            self.kind = ErrorKind.UPSTREAM_REJECTED


class LLMConnectionError(LLMError):
    kind = ErrorKind.NETWORK


def classify(exc: BaseException) -> ErrorKind:
    """Map any exception to the kind stored on a failed job."""
    if isinstance(exc, BlogforgeError):
        return exc.kind
    if isinstance(exc, httpx.HTTPError):
        return ErrorKind.NETWORK
    return ErrorKind.INTERNAL
