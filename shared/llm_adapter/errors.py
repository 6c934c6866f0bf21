"""Errors raised by the completion adapter layer."""

from __future__ import annotations

from typing import Any

QUOTA_HELP_URL = (
    "https://help.openai.com/en/articles/6891831-error-code-429-you-exceeded-"
    "your-current-quota-please-check-your-plan-and-billing-details"
)
QUOTA_MESSAGE = (
    "You have exceeded your current OpenAI API quota. "
    "Please check your plan and billing details. "
    f"For more information see: {QUOTA_HELP_URL}"
)
CHAT_MODEL_REQUIRED_MESSAGE = "Must use a chat-completion-capable model for this formula"


class CompletionError(Exception):
    """Base class for errors meant to be shown to the formula user."""


class QuotaExceeded(CompletionError):
    """The remote API rejected the call with an insufficient_quota 429."""

    help_url = QUOTA_HELP_URL

    def __init__(self, message: str = QUOTA_MESSAGE) -> None:
        super().__init__(message)


class InvalidModelForChat(CompletionError):
    def __init__(self, model: str) -> None:
        super().__init__(CHAT_MODEL_REQUIRED_MESSAGE)
        self.model = model


class StatusCodeError(Exception):
    """
    Raised by a Transport when the remote side answers with a non-2xx status.

    `body` holds the decoded JSON payload when the response had one, otherwise
    the raw text.
    """

    def __init__(self, status_code: int, body: Any = None) -> None:
        super().__init__(f"Remote API responded with HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    @property
    def error_type(self) -> str | None:
        """The `type` of the error body, in either the nested or flat shape."""
        if not isinstance(self.body, dict):
            return None
        nested = self.body.get("error")
        if isinstance(nested, dict) and "type" in nested:
            return nested["type"]
        return self.body.get("type")


class MissingAPIKey(CompletionError):
    """No service key is configured and the caller did not send one."""

    def __init__(self) -> None:
        super().__init__(
            "An API key is required. Send `Authorization: Bearer <key>` or set "
            "LLM_API_KEY (or OPENAI_API_KEY) in the service environment."
        )
