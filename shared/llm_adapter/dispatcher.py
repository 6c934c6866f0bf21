"""
Completion dispatcher.

Classifies the requested model, builds either a legacy completions body or a
chat-completions body, sends exactly one request through the injected
Transport and returns the trimmed text of the first choice.

Only one failure is translated: an HTTP 429 whose error type is
"insufficient_quota" becomes QuotaExceeded. Everything else propagates as-is.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Sequence

from shared.llm_adapter.base import Transport
from shared.llm_adapter.catalog import ModelCatalog
from shared.llm_adapter.errors import QuotaExceeded, StatusCodeError
from shared.llm_adapter.models import (
    DEFAULT_MAX_TOKENS,
    ChatCompletionRequest,
    ChatMessage,
    LegacyCompletionRequest,
    ModelKind,
)
from shared.observability.metrics import (
    completion_latency,
    completion_requests,
    llm_tokens,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
INSUFFICIENT_QUOTA = "insufficient_quota"

_default_catalog = ModelCatalog()


def classify_model(model_name: str, catalog: ModelCatalog | None = None) -> ModelKind:
    """CHAT for chat-completions models, LEGACY for flat-prompt models."""
    return (catalog or _default_catalog).classify(model_name)


def _record_usage(body: Any) -> None:
    usage = body.get("usage") if isinstance(body, dict) else None
    if not isinstance(usage, dict):
        return
    llm_tokens.labels(direction="prompt").inc(usage.get("prompt_tokens", 0) or 0)
    llm_tokens.labels(direction="completion").inc(usage.get("completion_tokens", 0) or 0)


class CompletionDispatcher:
    """Stateless apart from its collaborators; safe to share across calls."""

    def __init__(
        self,
        transport: Transport,
        catalog: ModelCatalog | None = None,
        base_url: str | None = None,
    ) -> None:
        self._transport = transport
        self._catalog = catalog or _default_catalog
        base = base_url or os.environ.get("LLM_BASE_URL", "") or DEFAULT_BASE_URL
        self._base_url = base.rstrip("/")

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog

    @property
    def completions_url(self) -> str:
        return f"{self._base_url}/completions"

    @property
    def chat_completions_url(self) -> str:
        return f"{self._base_url}/chat/completions"

    def classify(self, model_name: str) -> ModelKind:
        return self._catalog.classify(model_name)

    async def complete(
        self,
        prompt: str,
        model: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float | None = None,
        stop: Sequence[str] | None = None,
        system_prompt: str | None = None,
    ) -> str:
        if not prompt:
            return ""

        kind = self.classify(model)
        stop_list = list(stop) if stop else None

        if kind is ModelKind.CHAT:
            messages: list[ChatMessage] = []
            if system_prompt:
                messages.append(ChatMessage(role="system", content=system_prompt))
            messages.append(ChatMessage(role="user", content=prompt))
            url = self.chat_completions_url
            payload = ChatCompletionRequest(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                stop=stop_list,
            ).to_payload()
        else:
            url = self.completions_url
            payload = LegacyCompletionRequest(
                model=model,
                prompt=prompt,
                max_tokens=max_tokens,
                temperature=temperature,
                stop=stop_list,
            ).to_payload()

        logger.debug(
            "Dispatching %s completion",
            kind.value,
            extra={"_extra": {"endpoint": url, "model": model}},
        )

        start = time.monotonic()
        try:
            response = await self._transport.post_json(url, payload)
        except StatusCodeError as exc:
            completion_requests.labels(kind=kind.value, outcome="error").inc()
            if exc.status_code == 429 and exc.error_type == INSUFFICIENT_QUOTA:
                logger.warning(
                    "Remote API quota exhausted", extra={"_extra": {"model": model}}
                )
                raise QuotaExceeded() from exc
            raise
        except Exception:
            completion_requests.labels(kind=kind.value, outcome="error").inc()
            raise
        finally:
            completion_latency.labels(kind=kind.value).observe(time.monotonic() - start)

        completion_requests.labels(kind=kind.value, outcome="ok").inc()
        _record_usage(response.body)

        choice = response.body["choices"][0]
        if kind is ModelKind.CHAT:
            return choice["message"]["content"].strip()
        return choice["text"].strip()
