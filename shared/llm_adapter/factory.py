"""
Transport factory -- single entry point for the entire system.

Reads LLM_TRANSPORT from env (default: 'http') and returns the chosen
transport as a process-wide singleton.

Supported transports:

  http   httpx client against the OpenAI API -- needs OPENAI_API_KEY or LLM_API_KEY
  mock   Built-in deterministic mock, no network and no API key needed

The base URL can be overridden globally with the LLM_BASE_URL env var.
"""

from __future__ import annotations

import logging
import os

from shared.llm_adapter.base import Transport
from shared.llm_adapter.mock_transport import MockTransport

logger = logging.getLogger(__name__)

_TRANSPORTS: dict[str, type] = {
    "mock": MockTransport,
}

_instance: Transport | None = None


def _register_http() -> None:
    """Lazy-register the httpx transport."""
    from shared.llm_adapter.http_transport import HttpTransport

    _TRANSPORTS["http"] = HttpTransport


def get_transport(transport_name: str | None = None) -> Transport:
    """
    Return a singleton Transport for the configured backend.

    Args:
        transport_name: Override for LLM_TRANSPORT env var.
    """
    global _instance
    if _instance is not None:
        return _instance

    name = (transport_name or os.environ.get("LLM_TRANSPORT", "http")).lower()

    if name == "http" and name not in _TRANSPORTS:
        _register_http()

    transport_cls = _TRANSPORTS.get(name)
    if transport_cls is None:
        raise ValueError(f"Unknown LLM transport '{name}'. Available: http, mock")

    _instance = transport_cls()
    logger.info(
        "LLM transport initialized: %s (base_url=%s)",
        name,
        os.environ.get("LLM_BASE_URL", "default"),
    )
    return _instance


def reset_transport() -> None:
    """Reset the singleton (for testing)."""
    global _instance
    _instance = None
