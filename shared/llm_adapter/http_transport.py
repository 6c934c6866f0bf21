"""
httpx-backed transport for the OpenAI REST API.

Works with any server that speaks the OpenAI completions protocols:
  - OpenAI      (https://api.openai.com/v1)
  - any OpenAI-compatible server reachable through LLM_BASE_URL

The bearer token is attached here so the dispatcher never sees it.
"""

from __future__ import annotations

import logging
import os

import httpx

from shared.llm_adapter.base import Transport
from shared.llm_adapter.errors import MissingAPIKey, StatusCodeError
from shared.llm_adapter.models import FetchRequest, FetchResponse

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpTransport(Transport):
    """
    Bearer-authenticated HTTP transport.

    Reads from env:
      LLM_API_KEY          -- API key (also checked as OPENAI_API_KEY)
      LLM_REQUEST_TIMEOUT  -- seconds, default 120
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = (
            api_key
            or os.environ.get("LLM_API_KEY", "")
            or os.environ.get("OPENAI_API_KEY", "")
        )
        if timeout is None:
            timeout = float(os.environ.get("LLM_REQUEST_TIMEOUT", "120"))

        # A borrowed client stays open; its owner closes it.
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        if not self._api_key:
            raise MissingAPIKey()

        headers = dict(request.headers)
        headers["Authorization"] = f"Bearer {self._api_key}"

        response = await self._client.request(
            request.method,
            request.url,
            headers=headers,
            json=request.body,
        )
        body = _decode_body(response)

        if response.is_error:
            logger.debug(
                "%s %s -> HTTP %d", request.method, request.url, response.status_code
            )
            raise StatusCodeError(response.status_code, body)

        return FetchResponse(
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
