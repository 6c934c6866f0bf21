"""Abstract base class that all transports must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from shared.llm_adapter.models import FetchRequest, FetchResponse


class Transport(ABC):
    """
    Contract for the outbound HTTP capability the dispatcher depends on.

    Every implementation MUST:
    - Attach credentials itself (callers never handle the API key)
    - Raise StatusCodeError for any non-2xx response
    - Let network failures propagate untouched
    """

    @abstractmethod
    async def fetch(self, request: FetchRequest) -> FetchResponse:
        """Issue one request and return the decoded response."""

    async def post_json(self, url: str, body: dict[str, Any]) -> FetchResponse:
        """Convenience wrapper: POST a JSON body."""
        request = FetchRequest(
            method="POST",
            url=url,
            headers={"Content-Type": "application/json"},
            body=body,
        )
        return await self.fetch(request)

    async def aclose(self) -> None:
        """Release pooled connections, if any."""
