"""
Deterministic mock transport for testing and development.

Records every request it receives and answers from a queue of canned
responses, falling back to an echo of the prompt in the shape of the
endpoint that was called. No network access.
"""

from __future__ import annotations

import hashlib
from collections import deque

from shared.llm_adapter.base import Transport
from shared.llm_adapter.errors import StatusCodeError
from shared.llm_adapter.models import FetchRequest, FetchResponse

_MOCK_PREFIX = "[MOCK] "


class MockTransport(Transport):

    def __init__(self) -> None:
        self.requests: list[FetchRequest] = []
        self._queued: deque[FetchResponse | Exception] = deque()

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def queue_response(self, body, status_code: int = 200) -> None:
        self._queued.append(FetchResponse(status_code=status_code, body=body))

    def queue_error(self, exc: Exception) -> None:
        self._queued.append(exc)

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        self.requests.append(request)

        if self._queued:
            queued = self._queued.popleft()
            if isinstance(queued, Exception):
                raise queued
            if queued.status_code >= 400:
                raise StatusCodeError(queued.status_code, queued.body)
            return queued

        return FetchResponse(status_code=200, body=self._default_body(request))

    @staticmethod
    def _default_body(request: FetchRequest) -> dict:
        body = request.body or {}
        if "messages" in body:
            prompt = body["messages"][-1]["content"]
        else:
            prompt = body.get("prompt", "")
        prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()
        content = f"{_MOCK_PREFIX}Deterministic response for prompt hash {prompt_hash[:12]}."

        if "messages" in body:
            return {"choices": [{"message": {"role": "assistant", "content": content}}]}
        return {"choices": [{"text": content}]}
