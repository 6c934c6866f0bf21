from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class FormulaServiceConfig:
    log_level: str
    llm_transport: str
    request_timeout: float
    forward_caller_token: bool

    @classmethod
    def from_env(cls) -> FormulaServiceConfig:
        return cls(
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            llm_transport=os.environ.get("LLM_TRANSPORT", "http").lower(),
            request_timeout=float(os.environ.get("LLM_REQUEST_TIMEOUT", "120") or 120),
            forward_caller_token=os.environ.get("FORWARD_CALLER_TOKEN", "true").lower()
            in ("1", "true", "yes"),
        )
