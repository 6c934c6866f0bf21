"""Data models for the completion adapter layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_TOKENS = 512
MAX_STOP_SEQUENCES = 4
DEFAULT_COMPLETION_MODEL = "text-ada-001"
DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"


class ModelKind(str, Enum):
    CHAT = "chat"
    LEGACY = "legacy"


class _CompletionBody(BaseModel):
    model: str
    max_tokens: int | None = None
    temperature: float | None = None
    stop: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body with unset optionals left out."""
        return self.model_dump(exclude_none=True)


class LegacyCompletionRequest(_CompletionBody):
    prompt: str


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class ChatCompletionRequest(_CompletionBody):
    messages: list[ChatMessage]


class _FormulaParams(BaseModel):
    """Declarative parameter schema shared by both formulas."""

    prompt: str = ""
    num_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)
    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    stop: Annotated[list[str], Field(max_length=MAX_STOP_SEQUENCES)] | None = None

    @field_validator("stop")
    @classmethod
    def _empty_stop_is_unset(cls, value: list[str] | None) -> list[str] | None:
        return value or None


class CompletionParams(_FormulaParams):
    model: str = DEFAULT_COMPLETION_MODEL


class ChatCompletionParams(_FormulaParams):
    system_prompt: str | None = None
    model: str = DEFAULT_CHAT_MODEL


@dataclass(frozen=True)
class FetchRequest:
    """Descriptor handed to a Transport for a single outbound call."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] | None = None


@dataclass(frozen=True)
class FetchResponse:
    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
