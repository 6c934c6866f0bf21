from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from shared.llm_adapter.models import ModelKind

MatchMode = Literal["substring", "prefix"]

DEFAULT_CHAT_MARKERS: tuple[str, ...] = ("gpt-3.5-turbo", "gpt-4")


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ModelCatalog:
    """
    Decides which model names speak the chat-completions protocol.

    - chat_models: exact ids known to be chat-capable
    - chat_markers: names matching any marker are chat-capable too
    - match_mode: "substring" matches a marker anywhere in the name
      (dated snapshots and fine-tune ids included); "prefix" only at the start

    Matching is case-sensitive.
    """

    chat_models: frozenset[str] = frozenset()
    chat_markers: tuple[str, ...] = DEFAULT_CHAT_MARKERS
    match_mode: MatchMode = "substring"

    def classify(self, model_name: str) -> ModelKind:
        if model_name in self.chat_models:
            return ModelKind.CHAT
        if self.match_mode == "prefix":
            matched = any(model_name.startswith(m) for m in self.chat_markers)
        else:
            matched = any(m in model_name for m in self.chat_markers)
        return ModelKind.CHAT if matched else ModelKind.LEGACY

    @classmethod
    def from_env(cls) -> ModelCatalog:
        mode = os.environ.get("LLM_MODEL_MATCH", "substring").lower()
        if mode not in ("substring", "prefix"):
            raise ValueError(
                f"Unknown LLM_MODEL_MATCH '{mode}'. Available: substring, prefix"
            )
        markers = os.environ.get("LLM_CHAT_MARKERS")
        chat_markers = _split_csv(markers) if markers is not None else DEFAULT_CHAT_MARKERS
        if not chat_markers:
            raise ValueError("LLM_CHAT_MARKERS is set but names no markers")
        return cls(
            chat_models=frozenset(_split_csv(os.environ.get("LLM_CHAT_MODELS", ""))),
            chat_markers=chat_markers,
            match_mode=mode,
        )
