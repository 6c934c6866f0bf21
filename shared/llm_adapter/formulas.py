"""
The two user-facing formulas.

    Completion(prompt, model?, numTokens?, temperature?, stop?)
    ChatCompletion(prompt, systemPrompt?, model?, numTokens?, temperature?, stop?)

Parameters are validated through the pydantic parameter schemas before any
dispatch happens.
"""

from __future__ import annotations

from typing import Sequence

from shared.llm_adapter.dispatcher import CompletionDispatcher
from shared.llm_adapter.errors import InvalidModelForChat
from shared.llm_adapter.models import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_COMPLETION_MODEL,
    DEFAULT_MAX_TOKENS,
    ChatCompletionParams,
    CompletionParams,
    ModelKind,
)


async def completion(
    dispatcher: CompletionDispatcher,
    prompt: str,
    model: str = DEFAULT_COMPLETION_MODEL,
    num_tokens: int = DEFAULT_MAX_TOKENS,
    temperature: float | None = None,
    stop: Sequence[str] | None = None,
) -> str:
    params = CompletionParams(
        prompt=prompt,
        model=model,
        num_tokens=num_tokens,
        temperature=temperature,
        stop=list(stop) if stop is not None else None,
    )
    return await run_completion(dispatcher, params)


async def chat_completion(
    dispatcher: CompletionDispatcher,
    prompt: str,
    system_prompt: str | None = None,
    model: str = DEFAULT_CHAT_MODEL,
    num_tokens: int = DEFAULT_MAX_TOKENS,
    temperature: float | None = None,
    stop: Sequence[str] | None = None,
) -> str:
    params = ChatCompletionParams(
        prompt=prompt,
        system_prompt=system_prompt,
        model=model,
        num_tokens=num_tokens,
        temperature=temperature,
        stop=list(stop) if stop is not None else None,
    )
    return await run_chat_completion(dispatcher, params)


async def run_completion(dispatcher: CompletionDispatcher, params: CompletionParams) -> str:
    return await dispatcher.complete(
        prompt=params.prompt,
        model=params.model,
        max_tokens=params.num_tokens,
        temperature=params.temperature,
        stop=params.stop,
    )


async def run_chat_completion(
    dispatcher: CompletionDispatcher, params: ChatCompletionParams
) -> str:
    if dispatcher.classify(params.model) is not ModelKind.CHAT:
        raise InvalidModelForChat(params.model)
    return await dispatcher.complete(
        prompt=params.prompt,
        model=params.model,
        max_tokens=params.num_tokens,
        temperature=params.temperature,
        stop=params.stop,
        system_prompt=params.system_prompt,
    )
