from shared.llm_adapter.base import Transport
from shared.llm_adapter.catalog import ModelCatalog
from shared.llm_adapter.dispatcher import CompletionDispatcher, classify_model
from shared.llm_adapter.errors import (
    CompletionError,
    InvalidModelForChat,
    MissingAPIKey,
    QuotaExceeded,
    StatusCodeError,
)
from shared.llm_adapter.factory import get_transport, reset_transport
from shared.llm_adapter.formulas import chat_completion, completion
from shared.llm_adapter.mock_transport import MockTransport
from shared.llm_adapter.models import (
    ChatCompletionParams,
    ChatCompletionRequest,
    ChatMessage,
    CompletionParams,
    FetchRequest,
    FetchResponse,
    LegacyCompletionRequest,
    ModelKind,
)

__all__ = [
    "Transport",
    "MockTransport",
    "ModelCatalog",
    "ModelKind",
    "CompletionDispatcher",
    "classify_model",
    "completion",
    "chat_completion",
    "CompletionError",
    "QuotaExceeded",
    "InvalidModelForChat",
    "MissingAPIKey",
    "StatusCodeError",
    "CompletionParams",
    "ChatCompletionParams",
    "ChatCompletionRequest",
    "ChatMessage",
    "LegacyCompletionRequest",
    "FetchRequest",
    "FetchResponse",
    "get_transport",
    "reset_transport",
]
