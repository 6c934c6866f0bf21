import pytest

from shared.llm_adapter import CompletionDispatcher, MockTransport, reset_transport

TEST_BASE_URL = "https://api.openai.com/v1"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in (
        "LLM_BASE_URL",
        "LLM_TRANSPORT",
        "LLM_CHAT_MODELS",
        "LLM_CHAT_MARKERS",
        "LLM_MODEL_MATCH",
        "FORWARD_CALLER_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_transport()
    yield
    reset_transport()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def dispatcher(transport) -> CompletionDispatcher:
    return CompletionDispatcher(transport, base_url=TEST_BASE_URL)
