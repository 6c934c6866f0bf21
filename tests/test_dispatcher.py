import pytest

from shared.llm_adapter import CompletionDispatcher, QuotaExceeded, StatusCodeError
from shared.llm_adapter.errors import QUOTA_HELP_URL, QUOTA_MESSAGE

CHAT_URL = "https://api.openai.com/v1/chat/completions"
LEGACY_URL = "https://api.openai.com/v1/completions"


def chat_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def legacy_body(text):
    return {"choices": [{"text": text}]}


class TestEmptyPrompt:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("model", ["gpt-4", "text-ada-001"])
    async def test_returns_empty_string_without_network_call(self, dispatcher, transport, model):
        result = await dispatcher.complete(
            prompt="",
            model=model,
            max_tokens=10,
            temperature=0.5,
            stop=["\n"],
            system_prompt="ignored",
        )

        assert result == ""
        assert transport.call_count == 0


class TestChatDispatch:
    @pytest.mark.asyncio
    async def test_user_message_only_without_system_prompt(self, dispatcher, transport):
        transport.queue_response(chat_body("Hi"))

        await dispatcher.complete(prompt="Hello", model="gpt-4", system_prompt="")

        assert transport.call_count == 1
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url == CHAT_URL
        assert request.headers["Content-Type"] == "application/json"
        assert request.body["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_system_message_comes_first(self, dispatcher, transport):
        transport.queue_response(chat_body("Hi"))

        await dispatcher.complete(prompt="Hello", model="gpt-4", system_prompt="Be terse")

        assert transport.requests[0].body["messages"] == [
            {"role": "system", "content": "Be terse"},
            {"role": "user", "content": "Hello"},
        ]

    @pytest.mark.asyncio
    async def test_body_carries_optional_parameters(self, dispatcher, transport):
        transport.queue_response(chat_body("Hi"))

        await dispatcher.complete(
            prompt="Hello",
            model="gpt-3.5-turbo-0301",
            max_tokens=64,
            temperature=0.2,
            stop=["END", "STOP"],
        )

        assert transport.requests[0].body == {
            "model": "gpt-3.5-turbo-0301",
            "messages": [{"role": "user", "content": "Hello"}],
            "max_tokens": 64,
            "temperature": 0.2,
            "stop": ["END", "STOP"],
        }

    @pytest.mark.asyncio
    async def test_returns_trimmed_message_content(self, dispatcher, transport):
        transport.queue_response(
            {
                "choices": [
                    {"message": {"content": "\n\n  first answer  \n"}},
                    {"message": {"content": "second answer"}},
                ]
            }
        )

        result = await dispatcher.complete(prompt="Hello", model="gpt-4")

        assert result == "first answer"


class TestLegacyDispatch:
    @pytest.mark.asyncio
    async def test_flat_body_sent_to_completions_endpoint(self, dispatcher, transport):
        transport.queue_response(legacy_body("Hi"))

        await dispatcher.complete(prompt="Hello", model="text-ada-001")

        request = transport.requests[0]
        assert request.url == LEGACY_URL
        assert request.body == {"model": "text-ada-001", "prompt": "Hello", "max_tokens": 512}

    @pytest.mark.asyncio
    async def test_system_prompt_not_sent_to_legacy_models(self, dispatcher, transport):
        transport.queue_response(legacy_body("Hi"))

        await dispatcher.complete(prompt="Hello", model="text-davinci-003", system_prompt="Be terse")

        body = transport.requests[0].body
        assert "messages" not in body
        assert body["prompt"] == "Hello"

    @pytest.mark.asyncio
    async def test_empty_stop_list_is_omitted(self, dispatcher, transport):
        transport.queue_response(legacy_body("Hi"))

        await dispatcher.complete(prompt="Hello", model="text-ada-001", stop=[])

        assert "stop" not in transport.requests[0].body

    @pytest.mark.asyncio
    async def test_returns_trimmed_text(self, dispatcher, transport):
        transport.queue_response(legacy_body("  padded answer \n"))

        result = await dispatcher.complete(prompt="Hello", model="text-ada-001")

        assert result == "padded answer"


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("model", ["gpt-4", "text-ada-001"])
    @pytest.mark.parametrize(
        "body",
        [
            {"type": "insufficient_quota"},
            {"error": {"type": "insufficient_quota", "message": "You exceeded your quota"}},
        ],
    )
    async def test_insufficient_quota_becomes_quota_exceeded(self, dispatcher, transport, model, body):
        transport.queue_response(body, status_code=429)

        with pytest.raises(QuotaExceeded) as exc_info:
            await dispatcher.complete(prompt="Hello", model=model)

        assert str(exc_info.value) == QUOTA_MESSAGE
        assert exc_info.value.help_url == QUOTA_HELP_URL
        assert QUOTA_HELP_URL in str(exc_info.value)
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_429_is_not_translated(self, dispatcher, transport):
        transport.queue_response({"error": {"type": "requests"}}, status_code=429)

        with pytest.raises(StatusCodeError) as exc_info:
            await dispatcher.complete(prompt="Hello", model="gpt-4")

        assert not isinstance(exc_info.value, QuotaExceeded)
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_other_status_propagates_unchanged(self, dispatcher, transport):
        transport.queue_response({"error": {"type": "server_error"}}, status_code=500)

        with pytest.raises(StatusCodeError) as exc_info:
            await dispatcher.complete(prompt="Hello", model="text-ada-001")

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == {"error": {"type": "server_error"}}

    @pytest.mark.asyncio
    async def test_network_error_propagates_unchanged(self, dispatcher, transport):
        failure = ConnectionError("connection reset")
        transport.queue_error(failure)

        with pytest.raises(ConnectionError) as exc_info:
            await dispatcher.complete(prompt="Hello", model="gpt-4")

        assert exc_info.value is failure

    @pytest.mark.asyncio
    async def test_malformed_body_propagates(self, dispatcher, transport):
        transport.queue_response({"choices": []})

        with pytest.raises(IndexError):
            await dispatcher.complete(prompt="Hello", model="text-ada-001")

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, dispatcher, transport):
        transport.queue_response({"error": {"type": "server_error"}}, status_code=503)
        transport.queue_response(legacy_body("second try"))

        with pytest.raises(StatusCodeError):
            await dispatcher.complete(prompt="Hello", model="text-ada-001")

        assert transport.call_count == 1


class TestBaseUrl:
    def test_env_override(self, monkeypatch, transport):
        monkeypatch.setenv("LLM_BASE_URL", "http://localhost:8080/v1/")

        dispatcher = CompletionDispatcher(transport)

        assert dispatcher.completions_url == "http://localhost:8080/v1/completions"
        assert dispatcher.chat_completions_url == "http://localhost:8080/v1/chat/completions"

    def test_default_is_openai(self, transport):
        dispatcher = CompletionDispatcher(transport)

        assert dispatcher.chat_completions_url == CHAT_URL
        assert dispatcher.completions_url == LEGACY_URL
