import pytest

from shared.llm_adapter import ModelCatalog, ModelKind, classify_model


@pytest.mark.parametrize(
    "model",
    [
        "gpt-3.5-turbo",
        "gpt-3.5-turbo-0301",
        "gpt-3.5-turbo-16k",
        "gpt-4",
        "gpt-4-0314",
        "gpt-4-32k",
        "ft:gpt-3.5-turbo:acme::abc123",
    ],
)
def test_chat_models_classify_as_chat(model):
    assert classify_model(model) is ModelKind.CHAT


@pytest.mark.parametrize(
    "model",
    ["text-ada-001", "text-davinci-003", "davinci", "GPT-4", "gpt-3.5", "", "code-cushman-001"],
)
def test_other_models_classify_as_legacy(model):
    assert classify_model(model) is ModelKind.LEGACY


class TestModelCatalog:
    def test_explicit_chat_model_ids(self):
        catalog = ModelCatalog(chat_models=frozenset({"my-chat-model"}))

        assert catalog.classify("my-chat-model") is ModelKind.CHAT
        assert catalog.classify("my-chat-model-v2") is ModelKind.LEGACY

    def test_prefix_mode_ignores_markers_inside_the_name(self):
        catalog = ModelCatalog(match_mode="prefix")

        assert catalog.classify("gpt-4-0314") is ModelKind.CHAT
        assert catalog.classify("ft:gpt-3.5-turbo:acme::abc123") is ModelKind.LEGACY

    def test_from_env_defaults(self):
        catalog = ModelCatalog.from_env()

        assert catalog == ModelCatalog()

    def test_from_env_reads_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_CHAT_MODELS", "alpha, beta")
        monkeypatch.setenv("LLM_CHAT_MARKERS", "gpt-4o")
        monkeypatch.setenv("LLM_MODEL_MATCH", "PREFIX")

        catalog = ModelCatalog.from_env()

        assert catalog.chat_models == frozenset({"alpha", "beta"})
        assert catalog.chat_markers == ("gpt-4o",)
        assert catalog.match_mode == "prefix"
        assert catalog.classify("gpt-4-0314") is ModelKind.LEGACY

    def test_from_env_rejects_unknown_match_mode(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL_MATCH", "regex")

        with pytest.raises(ValueError, match="LLM_MODEL_MATCH"):
            ModelCatalog.from_env()

    @pytest.mark.parametrize("raw", ["", " , ", ","])
    def test_from_env_rejects_markers_that_parse_to_nothing(self, monkeypatch, raw):
        monkeypatch.setenv("LLM_CHAT_MARKERS", raw)

        with pytest.raises(ValueError, match="LLM_CHAT_MARKERS"):
            ModelCatalog.from_env()
