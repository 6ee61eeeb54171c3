"""
Tests for execution/legal_assistant/config.py

Covers: AssistantConfig defaults, from_env parsing and provider-dependent
model selection.
"""

import pytest


ENV_KEYS = [
    "ASSETS_PATH", "DOCUMENT_LANGUAGE", "DOCUMENT_JURISDICTION", "AI_PROVIDER",
    "OPENAI_API_KEY", "OPENAI_MODEL", "GEMINI_API_KEY", "GEMINI_MODEL",
    "LLM_TEMPERATURE", "LLM_TIMEOUT", "EMBEDDING_MODEL", "RETRIEVER",
    "RETRIEVAL_LIMIT", "MAX_CONTEXT_DOCUMENTS", "VALIDATION_STRICT",
    "INGEST_WORKERS", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of these tests
    monkeypatch.setattr("execution.legal_assistant.config.load_dotenv", lambda *a, **k: None)
    return monkeypatch


class TestDefaults:

    def test_defaults(self):
        from execution.legal_assistant.config import AssistantConfig
        cfg = AssistantConfig()
        assert cfg.language == "es"
        assert cfg.jurisdiction == "Argentina"
        assert cfg.ai_provider == "google"
        assert cfg.temperature == 0.1
        assert cfg.retriever == "keyword"
        assert cfg.retrieval_limit == 10
        assert cfg.max_context_documents == 5
        assert cfg.strict_validity is False

    def test_llm_model_follows_provider(self):
        from execution.legal_assistant.config import AssistantConfig
        assert AssistantConfig().llm_model == "gemini-1.5-pro"
        assert AssistantConfig(ai_provider="openai").llm_model == "gpt-4o"

    def test_embedding_model_name(self):
        from execution.legal_assistant.config import AssistantConfig
        assert AssistantConfig(ai_provider="openai").embedding_model_name == "text-embedding-3-small"
        assert AssistantConfig(embedding_model="custom").embedding_model_name == "custom"


class TestFromEnv:

    def test_empty_env_gives_defaults(self, clean_env):
        from execution.legal_assistant.config import AssistantConfig
        cfg = AssistantConfig.from_env()
        assert cfg.assets_path == "./assets"
        assert cfg.ai_provider == "google"
        assert cfg.openai_api_key is None
        assert cfg.ingest_workers == 1

    def test_reads_values(self, clean_env):
        from execution.legal_assistant.config import AssistantConfig
        clean_env.setenv("ASSETS_PATH", "/data/leyes")
        clean_env.setenv("AI_PROVIDER", "OpenAI")
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("LLM_TEMPERATURE", "0.4")
        clean_env.setenv("RETRIEVAL_LIMIT", "3")
        clean_env.setenv("VALIDATION_STRICT", "true")
        clean_env.setenv("INGEST_WORKERS", "4")
        clean_env.setenv("LOG_LEVEL", "debug")
        cfg = AssistantConfig.from_env()
        assert cfg.assets_path == "/data/leyes"
        assert cfg.ai_provider == "openai"
        assert cfg.openai_api_key == "sk-test"
        assert cfg.temperature == 0.4
        assert cfg.retrieval_limit == 3
        assert cfg.strict_validity is True
        assert cfg.ingest_workers == 4
        assert cfg.log_level == "DEBUG"

    def test_unknown_provider_falls_back_to_google(self, clean_env):
        from execution.legal_assistant.config import AssistantConfig
        clean_env.setenv("AI_PROVIDER", "anthropic")
        assert AssistantConfig.from_env().ai_provider == "google"

    def test_unknown_retriever_falls_back_to_keyword(self, clean_env):
        from execution.legal_assistant.config import AssistantConfig
        clean_env.setenv("RETRIEVER", "bm25")
        assert AssistantConfig.from_env().retriever == "keyword"

    def test_workers_at_least_one(self, clean_env):
        from execution.legal_assistant.config import AssistantConfig
        clean_env.setenv("INGEST_WORKERS", "0")
        assert AssistantConfig.from_env().ingest_workers == 1

    @pytest.mark.parametrize("value,expected", [
        ("1", True), ("yes", True), ("false", False), ("0", False), ("", False),
    ])
    def test_strict_flag_values(self, clean_env, value, expected):
        from execution.legal_assistant.config import AssistantConfig
        clean_env.setenv("VALIDATION_STRICT", value)
        assert AssistantConfig.from_env().strict_validity is expected
