"""
Configuration for the Legal Assistant

Settings are read from environment variables (a local .env file is loaded
first). Defaults target Argentine legal documents written in Spanish.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


SUPPORTED_PROVIDERS = ("google", "openai")
SUPPORTED_RETRIEVERS = ("keyword", "embedding")

# Default models per provider
DEFAULT_LLM_MODELS = {
    "google": "gemini-1.5-pro",
    "openai": "gpt-4o",
}
DEFAULT_EMBEDDING_MODELS = {
    "google": "text-embedding-004",
    "openai": "text-embedding-3-small",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    return float(value)


@dataclass
class AssistantConfig:
    """Runtime configuration shared by ingestion, retrieval and generation."""
    assets_path: str = "./assets"
    language: str = "es"
    jurisdiction: str = "Argentina"

    # LLM provider
    ai_provider: str = "google"
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_LLM_MODELS["openai"]
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_LLM_MODELS["google"]
    temperature: float = 0.1
    request_timeout: float = 120.0

    # Retrieval
    retriever: str = "keyword"
    embedding_model: Optional[str] = None
    retrieval_limit: int = 10
    max_context_documents: int = 5

    # Validation parsing: False keeps the substring match on the VALIDITY line
    strict_validity: bool = False

    ingest_workers: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AssistantConfig":
        """
        Build a configuration from environment variables.

        Args:
            env_file: Optional path to a .env file. Defaults to ./.env if present.

        Returns:
            AssistantConfig populated from the environment
        """
        load_dotenv(env_file)

        provider = os.getenv("AI_PROVIDER", "google").strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            provider = "google"

        retriever = os.getenv("RETRIEVER", "keyword").strip().lower()
        if retriever not in SUPPORTED_RETRIEVERS:
            retriever = "keyword"

        return cls(
            assets_path=os.getenv("ASSETS_PATH", "./assets"),
            language=os.getenv("DOCUMENT_LANGUAGE", "es"),
            jurisdiction=os.getenv("DOCUMENT_JURISDICTION", "Argentina"),
            ai_provider=provider,
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_LLM_MODELS["openai"]),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_LLM_MODELS["google"]),
            temperature=_env_float("LLM_TEMPERATURE", 0.1),
            request_timeout=_env_float("LLM_TIMEOUT", 120.0),
            retriever=retriever,
            embedding_model=os.getenv("EMBEDDING_MODEL") or None,
            retrieval_limit=_env_int("RETRIEVAL_LIMIT", 10),
            max_context_documents=_env_int("MAX_CONTEXT_DOCUMENTS", 5),
            strict_validity=_env_bool("VALIDATION_STRICT", False),
            ingest_workers=max(1, _env_int("INGEST_WORKERS", 1)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def llm_model(self) -> str:
        """Model name for the selected provider."""
        if self.ai_provider == "openai":
            return self.openai_model
        return self.gemini_model

    @property
    def embedding_model_name(self) -> str:
        """Embedding model for the selected provider."""
        return self.embedding_model or DEFAULT_EMBEDDING_MODELS[self.ai_provider]
