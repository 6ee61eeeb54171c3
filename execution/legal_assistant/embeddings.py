"""
Embedding Service for the Legal Assistant

Provides embeddings through the OpenAI SDK, either from OpenAI itself or from
Google's OpenAI-compatible Gemini endpoint. Used by the embedding retriever;
the default keyword retriever needs no embeddings.

Architecture:
    BaseEmbeddingService     -- shared caching, batching, embed_documents, embed_query
        OpenAIEmbeddingService   -- OpenAI text-embedding-3-small
        GeminiEmbeddingService   -- Gemini text-embedding-004 via OpenAI-compatible API
"""

import os
import hashlib
import logging
from dataclasses import dataclass
from typing import Optional

from .config import AssistantConfig

logger = logging.getLogger(__name__)

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass
class EmbeddingConfig:
    """Configuration for embedding service."""
    provider: str = "openai"
    model: str = "text-embedding-3-small"
    batch_size: int = 100
    max_chars_per_text: int = 24000  # stay below the 8K-token input limit
    use_cache: bool = True


class BaseEmbeddingService:
    """
    Base class for API-based embedding services.

    Provides shared functionality:
    - Batched embedding
    - In-memory caching keyed by model and text

    Subclasses only need to implement _init_client() and set
    _provider_name / _env_var_name.
    """

    _provider_name: str = "Base"
    _env_var_name: str = ""

    def __init__(self, config: Optional[EmbeddingConfig] = None, api_key: Optional[str] = None):
        self.config = config or EmbeddingConfig()
        self._client = None
        self._cache: dict[str, list[float]] = {}
        self._init_client(api_key or os.getenv(self._env_var_name))

    def _init_client(self, api_key: Optional[str]):
        raise NotImplementedError("Subclasses must implement _init_client()")

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for document texts.

        Returns:
            One embedding vector per input text, in input order
        """
        if not texts:
            return []
        self._require_client()

        embeddings: list[Optional[list[float]]] = [None] * len(texts)
        pending = []
        for i, text in enumerate(texts):
            cached = self._get_cached(text)
            if cached is not None:
                embeddings[i] = cached
            else:
                pending.append(i)

        batch_size = self.config.batch_size
        for start in range(0, len(pending), batch_size):
            indices = pending[start:start + batch_size]
            vectors = self._embed_batch([texts[i] for i in indices])
            for i, vector in zip(indices, vectors):
                self._set_cached(texts[i], vector)
                embeddings[i] = vector

        if pending:
            logger.info(
                f"Embedded {len(pending)} texts with {self._provider_name} "
                f"({len(texts) - len(pending)} cached)"
            )
        return embeddings

    def embed_query(self, query: str) -> list[float]:
        """Generate embedding for a search query."""
        result = self.embed_documents([query])
        return result[0] if result else []

    def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        limit = self.config.max_chars_per_text
        try:
            response = self._client.embeddings.create(
                model=self.config.model,
                input=[t[:limit] for t in texts],
            )
        except Exception as e:
            logger.error(f"{self._provider_name} embedding failed: {e}")
            raise
        ordered = sorted(response.data, key=lambda item: item.index)
        return [list(item.embedding) for item in ordered]

    def _require_client(self):
        if not self._client:
            raise RuntimeError(
                f"{self._provider_name} client not initialized. "
                f"Check {self._env_var_name}."
            )

    def _get_cache_key(self, text: str) -> str:
        content = f"{self.config.model}:{text}"
        return hashlib.sha256(content.encode()).hexdigest()[:32]

    def _get_cached(self, text: str) -> Optional[list[float]]:
        if not self.config.use_cache:
            return None
        return self._cache.get(self._get_cache_key(text))

    def _set_cached(self, text: str, embedding: list[float]) -> None:
        if self.config.use_cache:
            self._cache[self._get_cache_key(text)] = embedding


class OpenAIEmbeddingService(BaseEmbeddingService):
    """Embeddings from the OpenAI API."""

    _provider_name = "OpenAI"
    _env_var_name = "OPENAI_API_KEY"

    def _init_client(self, api_key: Optional[str]):
        if not api_key:
            logger.warning("OPENAI_API_KEY not found. Embeddings will fail.")
            return
        from openai import OpenAI
        self._client = OpenAI(api_key=api_key, timeout=60.0)
        logger.info(f"OpenAI embedding client initialized with model {self.config.model}")


class GeminiEmbeddingService(BaseEmbeddingService):
    """Embeddings from Gemini through its OpenAI-compatible endpoint."""

    _provider_name = "Gemini"
    _env_var_name = "GEMINI_API_KEY"

    def _init_client(self, api_key: Optional[str]):
        if not api_key:
            logger.warning("GEMINI_API_KEY not found. Embeddings will fail.")
            return
        from openai import OpenAI
        self._client = OpenAI(api_key=api_key, base_url=GEMINI_OPENAI_BASE_URL, timeout=60.0)
        logger.info(f"Gemini embedding client initialized with model {self.config.model}")


def get_embedding_service(config: Optional[AssistantConfig] = None) -> BaseEmbeddingService:
    """
    Factory function to get the embedding service for the configured provider.

    Args:
        config: AssistantConfig; ai_provider selects OpenAI or Gemini

    Returns:
        Configured embedding service
    """
    config = config or AssistantConfig()
    embedding_config = EmbeddingConfig(
        provider=config.ai_provider,
        model=config.embedding_model_name,
    )
    if config.ai_provider == "openai":
        return OpenAIEmbeddingService(embedding_config, api_key=config.openai_api_key)
    return GeminiEmbeddingService(embedding_config, api_key=config.gemini_api_key)
