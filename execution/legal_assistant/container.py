"""
Service container shared by the HTTP API and the console CLI.

Stores live for the life of the process; services and use cases are built
on first use from one AssistantConfig.
"""

import logging
from typing import Optional

from .config import AssistantConfig

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Holds the process-wide stores and lazily built services."""

    def __init__(self, config: Optional[AssistantConfig] = None):
        self.reset(config)

    def reset(self, config: Optional[AssistantConfig] = None):
        """Drop every cached service (and stored record)."""
        self._config = config
        self._documents = None
        self._queries = None
        self._writings = None
        self._generator = None
        self._embeddings = None
        self._retriever = None
        self._use_cases = {}

    def get_config(self) -> AssistantConfig:
        if self._config is None:
            self._config = AssistantConfig.from_env()
        return self._config

    def get_document_store(self):
        if self._documents is None:
            from .stores import InMemoryDocumentStore
            self._documents = InMemoryDocumentStore()
        return self._documents

    def get_query_store(self):
        if self._queries is None:
            from .stores import InMemoryQueryStore
            self._queries = InMemoryQueryStore()
        return self._queries

    def get_writing_store(self):
        if self._writings is None:
            from .stores import InMemoryWritingStore
            self._writings = InMemoryWritingStore()
        return self._writings

    def get_generator(self):
        if self._generator is None:
            from .llm import get_text_generator
            self._generator = get_text_generator(self.get_config())
        return self._generator

    def get_retriever(self):
        if self._retriever is None:
            from .retriever import get_retriever
            config = self.get_config()
            if config.retriever == "embedding" and self._embeddings is None:
                from .embeddings import get_embedding_service
                self._embeddings = get_embedding_service(config)
            self._retriever = get_retriever(
                self.get_document_store(), config.retriever, self._embeddings,
            )
            logger.info(f"Retriever: {type(self._retriever).__name__}")
        return self._retriever

    def get_use_case(self, name: str):
        """Get or create a use case: index, query, writing or validate."""
        if name not in self._use_cases:
            from .generation import GenerationEngine
            from .ingestion import DocumentIngestor
            from .services import LegalQueryService, LegalWritingService
            from .use_cases import (
                IndexDocumentUseCase, ProcessLegalQueryUseCase,
                GenerateLegalDocumentUseCase, ValidateDocumentUseCase,
            )

            config = self.get_config()
            if name == "index":
                use_case = IndexDocumentUseCase(DocumentIngestor(config), self.get_document_store())
            elif name in ("query", "writing", "validate"):
                engine = GenerationEngine(self.get_generator(), config)
                if name == "query":
                    service = LegalQueryService(self.get_retriever(), engine, config)
                    use_case = ProcessLegalQueryUseCase(service, self.get_query_store())
                else:
                    service = LegalWritingService(self.get_retriever(), engine, config)
                    if name == "writing":
                        use_case = GenerateLegalDocumentUseCase(service, self.get_writing_store())
                    else:
                        use_case = ValidateDocumentUseCase(service)
            else:
                raise ValueError(f"Unknown use case: {name}")
            self._use_cases[name] = use_case
        return self._use_cases[name]
