"""
Legal Assistant - retrieval-augmented legal help for Argentine law

This module provides:
- Ingestion of PDF and plain-text legal sources (codes, case law, opinions)
- Keyword and embedding retrieval with relevant-sentence extraction
- LLM answers, reasoning, document drafting and validation
- Use cases that persist query/writing requests and their responses

Entry points:
- HTTP API: execution.legal_assistant.api:app
- Console:  legal-assistant (execution.legal_assistant.cli:main)
"""

__version__ = "0.1.0"

from .config import AssistantConfig
from .errors import (
    LegalAssistantError,
    NotFoundError,
    ExtractionError,
    GenerationError,
    ValidationError,
    StorageError,
)
from .ingestion import DocumentIngestor
from .retriever import KeywordRetriever, EmbeddingRetriever, get_retriever
from .generation import GenerationEngine
from .services import LegalQueryService, LegalWritingService
from .use_cases import (
    OperationResult,
    IndexDocumentUseCase,
    ProcessLegalQueryUseCase,
    GenerateLegalDocumentUseCase,
    ValidateDocumentUseCase,
)

__all__ = [
    "AssistantConfig",
    "LegalAssistantError",
    "NotFoundError",
    "ExtractionError",
    "GenerationError",
    "ValidationError",
    "StorageError",
    "DocumentIngestor",
    "KeywordRetriever",
    "EmbeddingRetriever",
    "get_retriever",
    "GenerationEngine",
    "LegalQueryService",
    "LegalWritingService",
    "OperationResult",
    "IndexDocumentUseCase",
    "ProcessLegalQueryUseCase",
    "GenerateLegalDocumentUseCase",
    "ValidateDocumentUseCase",
]
