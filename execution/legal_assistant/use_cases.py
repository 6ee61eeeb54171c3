"""
Use cases - the public boundary of the Legal Assistant

Use cases never raise. Each returns an OperationResult whose message is safe
to show to an end user; internal error detail is logged and kept in `error`.
"""

import time
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .errors import LegalAssistantError, ValidationError
from .ingestion import DocumentIngestor, IngestionResult
from .metrics import get_metrics_collector
from .models import (
    DocumentCategory,
    LegalQuery,
    LegalWriting,
    QueryType,
    WritingDocumentType,
    parse_enum,
)
from .services import LegalQueryService, LegalWritingService
from .stores import DocumentStore, QueryStore, WritingStore

logger = logging.getLogger(__name__)

QUERY_FAILURE_MESSAGE = (
    "Sorry, your legal question could not be processed right now. "
    "Please try rephrasing it or try again later."
)
WRITING_FAILURE_MESSAGE = (
    "Sorry, the legal document could not be generated right now. "
    "Please try again later."
)
VALIDATION_FAILURE_MESSAGE = (
    "Sorry, the document could not be validated right now. "
    "Please try again later."
)


@dataclass
class OperationResult:
    """Outcome of a use case."""
    success: bool
    message: str
    data: Any = None
    error: Optional[str] = None


class IndexDocumentUseCase:
    """Ingests sources and persists the resulting documents."""

    def __init__(self, ingestor: DocumentIngestor, documents: DocumentStore):
        self.ingestor = ingestor
        self.documents = documents
        self.metrics = get_metrics_collector()

    def _persist(self, result: IngestionResult, category, duration_ms: float) -> OperationResult:
        document = result.document
        if result.success:
            try:
                self.documents.save(document)
            except LegalAssistantError as e:
                result = IngestionResult(source=result.source, success=False, message=str(e))

        category_name = category.value if isinstance(category, DocumentCategory) else str(category)
        self.metrics.record_ingestion(category_name, duration_ms, success=result.success)

        if not result.success:
            return OperationResult(
                success=False,
                message=f"Failed to index {result.source}: {result.message}",
                error=result.message,
            )
        return OperationResult(success=True, message=result.message, data=document)

    def execute(self, file_path: str, category: Union[DocumentCategory, str]) -> OperationResult:
        """Index one file relative to the assets root."""
        start = time.time()
        result = self.ingestor.ingest_batch([(file_path, category)])[0]
        return self._persist(result, category, (time.time() - start) * 1000)

    def execute_batch(
        self,
        items: list[tuple[str, Union[DocumentCategory, str]]],
        root: Optional[Union[str, Path]] = None,
    ) -> list[OperationResult]:
        """Index several files; one failure never aborts the others."""
        if not items:
            return []
        start = time.time()
        results = self.ingestor.ingest_batch(items, root=root)
        per_item_ms = (time.time() - start) * 1000 / len(items)
        outcomes = [
            self._persist(result, category, per_item_ms)
            for result, (_, category) in zip(results, items)
        ]
        indexed = sum(1 for r in outcomes if r.success)
        logger.info(f"Batch indexing: {indexed}/{len(items)} documents indexed")
        return outcomes

    def execute_upload(
        self,
        data: bytes,
        file_name: str,
        category: Union[DocumentCategory, str],
    ) -> OperationResult:
        """Index uploaded bytes."""
        start = time.time()
        try:
            document = self.ingestor.ingest_bytes(data, file_name=file_name, category=category)
            result = IngestionResult(
                source=file_name,
                success=True,
                document=document,
                message=f"Document \"{document.title}\" indexed successfully",
            )
        except LegalAssistantError as e:
            logger.error(f"Failed to index upload {file_name}: {e}")
            result = IngestionResult(source=file_name, success=False, message=str(e))
        return self._persist(result, category, (time.time() - start) * 1000)

    def auto_index(self, root: Optional[Union[str, Path]] = None) -> list[OperationResult]:
        """
        Index every supported file found under the category subdirectories of root.

        Args:
            root: Directory to scan. Defaults to the configured assets root.
        """
        sources = self.ingestor.discover_sources(root)
        logger.info(f"Auto-indexing {len(sources)} documents")
        return self.execute_batch(sources, root=root)


class ProcessLegalQueryUseCase:
    """Validates, answers and records a legal question."""

    def __init__(self, service: LegalQueryService, queries: QueryStore):
        self.service = service
        self.queries = queries
        self.metrics = get_metrics_collector()

    def execute(
        self,
        question: str,
        context: Optional[str] = None,
        query_type: Optional[Union[QueryType, str]] = None,
        user_id: Optional[str] = None,
    ) -> OperationResult:
        with self.metrics.track_operation("query", question or "") as tracker:
            try:
                query = LegalQuery(
                    question=question,
                    query_type=parse_enum(QueryType, query_type or QueryType.LEGAL_QUESTION, "query_type"),
                    context=context,
                    user_id=user_id,
                )
                response = self.service.process_query(query)
                self.queries.save(query)
                self.queries.save_response(response)
            except ValidationError as e:
                tracker.fail(e)
                return OperationResult(success=False, message=str(e), error=str(e))
            except Exception as e:
                tracker.fail(e)
                logger.error(f"Failed to process legal query: {e}")
                return OperationResult(
                    success=False, message=QUERY_FAILURE_MESSAGE, error=str(e),
                )

            tracker.set_sources(len(response.sources))
            return OperationResult(
                success=True,
                message="Legal query processed successfully",
                data=response,
            )


class GenerateLegalDocumentUseCase:
    """Validates, drafts and records a legal document request."""

    def __init__(self, service: LegalWritingService, writings: WritingStore):
        self.service = service
        self.writings = writings
        self.metrics = get_metrics_collector()

    def execute(
        self,
        title: str,
        prompt: str,
        document_type: Union[WritingDocumentType, str],
        context: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> OperationResult:
        with self.metrics.track_operation("writing", title or "") as tracker:
            try:
                writing = LegalWriting(
                    title=title,
                    prompt=prompt,
                    document_type=parse_enum(WritingDocumentType, document_type, "document_type"),
                    context=context,
                    user_id=user_id,
                )
                response = self.service.generate_document(writing)
                self.writings.save(writing)
                self.writings.save_response(response)
            except ValidationError as e:
                tracker.fail(e)
                return OperationResult(success=False, message=str(e), error=str(e))
            except Exception as e:
                tracker.fail(e)
                logger.error(f"Failed to generate legal document: {e}")
                return OperationResult(
                    success=False, message=WRITING_FAILURE_MESSAGE, error=str(e),
                )

            tracker.set_sources(len(response.sources))
            return OperationResult(
                success=True,
                message="Legal document generated successfully",
                data=response,
            )


class ValidateDocumentUseCase:
    """Asks the model to review a legal document."""

    def __init__(self, service: LegalWritingService):
        self.service = service
        self.metrics = get_metrics_collector()

    def execute(self, content: str) -> OperationResult:
        with self.metrics.track_operation("validation", (content or "")[:80]) as tracker:
            if not content or not content.strip():
                error = ValidationError("Document content must not be empty")
                tracker.fail(error)
                return OperationResult(success=False, message=str(error), error=str(error))
            try:
                report = self.service.validate_document(content)
            except Exception as e:
                tracker.fail(e)
                logger.error(f"Failed to validate document: {e}")
                return OperationResult(
                    success=False, message=VALIDATION_FAILURE_MESSAGE, error=str(e),
                )
            return OperationResult(
                success=True,
                message="Document validated successfully",
                data=report,
            )
