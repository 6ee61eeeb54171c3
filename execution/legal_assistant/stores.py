"""
Storage for legal documents, queries and writings.

Architecture:
    DocumentStore / QueryStore / WritingStore  -- storage contracts
        InMemoryDocumentStore  -- keyed dict guarded by a lock
        InMemoryQueryStore
        InMemoryWritingStore

Stores are constructed explicitly (see container.ServiceContainer) and
injected into the services that need them. A durable backend only has to
implement the same methods and raise StorageError on failure.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Generic, Optional, TypeVar

from .errors import NotFoundError, StorageError
from .models import (
    DocumentCategory,
    DocumentMetadata,
    LegalDocument,
    LegalQuery,
    LegalWriting,
    QueryResponse,
    QueryType,
    WritingDocumentType,
    WritingResponse,
    parse_enum,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Documents
# =============================================================================

class DocumentStore:
    """Storage contract for ingested legal documents."""

    def save(self, document: LegalDocument) -> LegalDocument:
        raise NotImplementedError

    def find_by_id(self, document_id: str) -> Optional[LegalDocument]:
        raise NotImplementedError

    def find_by_category(self, category: DocumentCategory) -> list[LegalDocument]:
        raise NotImplementedError

    def find_all(self) -> list[LegalDocument]:
        raise NotImplementedError

    def find_by_tags(self, tags: list[str]) -> list[LegalDocument]:
        raise NotImplementedError

    def delete(self, document_id: str) -> bool:
        raise NotImplementedError

    def update(self, document_id: str, **changes) -> LegalDocument:
        raise NotImplementedError

    def search(
        self,
        query: str,
        category: Optional[DocumentCategory] = None,
        limit: int = 10,
    ) -> list[LegalDocument]:
        raise NotImplementedError

    def count(self) -> int:
        return len(self.find_all())


# Fields that may not be overwritten through update()
_IMMUTABLE_DOCUMENT_FIELDS = frozenset({"id", "created_at", "updated_at"})


class InMemoryDocumentStore(DocumentStore):
    """
    Process-lifetime document store.

    Documents are kept in insertion order, which is also the tie-break order
    used by the keyword retriever.
    """

    def __init__(self):
        self._documents: dict[str, LegalDocument] = {}
        self._lock = threading.RLock()

    def save(self, document: LegalDocument) -> LegalDocument:
        with self._lock:
            self._documents[document.id] = document
        logger.debug(f"Saved document {document.id} ({document.title})")
        return document

    def find_by_id(self, document_id: str) -> Optional[LegalDocument]:
        with self._lock:
            return self._documents.get(document_id)

    def find_by_category(self, category: DocumentCategory) -> list[LegalDocument]:
        return [d for d in self.find_all() if d.category == category]

    def find_all(self) -> list[LegalDocument]:
        with self._lock:
            return list(self._documents.values())

    def find_by_tags(self, tags: list[str]) -> list[LegalDocument]:
        wanted = set(tags)
        return [d for d in self.find_all() if wanted & d.metadata.tags]

    def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    def update(self, document_id: str, **changes) -> LegalDocument:
        """
        Merge changes into a stored document and refresh updated_at.

        Raises:
            NotFoundError: if the document does not exist
            StorageError: if changes name an unknown or immutable field
                or carry a metadata value that is not DocumentMetadata
            ValidationError: if category is not a DocumentCategory
        """
        blocked = _IMMUTABLE_DOCUMENT_FIELDS.intersection(changes)
        if blocked:
            raise StorageError(f"Cannot update fields: {', '.join(sorted(blocked))}")
        if "category" in changes:
            changes["category"] = parse_enum(DocumentCategory, changes["category"], "category")
        if "metadata" in changes and not isinstance(changes["metadata"], DocumentMetadata):
            raise StorageError("Invalid document update: metadata must be DocumentMetadata")

        with self._lock:
            existing = self._documents.get(document_id)
            if existing is None:
                raise NotFoundError(
                    f"Document with id {document_id} not found", resource=document_id
                )
            try:
                updated = replace(existing, updated_at=datetime.now(), **changes)
            except TypeError as e:
                raise StorageError(f"Invalid document update: {e}") from e
            self._documents[document_id] = updated
        return updated

    def search(
        self,
        query: str,
        category: Optional[DocumentCategory] = None,
        limit: int = 10,
    ) -> list[LegalDocument]:
        """Naive text search: whole query as a substring of title or content."""
        needle = query.lower()
        results = [
            d for d in self.find_all()
            if needle in d.title.lower() or needle in d.content.lower()
        ]
        if category is not None:
            results = [d for d in results if d.category == category]
        return results[:max(limit, 0)]

    def count(self) -> int:
        with self._lock:
            return len(self._documents)


# =============================================================================
# Requests and responses (queries, writings)
# =============================================================================

R = TypeVar("R")
S = TypeVar("S")


class _InMemoryRequestStore(Generic[R, S]):
    """Shared request/response bookkeeping for query and writing stores."""

    def __init__(self):
        self._requests: dict[str, R] = {}
        self._responses: dict[str, S] = {}
        self._lock = threading.RLock()

    def save(self, request: R) -> R:
        with self._lock:
            self._requests[request.id] = request
        return request

    def find_by_id(self, request_id: str) -> Optional[R]:
        with self._lock:
            return self._requests.get(request_id)

    def find_all(self) -> list[R]:
        with self._lock:
            return list(self._requests.values())

    def find_by_user_id(self, user_id: str) -> list[R]:
        return [r for r in self.find_all() if r.user_id == user_id]

    def delete(self, request_id: str) -> bool:
        with self._lock:
            return self._requests.pop(request_id, None) is not None

    def save_response(self, response: S) -> S:
        with self._lock:
            self._responses[response.id] = response
        return response

    def find_response_by_id(self, response_id: str) -> Optional[S]:
        with self._lock:
            return self._responses.get(response_id)

    def find_responses_by_request_id(self, request_id: str) -> list[S]:
        with self._lock:
            return [r for r in self._responses.values() if r.request_id == request_id]


class QueryStore:
    """Storage contract for legal queries and their responses."""

    def save(self, query: LegalQuery) -> LegalQuery:
        raise NotImplementedError

    def find_by_id(self, query_id: str) -> Optional[LegalQuery]:
        raise NotImplementedError

    def find_by_type(self, query_type: QueryType) -> list[LegalQuery]:
        raise NotImplementedError

    def find_by_user_id(self, user_id: str) -> list[LegalQuery]:
        raise NotImplementedError

    def find_all(self) -> list[LegalQuery]:
        raise NotImplementedError

    def delete(self, query_id: str) -> bool:
        raise NotImplementedError

    def save_response(self, response: QueryResponse) -> QueryResponse:
        raise NotImplementedError

    def find_response_by_id(self, response_id: str) -> Optional[QueryResponse]:
        raise NotImplementedError

    def find_responses_by_request_id(self, query_id: str) -> list[QueryResponse]:
        raise NotImplementedError


class InMemoryQueryStore(_InMemoryRequestStore[LegalQuery, QueryResponse], QueryStore):
    """Process-lifetime query store."""

    def find_by_type(self, query_type: QueryType) -> list[LegalQuery]:
        return [q for q in self.find_all() if q.query_type == query_type]


class WritingStore:
    """Storage contract for writing requests and drafted documents."""

    def save(self, writing: LegalWriting) -> LegalWriting:
        raise NotImplementedError

    def find_by_id(self, writing_id: str) -> Optional[LegalWriting]:
        raise NotImplementedError

    def find_by_type(self, document_type: WritingDocumentType) -> list[LegalWriting]:
        raise NotImplementedError

    def find_by_user_id(self, user_id: str) -> list[LegalWriting]:
        raise NotImplementedError

    def find_all(self) -> list[LegalWriting]:
        raise NotImplementedError

    def delete(self, writing_id: str) -> bool:
        raise NotImplementedError

    def save_response(self, response: WritingResponse) -> WritingResponse:
        raise NotImplementedError

    def find_response_by_id(self, response_id: str) -> Optional[WritingResponse]:
        raise NotImplementedError

    def find_responses_by_request_id(self, writing_id: str) -> list[WritingResponse]:
        raise NotImplementedError


class InMemoryWritingStore(_InMemoryRequestStore[LegalWriting, WritingResponse], WritingStore):
    """Process-lifetime writing store."""

    def find_by_type(self, document_type: WritingDocumentType) -> list[LegalWriting]:
        return [w for w in self.find_all() if w.document_type == document_type]
