"""
Retrievers for Legal Documents

KeywordRetriever scores each stored document by the fraction of query tokens
it contains. EmbeddingRetriever implements the same contract with cosine
similarity over document embeddings, so callers can swap one for the other.

Both return documents ordered by non-increasing relevance, drop documents
that score 0, and attach up to five matching sentences per document.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .models import DocumentCategory, DocumentReference, LegalDocument
from .stores import DocumentStore

logger = logging.getLogger(__name__)

MAX_RELEVANT_SECTIONS = 5
MIN_SENTENCE_LENGTH = 10
BASE_CONFIDENCE = 0.3

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


# ============================================================================
# Scoring helpers
# ============================================================================

def tokenize(query: str) -> list[str]:
    """Lower-cased whitespace tokens."""
    return query.lower().split()


def relevance_score(content: str, query: str) -> float:
    """Fraction of query tokens that appear as substrings of content."""
    tokens = tokenize(query)
    if not tokens:
        return 0.0
    content_lower = content.lower()
    matched = sum(1 for token in tokens if token in content_lower)
    return min(matched / len(tokens), 1.0)


def extract_relevant_sections(
    content: str,
    query: str,
    max_sections: int = MAX_RELEVANT_SECTIONS,
) -> list[str]:
    """Sentences (longer than 10 chars) containing any query token, in document order."""
    tokens = tokenize(query)
    if not tokens:
        return []
    sections = []
    for sentence in _SENTENCE_SPLIT.split(content):
        sentence = sentence.strip()
        if len(sentence) <= MIN_SENTENCE_LENGTH:
            continue
        lowered = sentence.lower()
        if any(token in lowered for token in tokens):
            sections.append(sentence)
            if len(sections) >= max_sections:
                break
    return sections


def calculate_confidence(documents: list[LegalDocument], query: str) -> float:
    """
    Heuristic confidence in [0.3, 1.0].

    0.3 when nothing was retrieved, otherwise 0.3 plus 0.7 times the mean
    keyword relevance of the documents over their full content.
    """
    if not documents:
        return BASE_CONFIDENCE
    average = sum(relevance_score(d.content, query) for d in documents) / len(documents)
    return min(BASE_CONFIDENCE + (1 - BASE_CONFIDENCE) * average, 1.0)


@dataclass
class RetrievedDocument:
    """A document returned by a retriever with its score and matching sentences."""
    document: LegalDocument
    relevance_score: float
    relevant_sections: list[str] = field(default_factory=list)

    def to_reference(self) -> DocumentReference:
        return DocumentReference(
            document_id=self.document.id,
            title=self.document.title,
            relevant_sections=list(self.relevant_sections),
            relevance_score=self.relevance_score,
        )


# ============================================================================
# Retrievers
# ============================================================================

class Retriever:
    """
    Retrieval contract.

    Subclasses implement _score(); candidate filtering, ordering, truncation
    and sentence extraction are shared.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def _candidates(self, category: Optional[DocumentCategory]) -> list[LegalDocument]:
        if category is not None:
            return self.store.find_by_category(category)
        return self.store.find_all()

    def _score(self, query: str, documents: list[LegalDocument]) -> list[float]:
        raise NotImplementedError("Subclasses must implement _score()")

    def retrieve(
        self,
        query: str,
        category: Optional[DocumentCategory] = None,
        limit: int = 10,
    ) -> list[RetrievedDocument]:
        """
        Find documents relevant to a query.

        Args:
            query: Natural-language query
            category: Optional category pre-filter
            limit: Maximum number of results

        Returns:
            Retrieved documents by descending score (ties keep store order).
            Empty when nothing scores above 0.
        """
        if limit < 1 or not query.strip():
            return []

        candidates = self._candidates(category)
        if not candidates:
            return []

        scores = self._score(query, candidates)
        ranked = sorted(
            (pair for pair in zip(candidates, scores) if pair[1] > 0),
            key=lambda pair: pair[1],
            reverse=True,
        )[:limit]

        results = [
            RetrievedDocument(
                document=doc,
                relevance_score=score,
                relevant_sections=extract_relevant_sections(doc.content, query),
            )
            for doc, score in ranked
        ]
        logger.info(
            f"{type(self).__name__}: {len(results)}/{len(candidates)} documents "
            f"matched '{query[:80]}'"
        )
        return results

    def search(
        self,
        query: str,
        category: Optional[DocumentCategory] = None,
        limit: int = 10,
    ) -> list[DocumentReference]:
        """Same as retrieve(), returned as DocumentReference records."""
        return [r.to_reference() for r in self.retrieve(query, category, limit)]


class KeywordRetriever(Retriever):
    """Scores documents by fractional query-token containment."""

    def _score(self, query: str, documents: list[LegalDocument]) -> list[float]:
        return [relevance_score(d.content, query) for d in documents]


class EmbeddingRetriever(Retriever):
    """
    Scores documents by cosine similarity of embeddings.

    Document embeddings are cached per (id, updated_at) so an updated
    document is re-embedded on the next search; vectors of older versions
    and deleted documents are dropped.
    """

    def __init__(self, store: DocumentStore, embedding_service, max_chars: int = 8000):
        super().__init__(store)
        self.embeddings = embedding_service
        self._max_chars = max_chars
        self._doc_vectors: dict[tuple[str, str], np.ndarray] = {}

    @staticmethod
    def _cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
        norm_a = np.linalg.norm(a)
        norm_b = np.linalg.norm(b)
        if norm_a == 0 or norm_b == 0:
            return 0.0
        return float(np.dot(a, b) / (norm_a * norm_b))

    def _document_vectors(self, documents: list[LegalDocument]) -> list[np.ndarray]:
        keys = [(d.id, d.updated_at.isoformat()) for d in documents]
        missing = [i for i, key in enumerate(keys) if key not in self._doc_vectors]
        if missing:
            texts = [
                f"{documents[i].title}\n{documents[i].content[:self._max_chars]}"
                for i in missing
            ]
            for i, vector in zip(missing, self.embeddings.embed_documents(texts)):
                self._doc_vectors[keys[i]] = np.asarray(vector, dtype=float)
        vectors = [self._doc_vectors[key] for key in keys]
        self._prune(set(keys))
        return vectors

    def _prune(self, current: set[tuple[str, str]]) -> None:
        """Drop vectors of superseded document versions and deleted documents."""
        current_ids = {doc_id for doc_id, _ in current}
        live_ids = {d.id for d in self.store.find_all()}
        stale = [
            key for key in self._doc_vectors
            if key not in current and (key[0] in current_ids or key[0] not in live_ids)
        ]
        for key in stale:
            del self._doc_vectors[key]

    def _score(self, query: str, documents: list[LegalDocument]) -> list[float]:
        query_vector = np.asarray(self.embeddings.embed_query(query), dtype=float)
        return [
            min(max(self._cosine_similarity(query_vector, vector), 0.0), 1.0)
            for vector in self._document_vectors(documents)
        ]


def get_retriever(store: DocumentStore, kind: str = "keyword", embedding_service=None) -> Retriever:
    """
    Get configured retriever instance.

    Args:
        store: Document store to search
        kind: "keyword" (default) or "embedding"
        embedding_service: Required when kind is "embedding"
    """
    if kind == "embedding":
        if embedding_service is None:
            raise ValueError("embedding retriever requires an embedding service")
        return EmbeddingRetriever(store, embedding_service)
    return KeywordRetriever(store)
