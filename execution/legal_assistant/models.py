"""
Domain records for the Legal Assistant.

Documents, query/writing requests and their responses are plain dataclasses.
Enum values are the exact strings used on the wire.
"""

import uuid
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, TypeVar

from .errors import ValidationError


class DocumentCategory(str, Enum):
    """Classification of an ingested legal text."""
    PENAL_CODE = "PENAL_CODE"
    CIVIL_CODE = "CIVIL_CODE"
    COMMERCIAL_CODE = "COMMERCIAL_CODE"
    CASE_LAW = "CASE_LAW"
    LEGAL_OPINION = "LEGAL_OPINION"
    OTHER = "OTHER"


class WritingDocumentType(str, Enum):
    """Kind of document a drafting request asks for."""
    COMPLAINT = "COMPLAINT"
    MOTION = "MOTION"
    BRIEF = "BRIEF"
    CONTRACT = "CONTRACT"
    LEGAL_OPINION = "LEGAL_OPINION"
    DEMAND_LETTER = "DEMAND_LETTER"
    OTHER = "OTHER"


class QueryType(str, Enum):
    """Kind of legal question."""
    LEGAL_QUESTION = "LEGAL_QUESTION"
    DOCUMENT_SEARCH = "DOCUMENT_SEARCH"
    CASE_ANALYSIS = "CASE_ANALYSIS"
    STATUTE_INTERPRETATION = "STATUTE_INTERPRETATION"


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: Any, field_name: Optional[str] = None) -> E:
    """
    Convert a raw value into a member of enum_cls.

    Accepts enum members and strings (case-insensitive, surrounding
    whitespace ignored).

    Raises:
        ValidationError: if the value is not a known member
    """
    if isinstance(value, enum_cls):
        return value
    label = field_name or enum_cls.__name__
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {label}: {value!r}")
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {label}: {value!r}. Expected one of: {allowed}"
        ) from None


def new_id() -> str:
    return str(uuid.uuid4())


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# Documents
# =============================================================================

@dataclass
class DocumentMetadata:
    """Metadata derived while ingesting a legal document."""
    file_name: str
    file_size_bytes: int
    page_count: Optional[int] = None
    language: str = "es"
    jurisdiction: str = "Argentina"
    tags: set[str] = field(default_factory=set)
    summary: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "file_name": self.file_name,
            "file_size_bytes": self.file_size_bytes,
            "page_count": self.page_count,
            "language": self.language,
            "jurisdiction": self.jurisdiction,
            "tags": sorted(self.tags),
            "summary": self.summary,
        }


@dataclass
class LegalDocument:
    """One ingested legal text with its extracted content."""
    id: str
    title: str
    content: str
    source: str
    category: DocumentCategory
    metadata: DocumentMetadata
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self, include_content: bool = True) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "source": self.source,
            "category": self.category.value,
            "metadata": self.metadata.to_dict(),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if include_content:
            data["content"] = self.content
        return data


@dataclass
class DocumentReference:
    """A retrieved document cited as a source of a response."""
    document_id: str
    title: str
    relevant_sections: list[str] = field(default_factory=list)
    relevance_score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "title": self.title,
            "relevant_sections": list(self.relevant_sections),
            "relevance_score": self.relevance_score,
        }


# =============================================================================
# Queries
# =============================================================================

@dataclass
class LegalQuery:
    """An incoming legal question."""
    question: str
    query_type: QueryType = QueryType.LEGAL_QUESTION
    context: Optional[str] = None
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "context": self.context,
            "query_type": self.query_type.value,
            "user_id": self.user_id,
            "created_at": _iso(self.created_at),
        }


@dataclass
class QueryResponse:
    """Answer produced for a LegalQuery."""
    request_id: str
    answer: str
    sources: list[DocumentReference]
    confidence: float
    reasoning: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "request_id": self.request_id,
            "answer": self.answer,
            "sources": [s.to_dict() for s in self.sources],
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "created_at": _iso(self.created_at),
        }


# =============================================================================
# Writings
# =============================================================================

@dataclass
class LegalWriting:
    """An incoming request to draft a legal document."""
    title: str
    prompt: str
    document_type: WritingDocumentType = WritingDocumentType.OTHER
    context: Optional[str] = None
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "prompt": self.prompt,
            "document_type": self.document_type.value,
            "context": self.context,
            "user_id": self.user_id,
            "created_at": _iso(self.created_at),
        }


@dataclass
class WritingSection:
    """A titled block of a drafted document. Order starts at 1."""
    title: str
    content: str
    order: int

    def to_dict(self) -> dict:
        return {"title": self.title, "content": self.content, "order": self.order}


@dataclass
class WritingResponse:
    """Drafted document produced for a LegalWriting."""
    request_id: str
    title: str
    content: str
    sections: list[WritingSection]
    sources: list[DocumentReference]
    confidence: float
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "request_id": self.request_id,
            "title": self.title,
            "content": self.content,
            "sections": [s.to_dict() for s in self.sections],
            "sources": [s.to_dict() for s in self.sources],
            "confidence": self.confidence,
            "created_at": _iso(self.created_at),
        }


@dataclass
class ValidationReport:
    """Outcome of asking the model to review a legal document."""
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    analysis: str = ""

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
            "analysis": self.analysis,
        }
