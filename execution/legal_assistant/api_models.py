"""
Pydantic models for the Legal Assistant FastAPI backend.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .models import DocumentCategory, QueryType, WritingDocumentType


# =========================================================================
# Documents
# =========================================================================

class IndexDocumentRequest(BaseModel):
    """Request body for indexing a file under the assets root."""
    file_path: str = Field(..., min_length=1)
    category: DocumentCategory


class BatchIndexRequest(BaseModel):
    documents: list[IndexDocumentRequest] = Field(..., min_length=1)


class DocumentMetadataInfo(BaseModel):
    file_name: str
    file_size_bytes: int
    page_count: Optional[int] = None
    language: str
    jurisdiction: str
    tags: list[str] = []
    summary: Optional[str] = None


class DocumentInfo(BaseModel):
    """A stored document without its content."""
    id: str
    title: str
    source: str
    category: DocumentCategory
    metadata: DocumentMetadataInfo
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DocumentDetail(DocumentInfo):
    content: str


class IndexResult(BaseModel):
    """Outcome of indexing one source."""
    success: bool
    message: str
    document: Optional[DocumentInfo] = None


class DocumentReferenceInfo(BaseModel):
    """A document cited as a source."""
    document_id: str
    title: str
    relevant_sections: list[str] = []
    relevance_score: float


# =========================================================================
# Legal queries
# =========================================================================

class LegalQueryRequest(BaseModel):
    """Request body for asking a legal question."""
    question: str = Field(..., min_length=1, max_length=4000)
    context: Optional[str] = None
    query_type: QueryType = QueryType.LEGAL_QUESTION
    user_id: Optional[str] = None


class LegalQueryInfo(BaseModel):
    id: str
    question: str
    context: Optional[str] = None
    query_type: QueryType
    user_id: Optional[str] = None
    created_at: Optional[str] = None


class QueryResponseInfo(BaseModel):
    """Answer to a legal question."""
    id: str
    request_id: str
    answer: str
    sources: list[DocumentReferenceInfo]
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    created_at: Optional[str] = None


# =========================================================================
# Legal writing
# =========================================================================

class GenerateDocumentRequest(BaseModel):
    """Request body for drafting a legal document."""
    title: str = Field(..., min_length=1, max_length=500)
    prompt: str = Field(..., min_length=1)
    document_type: WritingDocumentType
    context: Optional[str] = None
    user_id: Optional[str] = None


class ValidateDocumentRequest(BaseModel):
    content: str = Field(..., min_length=1)


class LegalWritingInfo(BaseModel):
    id: str
    title: str
    prompt: str
    document_type: WritingDocumentType
    context: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None


class WritingSectionInfo(BaseModel):
    title: str
    content: str
    order: int = Field(..., ge=1)


class WritingResponseInfo(BaseModel):
    """A drafted legal document."""
    id: str
    request_id: str
    title: str
    content: str
    sections: list[WritingSectionInfo]
    sources: list[DocumentReferenceInfo]
    confidence: float = Field(..., ge=0.0, le=1.0)
    created_at: Optional[str] = None


class ValidationReportInfo(BaseModel):
    is_valid: bool
    issues: list[str] = []
    suggestions: list[str] = []
    analysis: str = ""


class HealthResponse(BaseModel):
    """Response body for health check."""
    status: str
    version: str
    documents: int
    ai_provider: str
    retriever: str
