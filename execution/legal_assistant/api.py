"""
FastAPI Backend for the Legal Assistant

REST endpoints for document indexing and search, legal questions, and legal
document drafting and validation.

Run with: uvicorn execution.legal_assistant.api:app --host 0.0.0.0 --port 8000
"""

import os
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, UploadFile, File, Form, Query
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from . import __version__
from .api_models import (
    IndexDocumentRequest, BatchIndexRequest, IndexResult,
    DocumentInfo, DocumentDetail, DocumentReferenceInfo,
    LegalQueryRequest, LegalQueryInfo, QueryResponseInfo,
    GenerateDocumentRequest, ValidateDocumentRequest,
    LegalWritingInfo, WritingResponseInfo, ValidationReportInfo,
    HealthResponse,
)
from .container import ServiceContainer
from .errors import ValidationError
from .metrics import get_metrics_collector
from .models import DocumentCategory, parse_enum

# Load environment variables
load_dotenv()
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Legal Assistant API",
    description="REST API for legal question answering and drafting over Argentine law",
    version=__version__,
)

# Configure CORS: use CORS_ORIGINS env var (comma-separated) or default to localhost
_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_container = ServiceContainer()


def _index_result(result) -> IndexResult:
    document = result.data.to_dict(include_content=False) if result.success else None
    return IndexResult(success=result.success, message=result.message, document=document)


def _require(record, what: str):
    if record is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return record


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    config = _container.get_config()
    return HealthResponse(
        status="ok",
        version=__version__,
        documents=_container.get_document_store().count(),
        ai_provider=config.ai_provider,
        retriever=config.retriever,
    )


@app.get("/api/v1/metrics")
async def get_metrics():
    return get_metrics_collector().get_metrics_dict()


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------

@app.post("/api/v1/documents/index", response_model=IndexResult)
def index_document(request: IndexDocumentRequest):
    """Index a file located under the assets directory."""
    result = _container.get_use_case("index").execute(request.file_path, request.category)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return _index_result(result)


@app.post("/api/v1/documents/index/batch", response_model=list[IndexResult])
def index_documents(request: BatchIndexRequest):
    """Index several files. Each item reports its own outcome."""
    results = _container.get_use_case("index").execute_batch(
        [(item.file_path, item.category) for item in request.documents]
    )
    return [_index_result(r) for r in results]


@app.post("/api/v1/documents/upload", response_model=IndexResult)
async def upload_document(
    file: UploadFile = File(...),
    category: str = Form(...),
):
    """Upload and index a PDF or plain-text document."""
    try:
        parsed = parse_enum(DocumentCategory, category, "category")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = await file.read()
    result = _container.get_use_case("index").execute_upload(data, file.filename or "upload", parsed)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return _index_result(result)


@app.get("/api/v1/documents", response_model=list[DocumentInfo])
async def list_documents():
    return [d.to_dict(include_content=False) for d in _container.get_document_store().find_all()]


@app.get("/api/v1/documents/search", response_model=list[DocumentReferenceInfo])
def search_documents(
    query: str = Query(..., min_length=1),
    category: Optional[DocumentCategory] = None,
    limit: int = Query(default=10, ge=1, le=100),
):
    """Keyword (or embedding) search over indexed documents."""
    references = _container.get_retriever().search(query, category=category, limit=limit)
    return [r.to_dict() for r in references]


@app.get("/api/v1/documents/category/{category}", response_model=list[DocumentInfo])
async def list_documents_by_category(category: str):
    try:
        parsed = parse_enum(DocumentCategory, category, "category")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    documents = _container.get_document_store().find_by_category(parsed)
    return [d.to_dict(include_content=False) for d in documents]


@app.get("/api/v1/documents/{document_id}", response_model=DocumentDetail)
async def get_document(document_id: str):
    document = _require(_container.get_document_store().find_by_id(document_id), "Document")
    return document.to_dict()


@app.delete("/api/v1/documents/{document_id}")
async def delete_document(document_id: str):
    if not _container.get_document_store().delete(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return {"status": "deleted", "document_id": document_id}


# -----------------------------------------------------------------------------
# Legal queries
# -----------------------------------------------------------------------------

@app.post("/api/v1/legal-queries", response_model=QueryResponseInfo)
def process_legal_query(request: LegalQueryRequest):
    """Answer a legal question from the indexed documents."""
    result = _container.get_use_case("query").execute(
        request.question,
        context=request.context,
        query_type=request.query_type,
        user_id=request.user_id,
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result.data.to_dict()


@app.get("/api/v1/legal-queries", response_model=list[LegalQueryInfo])
async def list_legal_queries():
    return [q.to_dict() for q in _container.get_query_store().find_all()]


@app.get("/api/v1/legal-queries/user/{user_id}", response_model=list[LegalQueryInfo])
async def list_user_queries(user_id: str):
    return [q.to_dict() for q in _container.get_query_store().find_by_user_id(user_id)]


@app.get("/api/v1/legal-queries/{query_id}", response_model=LegalQueryInfo)
async def get_legal_query(query_id: str):
    return _require(_container.get_query_store().find_by_id(query_id), "Query").to_dict()


@app.get("/api/v1/legal-queries/{query_id}/response", response_model=QueryResponseInfo)
async def get_legal_query_response(query_id: str):
    store = _container.get_query_store()
    _require(store.find_by_id(query_id), "Query")
    responses = store.find_responses_by_request_id(query_id)
    return _require(responses[0] if responses else None, "Response").to_dict()


# -----------------------------------------------------------------------------
# Legal writing
# -----------------------------------------------------------------------------

@app.post("/api/v1/legal-writing/generate", response_model=WritingResponseInfo)
def generate_legal_document(request: GenerateDocumentRequest):
    """Draft a legal document grounded on the indexed documents."""
    result = _container.get_use_case("writing").execute(
        request.title,
        request.prompt,
        request.document_type,
        context=request.context,
        user_id=request.user_id,
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result.data.to_dict()


@app.post("/api/v1/legal-writing/validate", response_model=ValidationReportInfo)
def validate_legal_document(request: ValidateDocumentRequest):
    result = _container.get_use_case("validate").execute(request.content)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result.data.to_dict()


@app.get("/api/v1/legal-writing", response_model=list[LegalWritingInfo])
async def list_legal_writings():
    return [w.to_dict() for w in _container.get_writing_store().find_all()]


@app.get("/api/v1/legal-writing/user/{user_id}", response_model=list[LegalWritingInfo])
async def list_user_writings(user_id: str):
    return [w.to_dict() for w in _container.get_writing_store().find_by_user_id(user_id)]


@app.get("/api/v1/legal-writing/{writing_id}", response_model=LegalWritingInfo)
async def get_legal_writing(writing_id: str):
    return _require(_container.get_writing_store().find_by_id(writing_id), "Writing").to_dict()


@app.get("/api/v1/legal-writing/{writing_id}/response", response_model=WritingResponseInfo)
async def get_legal_writing_response(writing_id: str):
    store = _container.get_writing_store()
    _require(store.find_by_id(writing_id), "Writing")
    responses = store.find_responses_by_request_id(writing_id)
    return _require(responses[0] if responses else None, "Response").to_dict()


if __name__ == "__main__":
    import uvicorn

    config = _container.get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
