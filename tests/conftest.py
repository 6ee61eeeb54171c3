"""
Shared fixtures and test utilities for Legal Assistant tests.

Provides mock generation/embedding services, in-memory stores and sample
Argentine legal texts so that all tests run without API keys or network access.
"""

import sys
import hashlib
from pathlib import Path
from datetime import datetime

import pytest
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Path setup - ensure the execution package is importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

load_dotenv(PROJECT_ROOT / ".env")

# ---------------------------------------------------------------------------
# Sample legal texts
# ---------------------------------------------------------------------------
CIVIL_CODE_TEXT = """CÓDIGO CIVIL Y COMERCIAL DE LA NACIÓN
Libro Segundo. Relaciones de familia.

ARTÍCULO 638. Responsabilidad parental. La responsabilidad parental es el conjunto de deberes y derechos que corresponden a los progenitores sobre la persona y bienes del hijo, para su protección, desarrollo y formación integral mientras sea menor de edad y no se haya emancipado.

ARTÍCULO 639. Principios generales. La responsabilidad parental se rige por el interés superior del niño, la autonomía progresiva del hijo conforme a sus características psicofísicas, aptitudes y desarrollo, y el derecho del niño a ser oído.

ARTÍCULO 658. Regla general. Ambos progenitores tienen la obligación y el derecho de criar a sus hijos, alimentarlos y educarlos conforme a su condición y fortuna.
"""

PENAL_CODE_TEXT = """CÓDIGO PENAL DE LA NACIÓN ARGENTINA

ARTÍCULO 79. Se aplicará reclusión o prisión de ocho a veinticinco años, al que matare a otro siempre que en este código no se estableciere otra pena.

ARTÍCULO 162. Será reprimido con prisión de un mes a dos años, el que se apoderare ilegítimamente de una cosa mueble, total o parcialmente ajena.
"""

DRAFT_RESPONSE = """DEMANDA DE ALIMENTOS

1. OBJETO
Se promueve demanda de alimentos a favor del hijo menor.

2. HECHOS
El demandado no cumple con la cuota alimentaria desde enero.
"""

VALIDATION_RESPONSE = """VALIDITY: Needs Review
ISSUES:
- Falta la firma del letrado
- No se indica el domicilio constituido
SUGGESTIONS:
- Agregar la firma y matrícula del abogado
ANALYSIS: El escrito es formalmente incompleto."""


# ---------------------------------------------------------------------------
# Mock text generator
# ---------------------------------------------------------------------------

class MockTextGenerator:
    """Deterministic generator -- never calls external APIs.

    Returns queued responses in order, then the default. Every prompt is
    recorded. Set `error` to make the next calls raise it.
    """

    provider = "mock"
    model = "mock-model"

    def __init__(self, responses=None, default="Respuesta de prueba."):
        self.responses = list(responses or [])
        self.default = default
        self.prompts = []
        self.error = None

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return self.default


@pytest.fixture
def mock_generator():
    return MockTextGenerator()


# ---------------------------------------------------------------------------
# Mock embedding service
# ---------------------------------------------------------------------------

class MockEmbeddingService:
    """Deterministic mock embedding service -- never calls external APIs."""

    def __init__(self, dimensions=64):
        self._dimensions = dimensions
        self.documents_embedded = 0

    def embed_documents(self, texts):
        self.documents_embedded += len(texts)
        return [self._deterministic_embedding(t) for t in texts]

    def embed_query(self, query):
        return self._deterministic_embedding(query)

    def _deterministic_embedding(self, text):
        h = hashlib.sha256(text.encode()).hexdigest()
        seed = int(h[:8], 16)
        return [((seed + i) % 1000) / 1000.0 for i in range(self._dimensions)]


@pytest.fixture
def mock_embedding_service():
    return MockEmbeddingService()


# ---------------------------------------------------------------------------
# Configuration, assets and stores
# ---------------------------------------------------------------------------

@pytest.fixture
def assets_dir(tmp_path):
    """Assets folder with one civil code and one penal code text file."""
    root = tmp_path / "assets"
    (root / "civil-code").mkdir(parents=True)
    (root / "penal-code").mkdir(parents=True)
    (root / "civil-code" / "codigo-civil.txt").write_text(CIVIL_CODE_TEXT, encoding="utf-8")
    (root / "penal-code" / "codigo-penal.txt").write_text(PENAL_CODE_TEXT, encoding="utf-8")
    return root


@pytest.fixture
def config(assets_dir):
    from execution.legal_assistant.config import AssistantConfig
    return AssistantConfig(assets_path=str(assets_dir))


@pytest.fixture
def document_store():
    from execution.legal_assistant.stores import InMemoryDocumentStore
    return InMemoryDocumentStore()


@pytest.fixture
def query_store():
    from execution.legal_assistant.stores import InMemoryQueryStore
    return InMemoryQueryStore()


@pytest.fixture
def writing_store():
    from execution.legal_assistant.stores import InMemoryWritingStore
    return InMemoryWritingStore()


def make_document(title, content, category=None, tags=None, doc_id=None):
    """Build a LegalDocument directly, bypassing ingestion."""
    from execution.legal_assistant.models import (
        DocumentCategory, DocumentMetadata, LegalDocument, new_id,
    )
    category = category or DocumentCategory.OTHER
    now = datetime.now()
    return LegalDocument(
        id=doc_id or new_id(),
        title=title,
        content=content,
        source=f"{title}.txt",
        category=category,
        metadata=DocumentMetadata(
            file_name=f"{title}.txt",
            file_size_bytes=len(content.encode()),
            page_count=1,
            tags=set(tags) if tags is not None else {category.value.lower()},
            summary=content[:200],
        ),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def civil_document():
    from execution.legal_assistant.models import DocumentCategory
    return make_document(
        "CÓDIGO CIVIL Y COMERCIAL DE LA NACIÓN", CIVIL_CODE_TEXT, DocumentCategory.CIVIL_CODE,
    )


@pytest.fixture
def penal_document():
    from execution.legal_assistant.models import DocumentCategory
    return make_document(
        "CÓDIGO PENAL DE LA NACIÓN ARGENTINA", PENAL_CODE_TEXT, DocumentCategory.PENAL_CODE,
    )


@pytest.fixture
def populated_store(document_store, civil_document, penal_document):
    document_store.save(civil_document)
    document_store.save(penal_document)
    return document_store


# ---------------------------------------------------------------------------
# Singleton resets between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_metrics_singleton():
    """Reset the MetricsCollector singleton between tests."""
    import execution.legal_assistant.metrics as metrics_mod
    metrics_mod.MetricsCollector._instance = None
    metrics_mod._collector = None
    yield
    metrics_mod.MetricsCollector._instance = None
    metrics_mod._collector = None
