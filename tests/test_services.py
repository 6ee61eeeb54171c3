"""
Tests for execution/legal_assistant/services.py

Covers: LegalQueryService.process_query and LegalWritingService
generate_document / validate_document with a mock text generator.
"""

from unittest.mock import MagicMock

import pytest

from tests.conftest import MockTextGenerator


@pytest.fixture
def build_services(populated_store):
    def build(generator, **config_kwargs):
        from execution.legal_assistant.config import AssistantConfig
        from execution.legal_assistant.generation import GenerationEngine
        from execution.legal_assistant.retriever import KeywordRetriever
        from execution.legal_assistant.services import LegalQueryService, LegalWritingService
        config = AssistantConfig(**config_kwargs)
        retriever = KeywordRetriever(populated_store)
        engine = GenerationEngine(generator, config)
        return (
            LegalQueryService(retriever, engine, config),
            LegalWritingService(retriever, engine, config),
        )
    return build


class TestProcessQuery:

    def test_answer_sources_confidence_reasoning(self, build_services, civil_document):
        from execution.legal_assistant.models import LegalQuery
        generator = MockTextGenerator(responses=["Respuesta", "Razonamiento"])
        query_service, _ = build_services(generator)
        query = LegalQuery(question="responsabilidad parental")

        response = query_service.process_query(query)

        assert response.request_id == query.id
        assert response.answer == "Respuesta"
        assert response.reasoning == "Razonamiento"
        assert [s.document_id for s in response.sources] == [civil_document.id]
        assert response.sources[0].relevance_score == 1.0
        assert response.confidence == pytest.approx(1.0)
        assert len(generator.prompts) == 2

    def test_no_matches_gives_base_confidence(self, build_services):
        from execution.legal_assistant.models import LegalQuery
        query_service, _ = build_services(MockTextGenerator())
        response = query_service.process_query(LegalQuery(question="xyzzy"))
        assert response.sources == []
        assert response.confidence == 0.3

    def test_retrieval_limit_from_config(self, build_services):
        from execution.legal_assistant.models import LegalQuery
        query_service, _ = build_services(MockTextGenerator(), retrieval_limit=1)
        response = query_service.process_query(LegalQuery(question="artículo"))
        assert len(response.sources) == 1

    def test_retrieval_completes_before_generation(self):
        from execution.legal_assistant.config import AssistantConfig
        from execution.legal_assistant.models import LegalQuery
        from execution.legal_assistant.services import LegalQueryService

        calls = []
        retriever = MagicMock()
        retriever.retrieve.side_effect = lambda *a, **k: calls.append("retrieve") or []
        engine = MagicMock()
        engine.answer_question.side_effect = lambda *a, **k: calls.append("answer") or "a"
        engine.generate_reasoning.side_effect = lambda *a, **k: calls.append("reasoning") or "r"

        LegalQueryService(retriever, engine, AssistantConfig()).process_query(LegalQuery(question="q"))
        assert calls == ["retrieve", "answer", "reasoning"]

    def test_generation_error_propagates(self, build_services):
        from execution.legal_assistant.errors import GenerationError
        from execution.legal_assistant.models import LegalQuery
        generator = MockTextGenerator()
        generator.error = ConnectionError("offline")
        query_service, _ = build_services(generator)
        with pytest.raises(GenerationError):
            query_service.process_query(LegalQuery(question="artículo"))


class TestGenerateDocument:

    def test_draft_response(self, build_services, civil_document):
        from execution.legal_assistant.models import LegalWriting, WritingDocumentType
        generator = MockTextGenerator(responses=["1. Intro\nText A\n2. Facts\nText B"])
        _, writing_service = build_services(generator)
        writing = LegalWriting(
            title="Demanda",
            prompt="responsabilidad parental",
            document_type=WritingDocumentType.COMPLAINT,
        )

        response = writing_service.generate_document(writing)

        assert response.request_id == writing.id
        assert response.title == "Demanda"
        assert [s.title for s in response.sections] == ["1. Intro", "2. Facts"]
        assert [s.document_id for s in response.sources] == [civil_document.id]
        assert 0.3 <= response.confidence <= 1.0

    def test_retrieves_with_prompt(self, build_services):
        from execution.legal_assistant.models import LegalWriting
        generator = MockTextGenerator()
        _, writing_service = build_services(generator)
        response = writing_service.generate_document(
            LegalWriting(title="responsabilidad parental", prompt="xyzzy"),
        )
        # The title is not used for retrieval
        assert response.sources == []
        assert response.confidence == 0.3


class TestValidateDocument:

    def test_delegates_to_engine(self, build_services):
        generator = MockTextGenerator(responses=["VALIDITY: Valid\nANALYSIS: ok"])
        _, writing_service = build_services(generator)
        report = writing_service.validate_document("Contrato de locación")
        assert report.is_valid is True
        assert report.analysis == "ok"
