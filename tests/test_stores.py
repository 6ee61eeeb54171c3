"""
Tests for execution/legal_assistant/stores.py

Covers: InMemoryDocumentStore (CRUD, category/tag filters, update, naive
search) and the query/writing stores with their responses.
"""

import time
import threading

import pytest

from tests.conftest import make_document


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class TestDocumentStore:

    def test_save_and_find(self, document_store, civil_document):
        document_store.save(civil_document)
        assert document_store.find_by_id(civil_document.id) is civil_document
        assert document_store.count() == 1

    def test_find_missing_returns_none(self, document_store):
        assert document_store.find_by_id("missing") is None

    def test_find_all_keeps_insertion_order(self, populated_store, civil_document, penal_document):
        assert [d.id for d in populated_store.find_all()] == [civil_document.id, penal_document.id]

    def test_find_by_category(self, populated_store, penal_document):
        from execution.legal_assistant.models import DocumentCategory
        found = populated_store.find_by_category(DocumentCategory.PENAL_CODE)
        assert [d.id for d in found] == [penal_document.id]
        assert populated_store.find_by_category(DocumentCategory.CASE_LAW) == []

    def test_find_by_tags_any_match(self, document_store):
        a = document_store.save(make_document("A", "texto", tags={"familia", "civil"}))
        b = document_store.save(make_document("B", "texto", tags={"penal"}))
        document_store.save(make_document("C", "texto", tags=set()))
        found = document_store.find_by_tags(["penal", "familia"])
        assert {d.id for d in found} == {a.id, b.id}

    def test_delete(self, populated_store, civil_document):
        assert populated_store.delete(civil_document.id) is True
        assert populated_store.delete(civil_document.id) is False
        assert populated_store.count() == 1

    def test_save_same_id_overwrites(self, document_store):
        document_store.save(make_document("Viejo", "uno", doc_id="fixed"))
        document_store.save(make_document("Nuevo", "dos", doc_id="fixed"))
        assert document_store.count() == 1
        assert document_store.find_by_id("fixed").title == "Nuevo"

    def test_concurrent_saves(self, document_store):
        def worker(n):
            for i in range(50):
                document_store.save(make_document(f"doc-{n}-{i}", "texto"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert document_store.count() == 200


class TestDocumentUpdate:

    def test_update_changes_fields_and_timestamp(self, document_store, civil_document):
        document_store.save(civil_document)
        before = civil_document.updated_at
        time.sleep(0.001)
        updated = document_store.update(civil_document.id, title="Código actualizado")
        assert updated.title == "Código actualizado"
        assert updated.updated_at > before
        assert updated.created_at == civil_document.created_at
        assert document_store.find_by_id(civil_document.id).title == "Código actualizado"

    def test_update_missing_raises_not_found(self, document_store):
        from execution.legal_assistant.errors import NotFoundError
        with pytest.raises(NotFoundError):
            document_store.update("missing", title="x")

    def test_update_immutable_field_raises(self, document_store, civil_document):
        from execution.legal_assistant.errors import StorageError
        document_store.save(civil_document)
        with pytest.raises(StorageError):
            document_store.update(civil_document.id, id="other")

    def test_update_unknown_field_raises(self, document_store, civil_document):
        from execution.legal_assistant.errors import StorageError
        document_store.save(civil_document)
        with pytest.raises(StorageError):
            document_store.update(civil_document.id, colour="red")

    def test_update_category_string_parsed(self, document_store, civil_document):
        from execution.legal_assistant.models import DocumentCategory
        document_store.save(civil_document)
        updated = document_store.update(civil_document.id, category="case_law")
        assert updated.category == DocumentCategory.CASE_LAW
        assert document_store.find_by_id(civil_document.id).to_dict()["category"] == "CASE_LAW"

    def test_update_unknown_category_rejected(self, document_store, civil_document):
        from execution.legal_assistant.errors import ValidationError
        document_store.save(civil_document)
        with pytest.raises(ValidationError):
            document_store.update(civil_document.id, category="NOT_A_CATEGORY")
        stored = document_store.find_by_id(civil_document.id)
        assert stored.category == civil_document.category
        assert stored.to_dict()["category"] == "CIVIL_CODE"

    def test_update_metadata_must_be_document_metadata(self, document_store, civil_document):
        from execution.legal_assistant.errors import StorageError
        document_store.save(civil_document)
        with pytest.raises(StorageError):
            document_store.update(civil_document.id, metadata={"tags": ["x"]})
        assert document_store.find_by_id(civil_document.id).metadata is civil_document.metadata


class TestDocumentSearch:

    def test_whole_query_substring(self, populated_store, civil_document):
        found = populated_store.search("responsabilidad parental")
        assert [d.id for d in found] == [civil_document.id]

    def test_matches_title(self, populated_store, penal_document):
        found = populated_store.search("código penal")
        assert [d.id for d in found] == [penal_document.id]

    def test_category_filter_and_limit(self, populated_store):
        from execution.legal_assistant.models import DocumentCategory
        assert populated_store.search("artículo", category=DocumentCategory.CIVIL_CODE, limit=10)[0].category == DocumentCategory.CIVIL_CODE
        assert len(populated_store.search("artículo", limit=1)) == 1
        assert populated_store.search("artículo", limit=0) == []


# ---------------------------------------------------------------------------
# Queries and writings
# ---------------------------------------------------------------------------

class TestQueryStore:

    def test_save_and_find(self, query_store):
        from execution.legal_assistant.models import LegalQuery
        q = query_store.save(LegalQuery(question="¿Qué es la tutela?", user_id="u1"))
        assert query_store.find_by_id(q.id) is q
        assert query_store.find_by_user_id("u1") == [q]
        assert query_store.find_by_user_id("u2") == []

    def test_find_by_type(self, query_store):
        from execution.legal_assistant.models import LegalQuery, QueryType
        a = query_store.save(LegalQuery(question="a", query_type=QueryType.CASE_ANALYSIS))
        query_store.save(LegalQuery(question="b"))
        assert query_store.find_by_type(QueryType.CASE_ANALYSIS) == [a]

    def test_responses_by_request_id(self, query_store):
        from execution.legal_assistant.models import LegalQuery, QueryResponse
        q = query_store.save(LegalQuery(question="a"))
        r = query_store.save_response(QueryResponse(
            request_id=q.id, answer="x", sources=[], confidence=0.3, reasoning="",
        ))
        assert query_store.find_response_by_id(r.id) is r
        assert query_store.find_responses_by_request_id(q.id) == [r]
        assert query_store.find_responses_by_request_id("other") == []

    def test_delete(self, query_store):
        from execution.legal_assistant.models import LegalQuery
        q = query_store.save(LegalQuery(question="a"))
        assert query_store.delete(q.id) is True
        assert query_store.find_all() == []


class TestWritingStore:

    def test_find_by_type_and_user(self, writing_store):
        from execution.legal_assistant.models import LegalWriting, WritingDocumentType
        a = writing_store.save(LegalWriting(
            title="Contrato", prompt="p", document_type=WritingDocumentType.CONTRACT, user_id="u1",
        ))
        writing_store.save(LegalWriting(title="Otro", prompt="p"))
        assert writing_store.find_by_type(WritingDocumentType.CONTRACT) == [a]
        assert writing_store.find_by_user_id("u1") == [a]
        assert len(writing_store.find_all()) == 2
