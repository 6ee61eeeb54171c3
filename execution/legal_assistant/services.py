"""
Query and Writing orchestration

Each service runs retrieval to completion before any generation call and
raises on failure; the use case layer turns failures into OperationResults.
"""

import logging
from typing import Optional

from .config import AssistantConfig
from .generation import GenerationEngine
from .models import (
    LegalQuery,
    LegalWriting,
    QueryResponse,
    ValidationReport,
    WritingResponse,
)
from .retriever import Retriever, calculate_confidence

logger = logging.getLogger(__name__)


class LegalQueryService:
    """Answers legal questions from retrieved documents."""

    def __init__(
        self,
        retriever: Retriever,
        generation: GenerationEngine,
        config: Optional[AssistantConfig] = None,
    ):
        self.retriever = retriever
        self.generation = generation
        self.config = config or AssistantConfig()

    def process_query(self, query: LegalQuery) -> QueryResponse:
        """
        Retrieve, answer, score and explain a legal question.

        Raises:
            GenerationError: if the provider fails
        """
        retrieved = self.retriever.retrieve(query.question, limit=self.config.retrieval_limit)
        documents = [r.document for r in retrieved]

        answer = self.generation.answer_question(query.question, documents, query.context)
        confidence = calculate_confidence(documents, query.question)
        reasoning = self.generation.generate_reasoning(query.question, documents)

        response = QueryResponse(
            request_id=query.id,
            answer=answer,
            sources=[r.to_reference() for r in retrieved],
            confidence=confidence,
            reasoning=reasoning,
        )
        logger.info(
            f"Query {query.id} answered with {len(documents)} sources "
            f"(confidence {confidence:.2f})"
        )
        return response


class LegalWritingService:
    """Drafts and validates legal documents."""

    def __init__(
        self,
        retriever: Retriever,
        generation: GenerationEngine,
        config: Optional[AssistantConfig] = None,
    ):
        self.retriever = retriever
        self.generation = generation
        self.config = config or AssistantConfig()

    def generate_document(self, writing: LegalWriting) -> WritingResponse:
        retrieved = self.retriever.retrieve(writing.prompt, limit=self.config.retrieval_limit)
        documents = [r.document for r in retrieved]

        draft = self.generation.draft_document(
            writing.title,
            writing.prompt,
            documents,
            writing.document_type,
            writing.context,
        )

        response = WritingResponse(
            request_id=writing.id,
            title=writing.title,
            content=draft.content,
            sections=draft.sections,
            sources=[r.to_reference() for r in retrieved],
            confidence=calculate_confidence(documents, writing.prompt),
        )
        logger.info(
            f"Writing {writing.id} drafted: {len(draft.sections)} sections, "
            f"{len(documents)} sources"
        )
        return response

    def validate_document(self, content: str) -> ValidationReport:
        return self.generation.validate_document(content)
