"""
Generation Engine - prompt assembly, LLM invocation and response parsing

Architecture:
    GenerationEngine
        answer_question()     -- answer prompt with up to N documents (1000 chars each)
        generate_reasoning()  -- reasoning prompt (500 chars per document)
        draft_document()      -- draft prompt -> DraftResult(content, sections)
        validate_document()   -- validation prompt -> ValidationReport

    parse_sections()          -- numbered / upper-case headers -> WritingSection list
    parse_validation_report() -- VALIDITY / ISSUES / SUGGESTIONS / ANALYSIS blocks

Provider failures are wrapped in GenerationError; there is no fallback text.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import AssistantConfig
from .errors import GenerationError
from .llm import TextGenerator
from .models import LegalDocument, ValidationReport, WritingDocumentType, WritingSection
from .prompts import LANGUAGE_NAMES, NO_CONTEXT, PROMPTS

logger = logging.getLogger(__name__)

ANSWER_CONTENT_CHARS = 1000
REASONING_CONTENT_CHARS = 500

_NUMBERED_HEADER = re.compile(r"^\d+\.")
_VALIDITY = re.compile(r"VALIDITY:\s*(.+)", re.IGNORECASE)
_ISSUES = re.compile(r"ISSUES:\s*([\s\S]*?)(?=SUGGESTIONS:|\Z)", re.IGNORECASE)
_SUGGESTIONS = re.compile(r"SUGGESTIONS:\s*([\s\S]*?)(?=ANALYSIS:|\Z)", re.IGNORECASE)
_ANALYSIS = re.compile(r"ANALYSIS:\s*([\s\S]*)", re.IGNORECASE)


# ============================================================================
# Parsers
# ============================================================================

def _is_section_header(line: str) -> bool:
    return bool(_NUMBERED_HEADER.match(line)) or (len(line) > 3 and line == line.upper())


def parse_sections(text: str) -> list[WritingSection]:
    """
    Split a drafted document into titled sections.

    A stripped line is a header when it starts with "<digits>." or is longer
    than 3 characters and entirely upper case. Lines before the first header
    are dropped, and headers with no body produce no section.
    """
    sections: list[WritingSection] = []
    title: Optional[str] = None
    body = ""

    def flush():
        if title and body:
            sections.append(WritingSection(
                title=title,
                content=body.strip(),
                order=len(sections) + 1,
            ))

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if _is_section_header(line):
            flush()
            title = line
            body = ""
        elif title is not None:
            body += raw_line + "\n"
    flush()
    return sections


def _block_lines(block: str) -> list[str]:
    return [line.strip() for line in block.split("\n") if line.strip()]


def _validity_is_valid(value: str, strict: bool) -> bool:
    if not strict:
        return "valid" in value.lower()
    normalized = value.strip().strip("[]").strip().rstrip(".!;:").strip()
    return normalized.lower() == "valid"


def parse_validation_report(text: str, strict: bool = False) -> ValidationReport:
    """
    Parse a model validation response.

    Args:
        text: Raw model output
        strict: When False, any VALIDITY line containing "valid" counts as valid
            (so "Invalid" does too). When True the value must be exactly "Valid".
    """
    validity = _VALIDITY.search(text)
    issues = _ISSUES.search(text)
    suggestions = _SUGGESTIONS.search(text)
    analysis = _ANALYSIS.search(text)

    return ValidationReport(
        is_valid=_validity_is_valid(validity.group(1), strict) if validity else False,
        issues=_block_lines(issues.group(1)) if issues else [],
        suggestions=_block_lines(suggestions.group(1)) if suggestions else [],
        analysis=analysis.group(1).strip() if analysis else text,
    )


@dataclass
class DraftResult:
    """Raw drafted text and its parsed sections."""
    content: str
    sections: list[WritingSection] = field(default_factory=list)


# ============================================================================
# Engine
# ============================================================================

class GenerationEngine:
    """
    Builds prompts from retrieved documents and parses model output.

    Args:
        generator: Text generation provider
        config: Language, jurisdiction, context size and validation mode
    """

    def __init__(self, generator: TextGenerator, config: Optional[AssistantConfig] = None):
        self.generator = generator
        self.config = config or AssistantConfig()

    @property
    def _language_name(self) -> str:
        return LANGUAGE_NAMES.get(self.config.language, self.config.language)

    def _render_context(self, documents: list[LegalDocument], max_chars: int) -> str:
        selected = documents[:self.config.max_context_documents]
        if not selected:
            return NO_CONTEXT
        return "\n\n".join(f"{d.title}: {d.content[:max_chars]}" for d in selected)

    def _generate(self, operation: str, prompt: str) -> str:
        try:
            text = self.generator.generate_text(prompt)
        except Exception as e:
            logger.error(f"Text generation failed during {operation}: {e}")
            raise GenerationError(f"{operation} failed: {e}") from e
        logger.debug(f"{operation}: prompt {len(prompt)} chars, response {len(text)} chars")
        return text

    def answer_question(
        self,
        question: str,
        documents: list[LegalDocument],
        context: Optional[str] = None,
    ) -> str:
        """Answer a question grounded on the given documents."""
        prompt = PROMPTS["answer"].format(
            jurisdiction=self.config.jurisdiction,
            context=self._render_context(documents, ANSWER_CONTENT_CHARS),
            additional_context=f"\nAdditional context: {context}\n" if context else "",
            question=question,
            language_name=self._language_name,
        )
        return self._generate("answer", prompt)

    def generate_reasoning(self, question: str, documents: list[LegalDocument]) -> str:
        prompt = PROMPTS["reasoning"].format(
            question=question,
            context=self._render_context(documents, REASONING_CONTENT_CHARS),
            language_name=self._language_name,
        )
        return self._generate("reasoning", prompt)

    def draft_document(
        self,
        title: str,
        prompt: str,
        documents: list[LegalDocument],
        document_type: WritingDocumentType = WritingDocumentType.OTHER,
        context: Optional[str] = None,
    ) -> DraftResult:
        """
        Draft a legal document and split it into sections.

        Returns:
            DraftResult with the full model text and parsed sections
        """
        full_prompt = PROMPTS["draft"].format(
            jurisdiction=self.config.jurisdiction,
            document_type=document_type.value,
            title=title,
            prompt=prompt,
            additional_context=f"Additional Context: {context}\n" if context else "",
            context=self._render_context(documents, ANSWER_CONTENT_CHARS),
            language_name=self._language_name,
        )
        content = self._generate("draft", full_prompt)
        sections = parse_sections(content)
        logger.info(f"Drafted '{title}': {len(content)} chars, {len(sections)} sections")
        return DraftResult(content=content, sections=sections)

    def validate_document(self, content: str) -> ValidationReport:
        prompt = PROMPTS["validate"].format(content=content)
        report = parse_validation_report(
            self._generate("validation", prompt),
            strict=self.config.strict_validity,
        )
        logger.info(
            f"Validation: valid={report.is_valid}, {len(report.issues)} issues, "
            f"{len(report.suggestions)} suggestions"
        )
        return report
