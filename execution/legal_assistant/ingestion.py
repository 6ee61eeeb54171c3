"""
Document Ingestion - turns source files into LegalDocument records

Resolves sources under the assets root, extracts their text, derives a title,
summary and tags, and returns the document for the caller to persist.
Batch ingestion isolates failures per item and keeps input order.
"""

import re
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .config import AssistantConfig
from .document_parser import SUPPORTED_EXTENSIONS, TextExtractor, get_text_extractor
from .errors import NotFoundError
from .models import DocumentCategory, DocumentMetadata, LegalDocument, new_id, parse_enum

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
SUMMARY_MAX_LENGTH = 200

# Asset subdirectory -> category used by auto-indexing
DIRECTORY_CATEGORIES = {
    "penal-code": DocumentCategory.PENAL_CODE,
    "civil-code": DocumentCategory.CIVIL_CODE,
    "commercial-code": DocumentCategory.COMMERCIAL_CODE,
    "case-law": DocumentCategory.CASE_LAW,
    "legal-opinion": DocumentCategory.LEGAL_OPINION,
    "constitution": DocumentCategory.OTHER,
    "laws": DocumentCategory.OTHER,
    "doctrine": DocumentCategory.LEGAL_OPINION,
}


def extract_title(text: str, file_name: str) -> str:
    """First non-blank line if short enough, else the file name without extension."""
    for line in text.split("\n"):
        line = line.strip()
        if line:
            if len(line) < TITLE_MAX_LENGTH:
                return line
            break
    return Path(file_name).stem


def generate_summary(text: str) -> str:
    """Whitespace-normalized prefix of the text, '...' appended when truncated."""
    clean = re.sub(r"\s+", " ", text).strip()
    if len(clean) > SUMMARY_MAX_LENGTH:
        return clean[:SUMMARY_MAX_LENGTH] + "..."
    return clean


@dataclass
class IngestionResult:
    """Outcome of ingesting one source in a batch."""
    source: str
    success: bool
    document: Optional[LegalDocument] = None
    message: str = ""


class DocumentIngestor:
    """
    Builds LegalDocument records from source files.

    Args:
        config: Assets root plus language/jurisdiction defaults
        extractor: Optional extractor used for every source. When omitted the
            extractor is chosen from the file extension.
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        extractor: Optional[TextExtractor] = None,
    ):
        self.config = config or AssistantConfig()
        self._extractor = extractor

    @property
    def assets_root(self) -> Path:
        return Path(self.config.assets_path)

    def resolve(self, source_ref: str, root: Optional[Union[str, Path]] = None) -> Path:
        """
        Resolve a source reference relative to the assets root.

        Args:
            source_ref: Path relative to the root
            root: Directory to resolve against. Defaults to the assets root.

        Raises:
            NotFoundError: if the file does not exist or lies outside the root
        """
        base = (Path(root) if root is not None else self.assets_root).resolve()
        path = (base / source_ref).resolve()
        if not path.is_relative_to(base):
            raise NotFoundError(f"File not found: {source_ref}", resource=source_ref)
        if not path.is_file():
            raise NotFoundError(f"File not found: {path}", resource=source_ref)
        return path

    def ingest(
        self,
        source_ref: str,
        category: Union[DocumentCategory, str],
        root: Optional[Union[str, Path]] = None,
    ) -> LegalDocument:
        """
        Ingest a file under the assets root.

        Args:
            source_ref: Path relative to the assets root
            category: Declared category (enum member or its string value)
            root: Directory to resolve against instead of the assets root

        Returns:
            The assembled LegalDocument (not yet persisted)

        Raises:
            NotFoundError: source does not resolve
            ExtractionError: source cannot be parsed
            ValidationError: unknown category
        """
        category = parse_enum(DocumentCategory, category, "category")
        path = self.resolve(source_ref, root)
        logger.info(f"Ingesting document: {source_ref} ({category.value})")
        return self.ingest_bytes(
            path.read_bytes(), file_name=path.name, category=category, source=source_ref,
        )

    def ingest_bytes(
        self,
        data: bytes,
        file_name: str,
        category: Union[DocumentCategory, str],
        source: Optional[str] = None,
    ) -> LegalDocument:
        """Ingest in-memory bytes, e.g. an uploaded file."""
        category = parse_enum(DocumentCategory, category, "category")
        extractor = self._extractor or get_text_extractor(file_name)
        extracted = extractor.extract_text(data)

        metadata = DocumentMetadata(
            file_name=Path(file_name).name,
            file_size_bytes=len(data),
            page_count=extracted.page_count,
            language=self.config.language,
            jurisdiction=self.config.jurisdiction,
            tags={category.value.lower()},
            summary=generate_summary(extracted.text),
        )

        now = datetime.now()
        document = LegalDocument(
            id=new_id(),
            title=extract_title(extracted.text, file_name),
            content=extracted.text,
            source=source or file_name,
            category=category,
            metadata=metadata,
            created_at=now,
            updated_at=now,
        )
        logger.info(
            f"Extracted '{document.title}': {len(document.content)} chars, "
            f"{extracted.page_count} pages"
        )
        return document

    def ingest_batch(
        self,
        items: list[tuple[str, Union[DocumentCategory, str]]],
        max_workers: Optional[int] = None,
        root: Optional[Union[str, Path]] = None,
    ) -> list[IngestionResult]:
        """
        Ingest several sources independently.

        A failing item is reported in its IngestionResult and never aborts
        the others. Results follow input order. Sources resolve against root
        when given, else the assets root.
        """
        workers = max_workers or self.config.ingest_workers
        if workers <= 1 or len(items) <= 1:
            return [self._ingest_one(ref, cat, root) for ref, cat in items]

        with ThreadPoolExecutor(max_workers=min(workers, len(items))) as executor:
            return list(executor.map(lambda item: self._ingest_one(*item, root), items))

    def _ingest_one(self, source_ref: str, category, root=None) -> IngestionResult:
        try:
            document = self.ingest(source_ref, category, root)
        except Exception as e:
            logger.error(f"Failed to index {source_ref}: {e}")
            return IngestionResult(source=source_ref, success=False, message=str(e))
        return IngestionResult(
            source=source_ref,
            success=True,
            document=document,
            message=f"Document \"{document.title}\" indexed successfully",
        )

    def discover_sources(
        self,
        root: Optional[Union[str, Path]] = None,
    ) -> list[tuple[str, DocumentCategory]]:
        """
        List ingestable files under each first-level subdirectory of root.

        The subdirectory name selects the category (see DIRECTORY_CATEGORIES);
        unknown directories map to OTHER. Paths are relative to root.
        """
        root_path = Path(root) if root is not None else self.assets_root
        if not root_path.is_dir():
            logger.warning(f"Assets folder not found: {root_path}")
            return []

        sources = []
        for subdir in sorted(p for p in root_path.iterdir() if p.is_dir()):
            category = DIRECTORY_CATEGORIES.get(subdir.name, DocumentCategory.OTHER)
            files = sorted(
                f for f in subdir.iterdir()
                if f.is_file() and f.suffix.lower() in SUPPORTED_EXTENSIONS
            )
            logger.info(f"Scanning {subdir.name} ({category.value}): {len(files)} files")
            for f in files:
                sources.append((f"{subdir.name}/{f.name}", category))
        return sources
