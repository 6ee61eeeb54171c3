"""
Text extraction for legal source files

Uses PyMuPDF for PDF extraction. Plain-text sources (scraped statutes saved
as .txt) are decoded directly. Extractors work on raw bytes so uploads and
files on disk go through the same path.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import ExtractionError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedText:
    """Full text of a source plus its page count."""
    text: str
    page_count: int = 0


class TextExtractor:
    """Base class for extractors. Subclasses implement extract_text()."""

    extensions: tuple[str, ...] = ()

    def extract_text(self, data: bytes) -> ExtractedText:
        raise NotImplementedError("Subclasses must implement extract_text()")


class PdfTextExtractor(TextExtractor):
    """
    Extracts text from PDF bytes with PyMuPDF.

    Pages are concatenated in order; the page count comes from the PDF itself.
    """

    extensions = (".pdf",)

    def extract_text(self, data: bytes) -> ExtractedText:
        if not data:
            raise ExtractionError("Empty PDF stream")

        import fitz  # PyMuPDF

        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                page_count = len(doc)
                text = "".join(page.get_text() for page in doc)
        except Exception as e:
            raise ExtractionError(f"Could not parse PDF: {e}") from e

        logger.debug(f"PyMuPDF extracted {len(text)} chars from {page_count} pages")
        return ExtractedText(text=text, page_count=page_count)


class PlainTextExtractor(TextExtractor):
    """Decodes UTF-8 text files. Page count is reported as 1."""

    extensions = (".txt",)

    def extract_text(self, data: bytes) -> ExtractedText:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"Text file is not valid UTF-8: {e}") from e
        return ExtractedText(text=text, page_count=1)


_EXTRACTORS: dict[str, TextExtractor] = {}
for _extractor in (PdfTextExtractor(), PlainTextExtractor()):
    for _ext in _extractor.extensions:
        _EXTRACTORS[_ext] = _extractor

SUPPORTED_EXTENSIONS = tuple(_EXTRACTORS)


def get_text_extractor(file_name: str) -> TextExtractor:
    """
    Pick the extractor for a file based on its extension.

    Raises:
        ExtractionError: if the extension is not supported
    """
    ext = Path(file_name).suffix.lower()
    extractor = _EXTRACTORS.get(ext)
    if extractor is None:
        raise ExtractionError(
            f"Unsupported file type '{ext or file_name}'. "
            f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return extractor
