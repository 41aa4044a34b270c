"""Text extraction for uploaded CVs and job descriptions (PDF, DOCX, plain text).

The matching engine only ever sees the text returned from here.
"""

import io
import logging
from pathlib import Path

import pdfplumber
from docx import Document

from services.errors import DocumentParseError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

PDF = "pdf"
DOCX = "docx"
TEXT = "text"

EXTENSION_FORMATS: dict[str, str] = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TEXT,
    ".text": TEXT,
    ".md": TEXT,
}

CONTENT_TYPE_FORMATS: dict[str, str] = {
    "application/pdf": PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DOCX,
    "text/plain": TEXT,
    "text/markdown": TEXT,
}


def detect_format(filename: str | None, content_type: str | None = None) -> str:
    """Resolve the document format from the file extension, then the content type."""
    suffix = Path(filename or "").suffix.lower()
    if suffix in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[suffix]

    if content_type:
        base_type = content_type.split(";")[0].strip().lower()
        if base_type in CONTENT_TYPE_FORMATS:
            return CONTENT_TYPE_FORMATS[base_type]

    raise UnsupportedDocumentError(
        f"Unsupported file type: {filename or content_type or 'unknown'}. "
        "Upload a PDF, DOCX or plain text file"
    )


def extract_text_pdf(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    if pdf_bytes[:4] != b"%PDF":
        raise DocumentParseError("Invalid PDF format")
    try:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.warning("PDF parsing failed: %s", e)
        raise DocumentParseError(f"Failed to parse PDF: {e}") from e
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all paragraph text from a DOCX file."""
    try:
        doc = Document(io.BytesIO(docx_bytes))
    except Exception as e:
        logger.warning("DOCX parsing failed: %s", e)
        raise DocumentParseError(f"Failed to parse DOCX: {e}") from e
    return "\n".join(p.text for p in doc.paragraphs).strip()


def extract_text_plain(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="replace").strip()


_EXTRACTORS = {
    PDF: extract_text_pdf,
    DOCX: extract_text_docx,
    TEXT: extract_text_plain,
}


def extract_text(data: bytes, filename: str | None, content_type: str | None = None) -> str:
    """Convert uploaded file bytes to plain text."""
    fmt = detect_format(filename, content_type)
    text = _EXTRACTORS[fmt](data)
    logger.debug("Extracted %d chars from %s (%s)", len(text), filename, fmt)
    return text
