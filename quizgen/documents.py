"""Plain-text extraction from uploaded documents.

Supports PDF (pypdf), DOCX (python-docx) and UTF-8 text files. Every extractor
returns cleaned text or raises ``DocumentExtractionError``.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from docx import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DocumentExtractionError(Exception):
    """Raised when a document cannot be turned into text."""


def clean_text(text: str) -> str:
    """Normalize line endings and whitespace in extracted text."""
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = text.replace("\t", " ")
    text = re.sub(r" {2,}", " ", text)
    return text.strip()


def _extract_pdf(path: Path) -> str:
    reader = PdfReader(str(path))
    pages = [page.extract_text() or "" for page in reader.pages]
    text = "\n".join(pages)
    if not text.strip():
        raise DocumentExtractionError(
            "PDF file appears to be empty or contains no readable text"
        )
    logger.debug(f"Extracted {len(reader.pages)} pages from {path.name}")
    return text


def _extract_docx(path: Path) -> str:
    document = Document(str(path))
    text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    if not text.strip():
        raise DocumentExtractionError(
            "DOCX file appears to be empty or contains no readable text"
        )
    return text


def _extract_txt(path: Path) -> str:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        raise DocumentExtractionError("TXT file appears to be empty")
    return text


_EXTRACTORS: Dict[str, Callable[[Path], str]] = {
    ".pdf": _extract_pdf,
    ".docx": _extract_docx,
    ".txt": _extract_txt,
}

SUPPORTED_EXTENSIONS = tuple(_EXTRACTORS)


def extract_text(path: PathLike, declared_type: Optional[str] = None) -> str:
    """Extract normalized plain text from a document.

    Args:
        path: Path to the document on disk
        declared_type: File extension to use instead of the path's suffix
            (e.g. ".pdf"), for uploads stored under generated names

    Returns:
        Cleaned document text

    Raises:
        DocumentExtractionError: If the type is unsupported or the document
            is empty or unreadable
    """
    path = Path(path)
    extension = (declared_type or path.suffix).lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"

    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        raise DocumentExtractionError(f"Unsupported file type: {extension or path.name}")

    try:
        text = extractor(path)
    except DocumentExtractionError:
        raise
    except Exception as e:
        logger.error(f"Error parsing document {path.name}: {e}")
        raise DocumentExtractionError(
            f"Failed to parse {extension.lstrip('.').upper()}: {e}"
        ) from e

    return clean_text(text)
