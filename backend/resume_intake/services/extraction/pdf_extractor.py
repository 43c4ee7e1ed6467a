import io
import logging

import fitz  # PyMuPDF
from pdfminer.high_level import extract_text as pdfminer_extract_text

from ...exceptions import ExtractionError

logger = logging.getLogger(__name__)


def extract_text(content: bytes) -> str:
    """
    Primary extraction function.
    Reads the PDF text layer with PyMuPDF and falls back to pdfminer.six
    when PyMuPDF cannot open the document.
    """
    try:
        return extract_with_pymupdf(content)
    except RuntimeError as e:
        logger.warning("PyMuPDF could not read the PDF (%s); trying pdfminer.six", e)
    return extract_with_pdfminer(content)


def extract_with_pymupdf(content: bytes) -> str:
    with fitz.open(stream=content, filetype="pdf") as doc:
        return " ".join(page.get_text("text") for page in doc).strip()


def extract_with_pdfminer(content: bytes) -> str:
    try:
        return (pdfminer_extract_text(io.BytesIO(content)) or "").strip()
    except Exception as e:
        raise ExtractionError(f"Could not read PDF text: {e}") from e
