import logging

from ...exceptions import ExtractionError
from . import pdf_extractor
from .ocr_client import OcrClient

logger = logging.getLogger(__name__)


class ResumeTextExtractor:
    """
    Reads the local text layer first and only pays for OCR when the PDF
    is scanned (no text, or less than min_length characters).
    """

    def __init__(self, ocr: OcrClient, min_length: int = 20):
        self.ocr = ocr
        self.min_length = min_length

    async def extract(self, content: bytes, file_url: str) -> str:
        try:
            text = pdf_extractor.extract_text(content)
        except ExtractionError as e:
            logger.warning("Local PDF extraction failed, falling back to OCR: %s", e)
            text = ""

        if len(text.strip()) >= self.min_length:
            return text

        logger.info("PDF text layer too short (%d chars), running OCR on %s", len(text.strip()), file_url)
        ocr_text = await self.ocr.extract_text(file_url)
        return ocr_text if len(ocr_text.strip()) > len(text.strip()) else text
