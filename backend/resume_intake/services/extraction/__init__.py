from .ocr_client import OcrClient
from .resume_text import ResumeTextExtractor
from .text_normalizer import NO_EMAIL_FOUND, extract_email, normalize_resume_text

__all__ = [
    "OcrClient",
    "ResumeTextExtractor",
    "NO_EMAIL_FOUND",
    "extract_email",
    "normalize_resume_text",
]
