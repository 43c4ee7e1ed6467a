import re
from dataclasses import dataclass
from pathlib import Path

import aiofiles
from fastapi import UploadFile

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
UNKNOWN_APPLICANT = "Unknown Applicant"

_SEPARATORS = re.compile(r"[_\-]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class IncomingFile:
    """An uploaded file held in memory for the ingestion pipeline."""
    filename: str
    content_type: str
    content: bytes


def is_pdf(content_type: str) -> bool:
    return (content_type or "").split(";")[0].strip().lower() in PDF_CONTENT_TYPES


def applicant_name_from_filename(filename: str) -> str:
    """
    "jane_doe-resume.pdf" -> "jane doe resume". Files named only by an
    extension or by separators fall back to UNKNOWN_APPLICANT.
    """
    stem = re.sub(r"\.[^/.]+$", "", Path(filename or "").name)
    name = _WHITESPACE.sub(" ", _SEPARATORS.sub(" ", stem)).strip()
    return name or UNKNOWN_APPLICANT


async def read_upload_file(file: UploadFile) -> IncomingFile:
    chunks = []
    while chunk := await file.read(1024 * 1024):  # Read in 1MB chunks
        chunks.append(chunk)
    return IncomingFile(
        filename=file.filename or "resume.pdf",
        content_type=file.content_type or "",
        content=b"".join(chunks),
    )


async def read_local_file(path: Path) -> IncomingFile:
    """Used by the CLI to feed local PDFs into the same pipeline."""
    async with aiofiles.open(path, "rb") as in_file:
        content = await in_file.read()
    content_type = "application/pdf" if path.suffix.lower() == ".pdf" else "application/octet-stream"
    return IncomingFile(filename=path.name, content_type=content_type, content=content)
