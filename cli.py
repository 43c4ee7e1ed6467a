# cli.py
import argparse
import asyncio
import json
import logging
from pathlib import Path

import httpx

from resume_intake.config import get_settings
from resume_intake.database import create_db_engine, create_session_factory, init_db
from resume_intake.services.external.automation_client import AutomationClient
from resume_intake.services.extraction import pdf_extractor
from resume_intake.services.extraction.ocr_client import OcrClient
from resume_intake.services.extraction.resume_text import ResumeTextExtractor
from resume_intake.services.extraction.text_normalizer import extract_email, normalize_resume_text
from resume_intake.services.ingestion.pipeline import IngestionPipeline
from resume_intake.services.records import application_store
from resume_intake.services.storage.file_storage import StorageClient
from resume_intake.utils.file_handler import read_local_file

# ---------------- Logger ----------------
logger = logging.getLogger("resume_intake_cli")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
logger.addHandler(handler)


def iter_pdfs(path: str):
    p = Path(path)
    if p.is_file():
        yield p
        return
    for f in sorted(p.rglob("*")):
        if f.is_file() and f.suffix.lower() == ".pdf":
            yield f


async def ingest(paths) -> list:
    settings = get_settings()
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        async with httpx.AsyncClient(timeout=30) as http:
            pipeline = IngestionPipeline(
                db=db,
                storage=StorageClient(
                    http,
                    api_key=settings.STORAGE_API_KEY,
                    base_url=settings.STORAGE_API_URL,
                    upload_path=settings.STORAGE_UPLOAD_PATH,
                    delete_path=settings.STORAGE_DELETE_PATH,
                ),
                extractor=ResumeTextExtractor(
                    OcrClient(http, api_key=settings.OCR_API_KEY, api_url=settings.OCR_API_URL),
                    min_length=settings.MIN_RESUME_TEXT_LENGTH,
                ),
                automation=AutomationClient(
                    http,
                    webhook_url=settings.AUTOMATION_WEBHOOK_URL,
                    api_token=settings.AUTOMATION_API_TOKEN,
                    timeout=settings.AUTOMATION_TIMEOUT_SECONDS,
                ),
                min_text_length=settings.MIN_RESUME_TEXT_LENGTH,
            )
            files = [await read_local_file(p) for p in paths]
            return await pipeline.ingest_batch(files)
    finally:
        db.close()
        engine.dispose()


def list_applications() -> list:
    settings = get_settings()
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        return [
            {
                "id": a.id,
                "fullName": a.full_name,
                "email": a.email,
                "status": a.status,
                "fitScore": a.analysis.fit_score if a.analysis else None,
            }
            for a in application_store.list_applications(db)
        ]
    finally:
        db.close()
        engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Resume intake command line tools")
    parser.add_argument("--mode", choices=["extract", "ingest", "list"], required=True)
    parser.add_argument("--input", help="PDF file or directory of PDFs")

    args = parser.parse_args()
    if args.mode in ("extract", "ingest") and not args.input:
        raise SystemExit("Provide --input")

    if args.mode == "extract":
        # Local only: no storage, OCR or webhook calls.
        content = Path(args.input).read_bytes()
        text = normalize_resume_text(pdf_extractor.extract_text(content))
        print(json.dumps({"email": extract_email(text), "text": text[:2000]}, indent=2))
    elif args.mode == "ingest":
        paths = list(iter_pdfs(args.input))
        if not paths:
            raise SystemExit(f"No PDF files found under {args.input}")
        logger.info("Found %d files to process.", len(paths))
        for result in asyncio.run(ingest(paths)):
            status = "OK " if result.success else result.outcome.upper()
            logger.info("%s %s %s", status, result.file_name, result.error or result.application_id)
    elif args.mode == "list":
        print(json.dumps(list_applications(), indent=2))


if __name__ == "__main__":
    main()
