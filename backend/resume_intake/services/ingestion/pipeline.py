import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import DuplicateResumeError, ExtractionError, IntakeError, InvalidUploadError
from ...models.application import Application, ApplicationStatus
from ...schemas.application import FileResult
from ...utils.file_handler import IncomingFile, applicant_name_from_filename, is_pdf
from ..external.automation_client import AutomationClient
from ..extraction.resume_text import ResumeTextExtractor
from ..extraction.text_normalizer import extract_email, normalize_resume_text
from ..records import analysis_store, application_store
from ..storage.file_storage import StorageClient
from .duplicate_detector import find_duplicate

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Turns uploaded PDFs into stored, text-extracted, analyzed applications.

    Per file: type check -> hash/duplicate check -> storage upload ->
    record (uploaded) -> processing -> text extraction -> normalization ->
    analysis webhook -> analysis record -> analyzed.
    Nothing before the record exists is persisted; any failure after it
    marks the record failed. Files are processed one after another and a
    failing file never stops the rest of the batch.
    """

    def __init__(
        self,
        db: Session,
        storage: StorageClient,
        extractor: ResumeTextExtractor,
        automation: AutomationClient,
        min_text_length: int = 20,
    ):
        self.db = db
        self.storage = storage
        self.extractor = extractor
        self.automation = automation
        self.min_text_length = min_text_length

    async def ingest_batch(self, files: Iterable[IncomingFile]) -> List[FileResult]:
        results = []
        for incoming in files:
            result = await self.ingest_file(incoming)
            logger.info("Ingested %s: %s", incoming.filename, result.outcome)
            results.append(result)
        return results

    async def ingest_file(self, incoming: IncomingFile) -> FileResult:
        try:
            application = await self._store(incoming)
        except DuplicateResumeError as e:
            return FileResult(
                success=False,
                outcome="duplicate",
                file_name=incoming.filename,
                application_id=e.application_id,
                error=str(e),
            )
        except IntakeError as e:
            logger.warning("Skipping %s: %s", incoming.filename, e)
            return self._failure(incoming, str(e))
        except Exception as e:
            logger.exception("Could not store %s", incoming.filename)
            return self._failure(incoming, str(e))

        try:
            application = await self._process(application, incoming)
        except Exception as e:
            logger.exception("Processing failed for %s (application %s)", incoming.filename, application.id)
            self._mark_failed(application)
            return self._failure(incoming, str(e), application)

        return FileResult(
            success=True,
            outcome="success",
            file_name=incoming.filename,
            application_id=application.id,
            full_name=application.full_name,
            email=application.email,
            status=application.status,
        )

    async def _store(self, incoming: IncomingFile) -> Application:
        # 1. Validate file type
        if not is_pdf(incoming.content_type):
            raise InvalidUploadError(f"Invalid file type '{incoming.content_type or 'unknown'}'. Only PDF resumes are accepted")
        if not incoming.content:
            raise InvalidUploadError("Uploaded file is empty")

        # 2. Duplicate check, strictly before anything leaves the process
        file_hash, existing = find_duplicate(self.db, incoming.content)
        if existing:
            raise DuplicateResumeError("Duplicate resume: identical file already submitted", application_id=existing.id)

        # 3. Upload to file storage
        stored = await self.storage.upload(incoming.filename, incoming.content, incoming.content_type)

        # 4-5. Create the record
        try:
            return application_store.create_application(
                self.db,
                full_name=applicant_name_from_filename(incoming.filename),
                file_hash=file_hash,
                resume_file_link=stored.url,
            )
        except DuplicateResumeError:
            # Lost an insert race against an identical upload; drop our copy.
            await self.storage.delete_quietly(stored.url)
            raise

    async def _process(self, application: Application, incoming: IncomingFile) -> Application:
        application_store.set_status(self.db, application, ApplicationStatus.PROCESSING)

        # 6. Extract text
        raw_text = await self.extractor.extract(incoming.content, application.resume_file_link)
        if len(raw_text.strip()) < self.min_text_length:
            raise ExtractionError("No usable text could be extracted from the PDF")

        # 7. Normalize and persist
        cleaned = normalize_resume_text(raw_text)
        application = application_store.update_fields(
            self.db,
            application,
            resume_text=cleaned,
            email=extract_email(cleaned),
        )

        # 8-9. Request and parse the analysis
        result = await self.automation.request_analysis(
            application_id=application.id,
            full_name=application.full_name,
            resume_text=application.resume_text,
            resume_file_link=application.resume_file_link,
        )

        # 10. Persist it
        analysis_store.save_analysis(self.db, application.id, result)
        return application_store.set_status(self.db, application, ApplicationStatus.ANALYZED)

    def _mark_failed(self, application: Application) -> None:
        self.db.rollback()
        try:
            application_store.set_status(self.db, application, ApplicationStatus.FAILED)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not mark application %s as failed", application.id)

    @staticmethod
    def _failure(incoming: IncomingFile, error: str, application: Optional[Application] = None) -> FileResult:
        return FileResult(
            success=False,
            outcome="failure",
            file_name=incoming.filename,
            application_id=application.id if application else None,
            full_name=application.full_name if application else None,
            status=application.status if application else None,
            error=error,
        )
