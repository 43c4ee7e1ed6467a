import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from ..exceptions import AnalysisPayloadError, InvalidUploadError
from ..schemas.analysis import AnalysisResponse
from ..schemas.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpdate,
    ApplicationWithAnalysis,
    BatchResult,
    MessageResponse,
)
from ..services.ingestion import delete_application, apply_update
from ..services.ingestion.pipeline import IngestionPipeline
from ..services.records import analysis_store, application_store
from ..services.storage.file_storage import StorageClient
from ..utils.file_handler import read_upload_file
from .deps import get_db, get_pipeline, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

RESUME_FIELD = "resume"


@router.get("/applications", response_model=ApplicationListResponse)
def list_applications_endpoint(db: Session = Depends(get_db)):
    """
    All applications, newest first, each with its analysis when one exists.
    """
    return {"success": True, "applications": application_store.list_applications(db)}


@router.post("/applications")
async def ingest_applications_endpoint(
    request: Request,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """
    multipart/form-data: ingest every file sent under the `resume` field and
    report one result per file.
    application/json: partial update of an existing application.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith("application/json"):
        return _update_from_json(pipeline.db, await _read_json(request))

    if not content_type.startswith("multipart/form-data"):
        raise InvalidUploadError("Send resumes as multipart/form-data or an update as JSON", status_code=415)

    form = await request.form()
    uploads = [item for item in form.getlist(RESUME_FIELD) if isinstance(item, UploadFile)]
    if not uploads:
        raise InvalidUploadError("No resumes uploaded")

    try:
        incoming = [await read_upload_file(upload) for upload in uploads]
        results = await pipeline.ingest_batch(incoming)
    except Exception as e:
        logger.exception("Batch processing failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Batch processing failed", "details": str(e)},
        )

    batch = BatchResult(success=True, total_processed=len(results), results=results)
    return batch.model_dump(mode="json", by_alias=True)


async def _read_json(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidUploadError("Request body is not valid JSON") from e
    if not isinstance(body, dict):
        raise InvalidUploadError("Request body must be a JSON object")
    return body


def _update_from_json(db: Session, body: dict) -> dict:
    try:
        update = ApplicationUpdate.model_validate(body)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidUploadError(f"Invalid update: {fields}", status_code=422) from e
    try:
        application = apply_update(db, update)
    except AnalysisPayloadError as e:
        raise InvalidUploadError(str(e), status_code=422) from e
    response = ApplicationResponse(
        application=ApplicationWithAnalysis.model_validate(application),
        message="Application updated successfully",
    )
    return response.model_dump(mode="json", by_alias=True)


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application_endpoint(application_id: str, db: Session = Depends(get_db)):
    return {"success": True, "application": application_store.get_application(db, application_id)}


@router.get("/applications/{application_id}/analysis", response_model=AnalysisResponse)
def get_analysis_endpoint(application_id: str, db: Session = Depends(get_db)):
    return {"success": True, "analysis": analysis_store.get_analysis(db, application_id)}


@router.delete("/applications/{application_id}", response_model=MessageResponse)
async def delete_application_endpoint(
    application_id: str,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
):
    """
    Delete an application together with its analysis and its stored file.
    """
    await delete_application(db, storage, application_id)
    return {"success": True, "message": "Deleted successfully"}
