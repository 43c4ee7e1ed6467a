import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..exceptions import AnalysisPayloadError, InvalidUploadError
from ..schemas.application import ApplicationResponse, ApplicationUpdate, MessageResponse
from ..services.ingestion import apply_update
from .deps import get_db, verify_callback_token

logger = logging.getLogger(__name__)

router = APIRouter()

CALLBACK_PATH = "/integrations/automation/callback"


@router.get(CALLBACK_PATH, response_model=MessageResponse)
def callback_ready_endpoint():
    return {"success": True, "message": "Callback endpoint is ready"}


@router.post(CALLBACK_PATH, response_model=ApplicationResponse, dependencies=[Depends(verify_callback_token)])
def automation_callback_endpoint(update: ApplicationUpdate, db: Session = Depends(get_db)):
    """
    Asynchronous results from the automation workflow: fields, status and
    analysis for one application.
    """
    try:
        application = apply_update(db, update)
    except AnalysisPayloadError as e:
        raise InvalidUploadError(str(e), status_code=422) from e
    logger.info("Callback applied to application %s", application.id)
    return {"success": True, "message": "Application updated successfully", "application": application}
