import logging

from sqlalchemy.orm import Session

from ...models.application import Application
from ...schemas.application import ApplicationUpdate
from ..external.analysis_parser import parse_analysis
from ..records import analysis_store, application_store

logger = logging.getLogger(__name__)


def apply_update(db: Session, update: ApplicationUpdate) -> Application:
    """
    Partial, last-write-wins update of an application from a callback or
    a JSON request. Fields that are omitted or empty are left unchanged.
    An unknown id raises ApplicationNotFoundError before anything is written;
    an unusable analysis payload raises AnalysisPayloadError, also before
    any write.
    """
    application = application_store.get_application(db, update.application_id)
    result = parse_analysis(update.analysis) if update.analysis else None

    application = application_store.update_fields(
        db,
        application,
        full_name=update.full_name,
        email=update.email,
        resume_file_link=update.resume_file_link,
        resume_text=update.resume_text,
        status=update.status,
    )
    if result is not None:
        analysis_store.save_analysis(db, application.id, result)
        db.refresh(application)

    logger.info("Updated application %s", application.id)
    return application
