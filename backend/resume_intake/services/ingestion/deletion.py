import logging

from sqlalchemy.orm import Session

from ..records import analysis_store, application_store
from ..storage.file_storage import StorageClient

logger = logging.getLogger(__name__)


async def delete_application(db: Session, storage: StorageClient, application_id: str) -> None:
    """
    Remove an application, its analysis and its stored file. The lookup
    runs first so an unknown id has no side effects; the remote delete is
    best-effort.
    """
    application = application_store.get_application(db, application_id)

    await storage.delete_quietly(application.resume_file_link)

    deleted = analysis_store.delete_for_application(db, application_id)
    application_store.delete_application(db, application)
    logger.info("Deleted application %s (%d analysis records)", application_id, deleted)
