import logging
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ...exceptions import ApplicationNotFoundError, DuplicateResumeError
from ...models.application import Application, ApplicationStatus

logger = logging.getLogger(__name__)


def find_by_hash(db: Session, file_hash: str) -> Optional[Application]:
    return db.query(Application).filter(Application.file_hash == file_hash).first()


def get_application(db: Session, application_id: str) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise ApplicationNotFoundError("Application not found")
    return application


def list_applications(db: Session) -> List[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.analysis))
        .order_by(Application.created_at.desc())
        .all()
    )


def count_applications(db: Session) -> int:
    return db.query(Application).count()


def create_application(
    db: Session,
    *,
    full_name: str,
    file_hash: str,
    resume_file_link: str,
) -> Application:
    """
    Insert a fresh record in the `uploaded` state. The unique hash column
    decides races between concurrent identical uploads: the loser gets a
    DuplicateResumeError, not a database error.
    """
    application = Application(
        full_name=full_name,
        email="",
        resume_text="",
        resume_file_link=resume_file_link,
        file_hash=file_hash,
        status=ApplicationStatus.UPLOADED.value,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        existing = find_by_hash(db, file_hash)
        raise DuplicateResumeError(
            "Duplicate resume: identical file already submitted",
            application_id=existing.id if existing else None,
        ) from e
    db.refresh(application)
    return application


def set_status(db: Session, application: Application, status: ApplicationStatus) -> Application:
    application.status = status.value
    db.commit()
    db.refresh(application)
    return application


def update_fields(db: Session, application: Application, **fields: Any) -> Application:
    """Apply only truthy values; omitted or empty fields keep their stored value."""
    for name, value in fields.items():
        if not value:
            continue
        if isinstance(value, ApplicationStatus):
            value = value.value
        setattr(application, name, value)
    db.commit()
    db.refresh(application)
    return application


def delete_application(db: Session, application: Application) -> None:
    db.delete(application)
    db.commit()
