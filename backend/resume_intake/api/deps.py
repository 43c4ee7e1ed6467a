import secrets
from typing import Iterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from ..config import Settings
from ..exceptions import UnauthorizedError
from ..services.external.automation_client import AutomationClient
from ..services.extraction.resume_text import ResumeTextExtractor
from ..services.ingestion.pipeline import IngestionPipeline
from ..services.storage.file_storage import StorageClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_storage(request: Request) -> StorageClient:
    return request.app.state.storage


def get_extractor(request: Request) -> ResumeTextExtractor:
    return request.app.state.extractor


def get_automation(request: Request) -> AutomationClient:
    return request.app.state.automation


def get_pipeline(
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    extractor: ResumeTextExtractor = Depends(get_extractor),
    automation: AutomationClient = Depends(get_automation),
    settings: Settings = Depends(get_settings),
) -> IngestionPipeline:
    return IngestionPipeline(
        db=db,
        storage=storage,
        extractor=extractor,
        automation=automation,
        min_text_length=settings.MIN_RESUME_TEXT_LENGTH,
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_callback_token(
    authorization: Optional[str] = Header(default=None),
    api_token: Optional[str] = Header(default=None, alias="api-token"),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    The automation workflow authenticates with the shared token, either as
    a bearer credential or in the legacy `api-token` header.
    """
    token = _bearer_token(authorization) or api_token
    if not token or not secrets.compare_digest(token.encode(), settings.callback_token.encode()):
        raise UnauthorizedError("Unauthorized")
