import hashlib
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ...models.application import Application
from ..records import application_store


def compute_file_hash(content: bytes) -> str:
    """sha256 hex digest of the raw file bytes (64 characters)."""
    return hashlib.sha256(content).hexdigest()


def find_duplicate(db: Session, content: bytes) -> Tuple[str, Optional[Application]]:
    """
    Return the content hash and the application already holding it, if any.
    Equal digests are treated as identical files.
    """
    file_hash = compute_file_hash(content)
    return file_hash, application_store.find_by_hash(db, file_hash)
