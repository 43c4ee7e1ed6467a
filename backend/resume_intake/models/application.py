import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class ApplicationStatus(str, enum.Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    ANALYZED = "analyzed"
    FAILED = "failed"
    COMPLETED = "completed"  # Set by reviewers once an analyzed application is handled


def _new_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(32), primary_key=True, default=_new_id)

    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, default="")
    resume_text = Column(Text, nullable=False, default="")
    resume_file_link = Column(String(1024), nullable=False)  # Public URL in file storage
    file_hash = Column(String(64), nullable=False, unique=True, index=True)  # sha256 hex digest

    status = Column(String(20), nullable=False, default=ApplicationStatus.UPLOADED.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, index=True)

    analysis = relationship(
        "AIAnalysis",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
    )
