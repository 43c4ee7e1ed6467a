from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class AIAnalysis(Base):
    __tablename__ = "ai_analyses"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(
        String(32),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    summary = Column(Text, nullable=False, default="")
    qualification_status = Column(String(4), nullable=False)  # 'PASS' | 'FAIL'
    fit_score = Column(Integer, nullable=False)  # 0-100
    skills = Column(JSON, nullable=False, default=list)
    interview_questions = Column(JSON, nullable=False, default=list)

    analyzed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    application = relationship("Application", back_populates="analysis")
