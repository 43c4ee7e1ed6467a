from datetime import datetime, timezone

from sqlalchemy.orm import Session

from ...exceptions import ApplicationNotFoundError
from ...models.analysis import AIAnalysis
from ...schemas.analysis import AnalysisResult


def get_analysis(db: Session, application_id: str) -> AIAnalysis:
    analysis = db.query(AIAnalysis).filter(AIAnalysis.application_id == application_id).first()
    if not analysis:
        raise ApplicationNotFoundError("Analysis not found")
    return analysis


def save_analysis(db: Session, application_id: str, result: AnalysisResult) -> AIAnalysis:
    """Create the analysis for an application, or replace the existing one."""
    analysis = db.query(AIAnalysis).filter(AIAnalysis.application_id == application_id).first()
    if analysis is None:
        analysis = AIAnalysis(application_id=application_id)
        db.add(analysis)

    analysis.summary = result.summary
    analysis.qualification_status = result.qualification_status
    analysis.fit_score = result.fit_score
    analysis.skills = list(result.skills)
    analysis.interview_questions = list(result.interview_questions)
    analysis.analyzed_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(analysis)
    return analysis


def delete_for_application(db: Session, application_id: str) -> int:
    deleted = (
        db.query(AIAnalysis)
        .filter(AIAnalysis.application_id == application_id)
        .delete(synchronize_session="fetch")
    )
    db.commit()
    return deleted
