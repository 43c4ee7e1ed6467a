from datetime import datetime
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class AnalysisResult(BaseModel):
    """
    Candidate evaluation produced by the automation workflow. Accepts both
    snake_case and camelCase keys because the workflow has used both.
    """
    summary: str = ""
    qualification_status: Literal["PASS", "FAIL"]
    fit_score: int = Field(ge=0, le=100)
    skills: List[str] = []
    interview_questions: List[str] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("qualification_status", mode="before")
    @classmethod
    def _upper_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("fit_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().rstrip("%").strip()
            try:
                value = float(value)
            except ValueError:
                return value
        if isinstance(value, float):
            return round(value)
        return value

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("interview_questions", mode="before")
    @classmethod
    def _split_questions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [line.strip() for line in value.splitlines() if line.strip()]
        return value


# Base response model
class Analysis(BaseModel):
    application_id: str
    summary: str
    qualification_status: str
    fit_score: int
    skills: List[str]
    interview_questions: List[str]
    analyzed_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AnalysisResponse(BaseModel):
    success: bool = True
    analysis: Analysis
