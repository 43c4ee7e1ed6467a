from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.application import ApplicationStatus
from .analysis import Analysis

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Application(BaseModel):
    id: str
    full_name: str
    email: str
    resume_text: str
    resume_file_link: str
    file_hash: str
    status: ApplicationStatus
    created_at: datetime

    model_config = _camel


class ApplicationWithAnalysis(Application):
    analysis: Optional[Analysis] = None


class ApplicationListResponse(BaseModel):
    success: bool = True
    applications: List[ApplicationWithAnalysis]


class ApplicationResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    application: ApplicationWithAnalysis


# For callbacks and JSON updates on POST /applications
class ApplicationUpdate(BaseModel):
    application_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    resume_file_link: Optional[str] = None
    resume_text: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    analysis: Optional[Union[Dict[str, Any], str]] = None

    model_config = _camel


# One entry per uploaded file in a batch
class FileResult(BaseModel):
    success: bool
    outcome: Literal["success", "duplicate", "failure"]
    file_name: str
    application_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    error: Optional[str] = None

    model_config = _camel


class BatchResult(BaseModel):
    success: bool = True
    total_processed: int
    results: List[FileResult]

    model_config = _camel


class MessageResponse(BaseModel):
    success: bool = True
    message: str
