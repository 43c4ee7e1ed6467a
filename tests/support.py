import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "backend") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "backend"))

import tests  # noqa: E402,F401  (sets the required environment)

from resume_intake.config import Settings  # noqa: E402
from resume_intake.database import create_db_engine, create_session_factory, init_db  # noqa: E402
from resume_intake.exceptions import AnalysisRequestError, StorageError  # noqa: E402
from resume_intake.schemas.analysis import AnalysisResult  # noqa: E402
from resume_intake.services.storage.file_storage import StoredFile, key_from_url  # noqa: E402
from resume_intake.utils.file_handler import IncomingFile  # noqa: E402

CALLBACK_TOKEN = "callback-secret"

RESUME_TEXT = (
    "Jane Doe\n"
    "Email: jane.doe @ company . com | Phone 555 0100\n"
    "Senior Python developer with eight years of backend experience.\n"
)


def make_settings(**overrides) -> Settings:
    values = {
        "_env_file": None,
        "DATABASE_URL": "sqlite://",
        "STORAGE_API_KEY": "test-storage-key",
        "OCR_API_KEY": "test-ocr-key",
        "AUTOMATION_WEBHOOK_URL": "https://automation.example.com/webhook",
        "AUTOMATION_API_TOKEN": "test-automation-token",
        "CALLBACK_API_TOKEN": CALLBACK_TOKEN,
    }
    values.update(overrides)
    return Settings(**values)


def make_session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return create_session_factory(engine)


def pdf_file(name: str = "jane_doe-resume.pdf", content: bytes = b"%PDF-1.4 jane doe") -> IncomingFile:
    return IncomingFile(filename=name, content_type="application/pdf", content=content)


def sample_result(**overrides) -> AnalysisResult:
    values = {
        "summary": "Strong backend candidate.",
        "qualification_status": "PASS",
        "fit_score": 82,
        "skills": ["Python", "FastAPI"],
        "interview_questions": ["Describe a service you scaled."],
    }
    values.update(overrides)
    return AnalysisResult(**values)


class FakeStorage:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: List[str] = []
        self.deleted: List[str] = []

    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredFile:
        if self.fail:
            raise StorageError("Upload failed: storage API error 503")
        self.uploads.append(filename)
        key = f"file{len(self.uploads)}"
        return StoredFile(key=key, url=f"https://files.example.com/f/{key}")

    async def delete_quietly(self, file_url: Optional[str]) -> bool:
        key = key_from_url(file_url)
        if not key:
            return False
        self.deleted.append(key)
        return True


class FakeExtractor:
    def __init__(self, text: str = RESUME_TEXT):
        self.text = text
        self.calls = 0

    async def extract(self, content: bytes, file_url: str) -> str:
        self.calls += 1
        return self.text


class FakeAutomation:
    def __init__(self, result: Optional[AnalysisResult] = None, fail: bool = False):
        self.result = result or sample_result()
        self.fail = fail
        self.calls: List[dict] = []

    async def request_analysis(self, application_id, full_name, resume_text, resume_file_link) -> AnalysisResult:
        self.calls.append(
            {
                "application_id": application_id,
                "full_name": full_name,
                "resume_text": resume_text,
                "resume_file_link": resume_file_link,
            }
        )
        if self.fail:
            raise AnalysisRequestError("Analysis webhook returned 500")
        return self.result
