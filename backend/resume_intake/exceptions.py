from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing or invalid."""


class IntakeError(RuntimeError):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class InvalidUploadError(IntakeError):
    status_code = 400


class DuplicateResumeError(IntakeError):
    status_code = 409

    def __init__(self, message: str, application_id: Optional[str] = None):
        super().__init__(message)
        self.application_id = application_id


class ApplicationNotFoundError(IntakeError):
    status_code = 404


class UnauthorizedError(IntakeError):
    status_code = 401


class UpstreamError(IntakeError):
    """A remote collaborator (storage, OCR, automation) failed or misbehaved."""

    status_code = 502


class StorageError(UpstreamError):
    pass


class ExtractionError(UpstreamError):
    pass


class AnalysisRequestError(UpstreamError):
    pass


class AnalysisPayloadError(UpstreamError):
    pass
