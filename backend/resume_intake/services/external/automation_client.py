import logging

import httpx

from ...exceptions import AnalysisRequestError
from ...schemas.analysis import AnalysisResult
from .analysis_parser import parse_analysis

logger = logging.getLogger(__name__)


class AutomationClient:
    """Triggers the candidate analysis workflow through its webhook."""

    def __init__(self, http: httpx.AsyncClient, webhook_url: str, api_token: str, timeout: float = 120.0):
        self.http = http
        self.webhook_url = webhook_url
        self.api_token = api_token
        self.timeout = timeout

    async def request_analysis(
        self,
        application_id: str,
        full_name: str,
        resume_text: str,
        resume_file_link: str,
    ) -> AnalysisResult:
        body = {
            "applicationId": application_id,
            "fullName": full_name,
            "resumeText": resume_text,
            "resumeFileLink": resume_file_link,
        }
        try:
            resp = await self.http.post(
                self.webhook_url,
                json=body,
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AnalysisRequestError(f"Analysis webhook returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AnalysisRequestError(f"Analysis webhook unreachable: {e}") from e

        logger.info("Analysis webhook answered for application %s", application_id)
        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text
        return parse_analysis(payload)
