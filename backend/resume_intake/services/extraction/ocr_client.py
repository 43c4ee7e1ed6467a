import logging

import httpx

from ...exceptions import ExtractionError

logger = logging.getLogger(__name__)


class OcrClient:
    """
    Client for an OCR.space-style API: the PDF is fetched by the provider
    from its public URL and the parsed text of every page is returned.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, api_url: str):
        self.http = http
        self.api_key = api_key
        self.api_url = api_url

    async def extract_text(self, file_url: str) -> str:
        try:
            resp = await self.http.post(
                self.api_url,
                data={
                    "apikey": self.api_key,
                    "url": file_url,
                    "filetype": "PDF",
                    "isOverlayRequired": "false",
                    "scale": "true",
                },
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise ExtractionError(f"OCR API error: {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ExtractionError(f"OCR request failed: {e}") from e

        if payload.get("IsErroredOnProcessing"):
            message = payload.get("ErrorMessage") or "unknown error"
            if isinstance(message, list):
                message = "; ".join(str(m) for m in message)
            raise ExtractionError(f"OCR processing failed: {message}")

        pages = payload.get("ParsedResults") or []
        return " ".join((page.get("ParsedText") or "") for page in pages).strip()
