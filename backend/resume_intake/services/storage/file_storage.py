import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from ...exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    key: str
    url: str


def key_from_url(file_url: Optional[str]) -> Optional[str]:
    """The storage key is the last path segment of the public file URL."""
    if not file_url:
        return None
    path = urlparse(file_url).path.rstrip("/")
    key = path.split("/")[-1]
    return key or None


def _first_file(payload: Any) -> dict:
    items = payload.get("data", payload) if isinstance(payload, dict) else payload
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        raise StorageError("Upload failed: storage returned no file")
    item = items[0]
    if isinstance(item.get("data"), dict):
        item = item["data"]
    if item.get("error"):
        raise StorageError(f"Upload failed: {item['error']}")
    return item


class StorageClient:
    """Upload/delete-by-key client for the hosted file storage."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str,
        upload_path: str = "/v6/uploadFiles",
        delete_path: str = "/v6/deleteFiles",
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.upload_path = upload_path
        self.delete_path = delete_path

    @property
    def _headers(self) -> dict:
        return {"X-Uploadthing-Api-Key": self.api_key}

    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredFile:
        try:
            resp = await self.http.post(
                f"{self.base_url}{self.upload_path}",
                headers=self._headers,
                files={"files": (filename, content, content_type)},
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise StorageError(f"Upload failed: storage API error {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise StorageError(f"Upload failed: {e}") from e

        item = _first_file(payload)
        url = item.get("ufsUrl") or item.get("url")
        if not url:
            raise StorageError("Upload failed: storage returned no file URL")
        key = item.get("key") or key_from_url(url)
        return StoredFile(key=key, url=url)

    async def delete(self, key: str) -> None:
        try:
            resp = await self.http.post(
                f"{self.base_url}{self.delete_path}",
                headers=self._headers,
                json={"fileKeys": [key]},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageError(f"Delete failed: storage API error {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Delete failed: {e}") from e

    async def delete_quietly(self, file_url: Optional[str]) -> bool:
        """
        Best-effort removal used by deletes and insert races: failures are
        logged and never retried.
        """
        key = key_from_url(file_url)
        if not key:
            return False
        try:
            await self.delete(key)
        except StorageError as e:
            logger.warning("Could not delete stored file %s: %s", key, e)
            return False
        logger.info("Deleted stored file %s", key)
        return True
