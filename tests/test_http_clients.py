import json
import unittest

import httpx

from tests.support import sample_result  # noqa: F401

from resume_intake.exceptions import AnalysisPayloadError, AnalysisRequestError, ExtractionError, StorageError
from resume_intake.services.external.automation_client import AutomationClient
from resume_intake.services.extraction.ocr_client import OcrClient
from resume_intake.services.storage.file_storage import StorageClient, key_from_url


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class KeyFromUrlTests(unittest.TestCase):
    def test_last_path_segment(self):
        self.assertEqual(key_from_url("https://files.example.com/f/abc123"), "abc123")
        self.assertEqual(key_from_url("https://files.example.com/f/abc123/"), "abc123")
        self.assertEqual(key_from_url("https://files.example.com/f/abc123?x=1"), "abc123")

    def test_missing(self):
        self.assertIsNone(key_from_url(None))
        self.assertIsNone(key_from_url(""))
        self.assertIsNone(key_from_url("https://files.example.com/"))


class StorageClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_upload_returns_key_and_public_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["api_key"] = request.headers.get("x-uploadthing-api-key")
            seen["body"] = request.content
            return httpx.Response(200, json={"data": [{"key": "k1", "ufsUrl": "https://files.example.com/f/k1"}]})

        async with _client(handler) as http:
            storage = StorageClient(http, api_key="secret", base_url="https://storage.example.com/")
            stored = await storage.upload("cv.pdf", b"%PDF-1.4", "application/pdf")

        self.assertEqual(stored.key, "k1")
        self.assertEqual(stored.url, "https://files.example.com/f/k1")
        self.assertEqual(seen["url"], "https://storage.example.com/v6/uploadFiles")
        self.assertEqual(seen["api_key"], "secret")
        self.assertIn(b"cv.pdf", seen["body"])

    async def test_upload_error_status(self):
        async with _client(lambda request: httpx.Response(503)) as http:
            storage = StorageClient(http, api_key="secret", base_url="https://storage.example.com")
            with self.assertRaises(StorageError):
                await storage.upload("cv.pdf", b"%PDF", "application/pdf")

    async def test_upload_without_url(self):
        async with _client(lambda request: httpx.Response(200, json={"data": [{"error": "too large"}]})) as http:
            storage = StorageClient(http, api_key="secret", base_url="https://storage.example.com")
            with self.assertRaises(StorageError):
                await storage.upload("cv.pdf", b"%PDF", "application/pdf")

    async def test_delete_sends_file_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["json"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True})

        async with _client(handler) as http:
            storage = StorageClient(http, api_key="secret", base_url="https://storage.example.com")
            deleted = await storage.delete_quietly("https://files.example.com/f/k9")

        self.assertTrue(deleted)
        self.assertEqual(seen["path"], "/v6/deleteFiles")
        self.assertEqual(seen["json"], {"fileKeys": ["k9"]})

    async def test_delete_quietly_swallows_storage_errors(self):
        async with _client(lambda request: httpx.Response(500)) as http:
            storage = StorageClient(http, api_key="secret", base_url="https://storage.example.com")
            self.assertFalse(await storage.delete_quietly("https://files.example.com/f/k9"))
            self.assertFalse(await storage.delete_quietly(None))


class AutomationClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_sends_bearer_token_and_parses_result(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            seen["json"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"result": '{"summary"=>"ok", "qualification_status"=>"PASS", "fit_score"=>77}'},
            )

        async with _client(handler) as http:
            client = AutomationClient(http, webhook_url="https://automation.example.com/hook", api_token="tok")
            result = await client.request_analysis("app1", "jane doe", "text", "https://files.example.com/f/k1")

        self.assertEqual(seen["auth"], "Bearer tok")
        self.assertEqual(seen["json"]["applicationId"], "app1")
        self.assertEqual(seen["json"]["resumeFileLink"], "https://files.example.com/f/k1")
        self.assertEqual(result.fit_score, 77)

    async def test_non_2xx_is_request_error(self):
        async with _client(lambda request: httpx.Response(500, text="boom")) as http:
            client = AutomationClient(http, webhook_url="https://automation.example.com/hook", api_token="tok")
            with self.assertRaises(AnalysisRequestError):
                await client.request_analysis("app1", "jane", "text", "url")

    async def test_unreachable_is_request_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as http:
            client = AutomationClient(http, webhook_url="https://automation.example.com/hook", api_token="tok")
            with self.assertRaises(AnalysisRequestError):
                await client.request_analysis("app1", "jane", "text", "url")

    async def test_plain_text_body_is_parsed(self):
        body = '{"qualificationStatus"=>"FAIL", "fitScore"=>20}'
        async with _client(lambda request: httpx.Response(200, text=body)) as http:
            client = AutomationClient(http, webhook_url="https://automation.example.com/hook", api_token="tok")
            result = await client.request_analysis("app1", "jane", "text", "url")
        self.assertEqual(result.qualification_status, "FAIL")

    async def test_malformed_body_is_payload_error(self):
        async with _client(lambda request: httpx.Response(200, text="Accepted")) as http:
            client = AutomationClient(http, webhook_url="https://automation.example.com/hook", api_token="tok")
            with self.assertRaises(AnalysisPayloadError):
                await client.request_analysis("app1", "jane", "text", "url")


class OcrClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_joins_parsed_pages(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            return httpx.Response(
                200,
                json={"IsErroredOnProcessing": False, "ParsedResults": [{"ParsedText": "Page one"}, {"ParsedText": "Page two"}]},
            )

        async with _client(handler) as http:
            ocr = OcrClient(http, api_key="ocr-key", api_url="https://ocr.example.com/parse/image")
            text = await ocr.extract_text("https://files.example.com/f/k1")

        self.assertEqual(text, "Page one Page two")
        self.assertIn("apikey=ocr-key", seen["body"])
        self.assertIn("filetype=PDF", seen["body"])

    async def test_processing_error(self):
        payload = {"IsErroredOnProcessing": True, "ErrorMessage": ["File failed validation"]}
        async with _client(lambda request: httpx.Response(200, json=payload)) as http:
            ocr = OcrClient(http, api_key="ocr-key", api_url="https://ocr.example.com/parse/image")
            with self.assertRaises(ExtractionError):
                await ocr.extract_text("https://files.example.com/f/k1")


if __name__ == "__main__":
    unittest.main()
