import unittest

import fitz

from tests.support import RESUME_TEXT  # noqa: F401

from resume_intake.exceptions import ExtractionError
from resume_intake.services.extraction import pdf_extractor
from resume_intake.services.extraction.resume_text import ResumeTextExtractor


def _pdf(text: str = "") -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    if text:
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class FakeOcr:
    def __init__(self, text: str = "Scanned resume text from OCR service"):
        self.text = text
        self.urls = []

    async def extract_text(self, file_url: str) -> str:
        self.urls.append(file_url)
        return self.text


class PdfExtractorTests(unittest.TestCase):
    def test_reads_text_layer(self):
        text = pdf_extractor.extract_text(_pdf("Jane Doe - Backend Engineer"))
        self.assertIn("Jane Doe", text)

    def test_blank_page(self):
        self.assertEqual(pdf_extractor.extract_text(_pdf()), "")

    def test_not_a_pdf(self):
        with self.assertRaises(ExtractionError):
            pdf_extractor.extract_text(b"this is not a pdf at all")


class ResumeTextExtractorTests(unittest.IsolatedAsyncioTestCase):
    async def test_text_layer_skips_ocr(self):
        ocr = FakeOcr()
        extractor = ResumeTextExtractor(ocr, min_length=10)
        text = await extractor.extract(_pdf("Jane Doe - Backend Engineer"), "https://files.example.com/f/k1")
        self.assertIn("Backend Engineer", text)
        self.assertEqual(ocr.urls, [])

    async def test_scanned_pdf_uses_ocr(self):
        ocr = FakeOcr()
        extractor = ResumeTextExtractor(ocr, min_length=10)
        text = await extractor.extract(_pdf(), "https://files.example.com/f/k1")
        self.assertEqual(text, "Scanned resume text from OCR service")
        self.assertEqual(ocr.urls, ["https://files.example.com/f/k1"])

    async def test_unreadable_pdf_uses_ocr(self):
        ocr = FakeOcr()
        extractor = ResumeTextExtractor(ocr, min_length=10)
        text = await extractor.extract(b"garbage", "https://files.example.com/f/k2")
        self.assertEqual(text, "Scanned resume text from OCR service")

    async def test_keeps_local_text_when_ocr_finds_less(self):
        extractor = ResumeTextExtractor(FakeOcr(text=""), min_length=500)
        text = await extractor.extract(_pdf("Short resume"), "https://files.example.com/f/k3")
        self.assertEqual(text, "Short resume")


if __name__ == "__main__":
    unittest.main()
