import os

# resume_intake.main builds the app at import time and needs these.
os.environ.setdefault("STORAGE_API_KEY", "test-storage-key")
os.environ.setdefault("OCR_API_KEY", "test-ocr-key")
os.environ.setdefault("AUTOMATION_WEBHOOK_URL", "https://automation.example.com/webhook")
os.environ.setdefault("AUTOMATION_API_TOKEN", "test-automation-token")
os.environ.setdefault("DATABASE_URL", "sqlite://")
