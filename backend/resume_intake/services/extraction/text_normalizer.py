import re

NO_EMAIL_FOUND = "no-email-found"

# PDF text engines often emit "j a n e . d o e @ m a i l . c o m"; these
# rules glue such fragments back together before matching.
_NEWLINES = re.compile(r"\r?\n")
_SPLIT_TOKEN = re.compile(r"([a-zA-Z0-9])\s+(?=[a-zA-Z0-9@.])")
_AROUND_AT = re.compile(r"\s*@\s*")
_AROUND_DOT = re.compile(r"\s*\.\s*")
_WHITESPACE = re.compile(r"\s+")

EMAIL_PATTERN = re.compile(r"\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")


def normalize_resume_text(raw_text: str) -> str:
    """
    Clean raw extracted resume text. Applying it to its own output
    returns the same string.
    """
    if not raw_text:
        return ""
    text = _NEWLINES.sub(" ", raw_text)
    text = _SPLIT_TOKEN.sub(r"\1", text)
    text = _AROUND_AT.sub("@", text)
    text = _AROUND_DOT.sub(".", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def extract_email(text: str) -> str:
    """Return the first email address in the text, or NO_EMAIL_FOUND."""
    if not text:
        return NO_EMAIL_FOUND
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else NO_EMAIL_FOUND
