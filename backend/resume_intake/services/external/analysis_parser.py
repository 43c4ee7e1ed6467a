import json
import re
from typing import Any

from pydantic import ValidationError

from ...exceptions import AnalysisPayloadError
from ...schemas.analysis import AnalysisResult

# The workflow serializes its result as a Ruby hash: {"summary"=>"...", "fit_score"=>80}
_RUBY_NIL = re.compile(r'"\s*=>\s*nil\b')
_HASH_ROCKET = re.compile(r'"\s*=>\s*')

# Envelope keys under which the workflow has been seen to nest its result
_ENVELOPE_KEYS = ("result", "analysis", "data", "output", "body")


def _deserialize(text: str) -> Any:
    text = text.strip()
    if not text:
        raise AnalysisPayloadError("Analysis response is empty")
    try:
        return json.loads(text)
    except ValueError:
        pass
    converted = _HASH_ROCKET.sub('": ', _RUBY_NIL.sub('": null', text))
    try:
        return json.loads(converted)
    except ValueError as e:
        raise AnalysisPayloadError(f"Analysis response is not parseable: {e}") from e


def _unwrap(payload: Any, depth: int = 0) -> dict:
    if depth > 4:
        raise AnalysisPayloadError("Analysis response is nested too deeply")
    if isinstance(payload, str):
        return _unwrap(_deserialize(payload), depth + 1)
    if isinstance(payload, list) and len(payload) == 1:
        return _unwrap(payload[0], depth + 1)
    if not isinstance(payload, dict):
        raise AnalysisPayloadError(f"Analysis response has unexpected type {type(payload).__name__}")
    for key in _ENVELOPE_KEYS:
        if key in payload and isinstance(payload[key], (str, dict, list)):
            return _unwrap(payload[key], depth + 1)
    return payload


def parse_analysis(payload: Any) -> AnalysisResult:
    """
    Turn an untrusted workflow payload (dict, JSON text or Ruby-hash text,
    possibly wrapped in an envelope) into an AnalysisResult.
    Anything unusable raises AnalysisPayloadError.
    """
    data = _unwrap(payload)
    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "payload" for err in e.errors())
        raise AnalysisPayloadError(f"Analysis response is missing or has invalid fields: {fields}") from e
