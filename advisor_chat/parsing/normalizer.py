"""Normalization of backend answer payloads into one canonical answer string.

The backend's answer envelope differs between deployments. Every payload is
classified into one of the known ``EnvelopeKind`` shapes:

    - BARE_STRING:   "The VAT threshold is..."
    - DIRECT_TEXT:   {"text": "..."}
    - ENCODED_BODY:  {"statusCode": 200, "body": "{\"text\": \"...\"}"}
    - WRAPPED_TEXT:  {"output": {"text": "..."}} or {"response": {"output": {"text": "..."}}}
    - UNKNOWN:       anything else, serialized whole as JSON

Classification never raises, so downstream code only ever sees a string.
"""

import json
import logging
from typing import Any

from advisor_chat.models.schemas import EnvelopeKind, ResponseEnvelope

logger = logging.getLogger(__name__)

# Fields that carry the answer text, in priority order.
# "message" holds status notes such as "Success", never the answer.
TEXT_FIELDS = ("text", "answer", "content", "output_text")

# Fields that wrap another layer of the envelope
WRAPPER_FIELDS = ("response", "output", "body", "result", "data")


def _find_text(obj: dict[str, Any]) -> tuple[str, str] | None:
    """Return (field, text) for the first non-blank text field in ``obj``."""
    for key in TEXT_FIELDS:
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return key, value
    return None


def _find_wrapped_text(obj: dict[str, Any], depth: int) -> tuple[tuple[str, ...], str] | None:
    """Search up to ``depth`` levels of wrapper fields for a text field."""
    for key in WRAPPER_FIELDS:
        inner = obj.get(key)
        if not isinstance(inner, dict):
            continue
        found = _find_text(inner)
        if found:
            return (key, found[0]), found[1]
        if depth > 1:
            nested = _find_wrapped_text(inner, depth - 1)
            if nested:
                return (key, *nested[0]), nested[1]
    return None


def _decode_json(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return None


def _classify_encoded(key: str, value: str) -> ResponseEnvelope | None:
    """Classify a wrapper field holding a string, decoding it once if it is JSON."""
    decoded = _decode_json(value)

    if isinstance(decoded, str) and decoded.strip():
        return ResponseEnvelope(kind=EnvelopeKind.ENCODED_BODY, text=decoded, path=(key,))

    if isinstance(decoded, dict):
        found = _find_text(decoded)
        if found:
            return ResponseEnvelope(
                kind=EnvelopeKind.ENCODED_BODY, text=found[1], path=(key, found[0])
            )
        wrapped = _find_wrapped_text(decoded, depth=1)
        if wrapped:
            return ResponseEnvelope(
                kind=EnvelopeKind.ENCODED_BODY, text=wrapped[1], path=(key, *wrapped[0])
            )
        return None

    # Not JSON (or a JSON scalar): the string is the answer itself
    return ResponseEnvelope(kind=EnvelopeKind.DIRECT_TEXT, text=value, path=(key,))


def _serialize(raw: Any) -> str:
    try:
        return json.dumps(raw, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(raw)


def classify_payload(raw: Any) -> ResponseEnvelope:
    """Classify a decoded backend payload and extract its answer text.

    Args:
        raw: Any successfully decoded response payload.

    Returns:
        ResponseEnvelope with the matched shape and the answer text.
    """
    if isinstance(raw, str):
        return ResponseEnvelope(kind=EnvelopeKind.BARE_STRING, text=raw)

    if isinstance(raw, dict):
        found = _find_text(raw)
        if found:
            return ResponseEnvelope(kind=EnvelopeKind.DIRECT_TEXT, text=found[1], path=(found[0],))

        wrapped = _find_wrapped_text(raw, depth=2)
        if wrapped:
            return ResponseEnvelope(kind=EnvelopeKind.WRAPPED_TEXT, text=wrapped[1], path=wrapped[0])

        for key in WRAPPER_FIELDS:
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                envelope = _classify_encoded(key, value)
                if envelope:
                    return envelope

    logger.debug(f"Unrecognized response envelope of type {type(raw).__name__}")
    return ResponseEnvelope(kind=EnvelopeKind.UNKNOWN, text=_serialize(raw))


def normalize_response(raw: Any) -> str:
    """Reduce any backend answer payload to the canonical answer string."""
    return classify_payload(raw).text
