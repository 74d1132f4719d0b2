"""
Turns Gemini's free-form answer into a MedicineRecord.

The model is asked for a single JSON object but nothing enforces it: the
object may arrive wrapped in ``` / ```json fences, fields may be missing,
null, or of the wrong shape. Only unreadable JSON is an error; everything
else falls back to a default.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from db.schemas import DEFAULT_DISCLAIMER, MedicineRecord
from services.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

_TEXT_FIELDS = {
    "name": "name",
    "overview": "overview",
    "usage": "usage",
    "dosage": "dosage",
}

_LIST_FIELDS = {
    "sideEffects": "side_effects",
    "contraindications": "contraindications",
    "brandNames": "brand_names",
}


@dataclass
class ParsedResponse:
    record: MedicineRecord
    confidence_score: Any = None  # raw value, interpreted by the confidence gate


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_optional_text(value: Any) -> Optional[str]:
    return None if value is None else _as_text(value)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_as_text(item) for item in value if item is not None]
    return [_as_text(value)]


def record_from_payload(data: Dict[str, Any]) -> MedicineRecord:
    """Map the recognized keys of a parsed payload onto a MedicineRecord."""
    fields: Dict[str, Any] = {attr: _as_text(data.get(key)) for key, attr in _TEXT_FIELDS.items()}
    fields.update({attr: _as_list(data.get(key)) for key, attr in _LIST_FIELDS.items()})

    fields["generic_name"] = _as_optional_text(data.get("genericName"))
    fields["disclaimer"] = _as_text(data.get("disclaimer")) or DEFAULT_DISCLAIMER
    fields["analysis_notes"] = _as_optional_text(
        data.get("analysis_notes", data.get("analysisNotes"))
    )
    if data.get("sources") is not None:
        fields["sources"] = _as_list(data["sources"])

    return MedicineRecord(**fields)


def parse_medicine_response(text: Optional[str]) -> ParsedResponse:
    if not text or not text.strip():
        raise MalformedResponseError("Gemini returned an empty response")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Unparseable model response: %.200s", cleaned)
        raise MalformedResponseError(f"Could not parse medicine information: {e.msg}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object from the model, got {type(data).__name__}"
        )

    return ParsedResponse(
        record=record_from_payload(data),
        confidence_score=data.get("confidenceScore"),
    )
