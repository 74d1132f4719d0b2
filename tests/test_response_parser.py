"""
Response parser tests

- code fences are stripped whatever their style
- missing or null list fields become empty lists
- only unreadable JSON is rejected
"""
import json

import pytest

from db.schemas import DEFAULT_DISCLAIMER
from services.errors import MalformedResponseError
from services.response_parser import parse_medicine_response, strip_code_fences


BIOGESIC = {
    "name": "Biogesic",
    "genericName": "Paracetamol",
    "overview": "Pain reliever and fever reducer.",
    "usage": "Headache, fever",
    "dosage": "500mg",
    "sideEffects": ["Nausea"],
    "contraindications": ["Liver disease"],
    "brandNames": ["Biogesic", "Tempra"],
    "confidenceScore": 97,
    "disclaimer": "Ask your pharmacist.",
    "analysis_notes": "Imprint clearly readable.",
}


class TestFenceStripping:
    """Code fence removal"""

    @pytest.mark.parametrize("wrapped", [
        "```json\n{body}\n```",
        "```\n{body}\n```",
        "  ```JSON{body}```  ",
        "{body}",
    ])
    def test_fenced_and_plain_parse_identically(self, wrapped):
        """```json, ``` and unfenced text give the same record"""
        body = json.dumps(BIOGESIC)
        plain = parse_medicine_response(body)
        fenced = parse_medicine_response(wrapped.replace("{body}", body))
        assert fenced.record == plain.record
        assert fenced.confidence_score == 97

    def test_strip_is_idempotent(self):
        text = "```json\n{\"name\": \"x\"}\n```"
        once = strip_code_fences(text)
        assert strip_code_fences(once) == once == '{"name": "x"}'


class TestFieldMapping:
    """Field mapping and defaults"""

    def test_maps_recognized_fields(self):
        record = parse_medicine_response(json.dumps(BIOGESIC)).record
        assert record.name == "Biogesic"
        assert record.generic_name == "Paracetamol"
        assert record.side_effects == ["Nausea"]
        assert record.brand_names == ["Biogesic", "Tempra"]
        assert record.disclaimer == "Ask your pharmacist."
        assert record.analysis_notes == "Imprint clearly readable."
        assert record.confidence is None

    @pytest.mark.parametrize("value", ["missing", None])
    def test_absent_or_null_lists_become_empty(self, value):
        """sideEffects / contraindications / brandNames are never null"""
        data = dict(BIOGESIC)
        for key in ("sideEffects", "contraindications", "brandNames"):
            if value == "missing":
                data.pop(key)
            else:
                data[key] = value

        record = parse_medicine_response(json.dumps(data)).record
        assert record.side_effects == []
        assert record.contraindications == []
        assert record.brand_names == []

    def test_missing_name_is_not_rejected(self):
        record = parse_medicine_response('{"overview": "something"}').record
        assert record.name == ""
        assert record.overview == "something"
        assert record.disclaimer == DEFAULT_DISCLAIMER

    def test_loose_types_are_coerced(self):
        parsed = parse_medicine_response(
            '{"name": 42, "sideEffects": "Drowsiness", "analysisNotes": "camel key"}'
        )
        assert parsed.record.name == "42"
        assert parsed.record.side_effects == ["Drowsiness"]
        assert parsed.record.analysis_notes == "camel key"
        assert parsed.confidence_score is None

    def test_sources_are_kept_when_present(self):
        parsed = parse_medicine_response('{"name": "Advil", "sources": ["https://example.org"]}')
        assert parsed.record.sources == ["https://example.org"]


class TestMalformed:
    """Unreadable responses"""

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        None,
        "I could not identify this medicine.",
        "```json\n{\"name\": \"Biogesic\",\n```",
        "[1, 2, 3]",
    ])
    def test_rejected(self, text):
        with pytest.raises(MalformedResponseError):
            parse_medicine_response(text)
