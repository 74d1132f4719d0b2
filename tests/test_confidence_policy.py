import pytest

from db.schemas import MedicineRecord
from services.confidence_policy import (
    UNKNOWN_MEDICINE_NAME,
    apply_confidence_gate,
    confidence_label,
)
from services.response_parser import parse_medicine_response


@pytest.fixture
def record():
    return MedicineRecord(
        name="Neozep Forte",
        generic_name="Phenylephrine + Chlorphenamine + Paracetamol",
        overview="Cold relief.",
        usage="Colds",
        dosage="1 tablet every 6 hours",
        side_effects=["Drowsiness"],
        contraindications=["Hypertension"],
        brand_names=["Neozep"],
        disclaimer="Consult a doctor.",
        analysis_notes="Green round tablet matched the visual guide.",
    )


class TestBoundaries:
    """Score boundaries of the 85% rule"""

    def test_84_becomes_unknown(self, record):
        result = apply_confidence_gate(record, 84)
        assert result.name == UNKNOWN_MEDICINE_NAME
        assert result.generic_name == "Unidentified"
        assert result.confidence == "low"
        assert result.side_effects == []
        assert result.contraindications == []
        assert result.brand_names == []
        assert result.analysis_notes == "Low confidence (84%). Green round tablet matched the visual guide."

    @pytest.mark.parametrize("score,label", [(85, "medium"), (94, "medium"), (95, "high"), (100, "high")])
    def test_accepted_scores_keep_record(self, record, score, label):
        result = apply_confidence_gate(record, score)
        assert result.confidence == label
        assert result.model_dump(exclude={"confidence"}) == record.model_dump(exclude={"confidence"})

    def test_fractional_score_just_below_threshold(self, record):
        assert apply_confidence_gate(record, 84.9).name == UNKNOWN_MEDICINE_NAME

    def test_input_record_is_not_mutated(self, record):
        apply_confidence_gate(record, 99)
        assert record.confidence is None


class TestUnreadableScores:
    """Scores the model did not send as a plain number"""

    def test_numeric_string(self, record):
        assert apply_confidence_gate(record, "90").confidence == "medium"
        assert confidence_label("96%") == "high"

    @pytest.mark.parametrize("score", [None, "very sure", True, [90]])
    def test_missing_or_garbage_is_treated_as_zero(self, record, score):
        result = apply_confidence_gate(record, score)
        assert result.name == UNKNOWN_MEDICINE_NAME
        assert result.confidence == "low"

    def test_missing_notes_still_produce_explanation(self, record):
        record = record.model_copy(update={"analysis_notes": None})
        assert apply_confidence_gate(record, 40).analysis_notes == "Low confidence (40%)."

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), "nan", "Infinity", "-inf%"])
    def test_non_finite_scores_are_treated_as_zero(self, record, score):
        assert confidence_label(score) == "low"
        assert apply_confidence_gate(record, score).name == UNKNOWN_MEDICINE_NAME

    def test_nan_literal_in_model_answer_is_rejected(self):
        parsed = parse_medicine_response('{"name": "Biogesic", "confidenceScore": NaN}')
        result = apply_confidence_gate(parsed.record, parsed.confidence_score)
        assert result.name == UNKNOWN_MEDICINE_NAME
        assert result.confidence == "low"
