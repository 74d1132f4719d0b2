import logging
import math
from typing import Any, Optional

from db.schemas import Confidence, MedicineRecord

logger = logging.getLogger(__name__)

# Minimum score for an image identification to be shown at all.
ACCEPT_THRESHOLD = 85
HIGH_THRESHOLD = 95

UNKNOWN_MEDICINE_NAME = "Unknown Medicine"


def _score_value(score: Any) -> Optional[float]:
    if isinstance(score, bool) or not isinstance(score, (int, float, str)):
        return None
    try:
        value = float(score.strip().rstrip("%") if isinstance(score, str) else score)
    except (ValueError, OverflowError):
        return None
    # NaN and infinities compare False against both thresholds
    return value if math.isfinite(value) else None


def _format_score(score: Any) -> str:
    value = _score_value(score)
    if value is None:
        return str(score)
    return str(int(value)) if value.is_integer() else str(value)


def confidence_label(score: Any) -> Confidence:
    """Discretize a 0-100 score. Missing or unreadable scores count as 0."""
    value = _score_value(score)
    if value is None or value < ACCEPT_THRESHOLD:
        return "low"
    if value < HIGH_THRESHOLD:
        return "medium"
    return "high"


def unknown_medicine_record(score: Any, analysis_notes: Optional[str]) -> MedicineRecord:
    return MedicineRecord(
        name=UNKNOWN_MEDICINE_NAME,
        generic_name="Unidentified",
        overview=(
            f"The image was not clear enough to identify with {ACCEPT_THRESHOLD}% confidence. "
            "Please retake the photo ensuring the text and shape are visible."
        ),
        usage="N/A",
        dosage="N/A",
        side_effects=[],
        contraindications=[],
        brand_names=[],
        confidence="low",
        disclaimer="Please consult a doctor or pharmacist.",
        analysis_notes=f"Low confidence ({_format_score(score)}%). {analysis_notes or ''}".rstrip(),
    )


def apply_confidence_gate(record: MedicineRecord, score: Any) -> MedicineRecord:
    """
    Hard cliff on the model's self-reported score.

    Below 85 the identification is thrown away and replaced by the
    Unknown Medicine record; otherwise the record is kept and only its
    confidence label is overwritten.
    """
    label = confidence_label(score)
    if label == "low":
        logger.info("Confidence gate rejected '%s' (score=%s)", record.name, score)
        return unknown_medicine_record(score, record.analysis_notes)

    return record.model_copy(update={"confidence": label})
