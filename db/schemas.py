from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


DEFAULT_DISCLAIMER = "Consult a healthcare professional."

Confidence = Literal["high", "medium", "low"]


class CamelModel(BaseModel):
    # snake_case attributes, camelCase JSON (the mobile client's field names)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------
# IDENTIFICATION RESULTS
# -------------------
class MedicineRecord(CamelModel):
    name: str = ""
    generic_name: Optional[str] = None
    overview: str = ""
    usage: str = ""
    dosage: str = ""
    side_effects: List[str] = Field(default_factory=list)
    contraindications: List[str] = Field(default_factory=list)
    brand_names: List[str] = Field(default_factory=list)
    disclaimer: str = DEFAULT_DISCLAIMER
    confidence: Optional[Confidence] = None
    analysis_notes: Optional[str] = None
    sources: Optional[List[str]] = None

    @field_validator("side_effects", "contraindications", "brand_names", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class HistoryEntry(MedicineRecord):
    id: str
    timestamp: int  # ms since epoch

    @classmethod
    def from_record(cls, record: MedicineRecord, entry_id: str, timestamp: int) -> "HistoryEntry":
        return cls(**record.model_dump(), id=entry_id, timestamp=timestamp)


# -------------------
# ACCOUNT DATA
# -------------------
class User(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class UserProfile(CamelModel):
    name: Optional[str] = None
    date_of_birth: Optional[str] = None
    age: Optional[int] = None
    blood_type: Optional[str] = None
    allergies: Optional[List[str]] = None
    conditions: Optional[List[str]] = None


class Session(CamelModel):
    is_logged_in: bool
    username: str
