"""
Document shapes stored in Firestore.

Attributes are snake_case in Python; the stored field names are the
camelCase names the documents use (``doctorId``, ``contactDetails``...).
Every model accepts either spelling and dumps the stored one with
``to_document()``.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        return cls.model_validate(doc)

    def to_document(self, include=None) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, include=include)


class Profile(Document):
    """Base for user profiles: every text field defaults to an empty string."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # stored nulls fall back to the "" defaults
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def editable_fields(cls):
        return [name for name in cls.model_fields if name != "id"]


class DoctorProfile(Profile):
    name: str = ""
    specialization: str = ""

    @property
    def label(self) -> str:
        return f"{self.name} ({self.specialization})"


class PatientProfile(Profile):
    name: str = ""
    contact_details: str = Field("", alias="contactDetails")
    medical_history: str = Field("", alias="medicalHistory")


class AvailabilitySlot(BaseModel):
    """A block of time a doctor declares; lives in session memory only."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    available: bool = False


class Appointment(Document):
    doctor_id: str = Field(alias="doctorId")
    patient_id: str = Field(alias="patientId")
    date_time: datetime = Field(alias="dateTime")
    notes: str = ""
