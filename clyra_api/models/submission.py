from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class SubmissionRecord(BaseModel):
    """Persisted submission; `_id` is the ObjectId assigned by MongoDB."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias="_id")
    createdAt: datetime

    @field_serializer("createdAt")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        data = {key: value for key, value in document.items() if key != "_id"}
        return cls(_id=str(document["_id"]), **data)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ContactRecord(SubmissionRecord):
    name: str
    email: str
    phone: str
    requirement: str


class ConsultationRecord(SubmissionRecord):
    name: str
    email: str
    phone: str
    country: str
    level: str


@dataclass(frozen=True)
class KindProfile:
    fields: Tuple[str, ...]
    labels: Tuple[str, ...]
    collection: str
    record_model: Type[SubmissionRecord]
    subject: str
    heading: str
    success_message: str
    response_key: str
    failure_message: str


class SubmissionKind(str, Enum):
    CONTACT = "contact"
    CONSULTATION = "consultation"

    @property
    def profile(self) -> KindProfile:
        return KIND_PROFILES[self]

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.profile.fields

    @property
    def collection(self) -> str:
        return self.profile.collection


KIND_PROFILES = {
    SubmissionKind.CONTACT: KindProfile(
        fields=("name", "email", "phone", "requirement"),
        labels=("Name", "Email", "Phone", "Requirement"),
        collection="contacts",
        record_model=ContactRecord,
        subject="New Enquiry from Contact Form",
        heading="New Contact Form Submission",
        success_message="Contact saved successfully",
        response_key="contact",
        failure_message="Something went wrong",
    ),
    SubmissionKind.CONSULTATION: KindProfile(
        fields=("name", "email", "phone", "country", "level"),
        labels=("Name", "Email", "Phone", "Country", "Level"),
        collection="consultations",
        record_model=ConsultationRecord,
        subject="New Consultation Request",
        heading="New Consultation Request",
        success_message="Consultation request submitted successfully",
        response_key="consultation",
        failure_message="Failed to submit consultation request",
    ),
}
