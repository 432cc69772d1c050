import uuid
from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from contactbook.contacts.models import EmailType, PhoneType

# Length limits apply to the trimmed value.
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase on input, emits camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhoneEntry(CamelModel):
    type: PhoneType = PhoneType.mobile
    number: Optional[str] = None


class EmailEntry(CamelModel):
    type: EmailType = EmailType.personal
    address: Optional[str] = None


class ContactCreate(CamelModel):
    first_name: Optional[ShortText] = None
    last_name: Optional[ShortText] = None
    # Only consulted when neither first nor last name is given.
    name: Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=201)]] = None
    nickname: Optional[ShortText] = None
    dob: Optional[date] = None
    phones: list[PhoneEntry] = Field(default_factory=list)
    emails: list[EmailEntry] = Field(default_factory=list)

    @field_validator("dob", mode="before")
    @classmethod
    def _parse_dob(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            # Date pickers may send a full timestamp; only the date is kept.
            return value.split("T", 1)[0]
        return value

    @field_validator("phones", "emails", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ContactUpdate(ContactCreate):
    pass


class NormalizedContact(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: str
    nickname: Optional[str] = None
    dob: Optional[date] = None
    phones: list[PhoneEntry] = Field(default_factory=list)
    emails: list[EmailEntry] = Field(default_factory=list)


class ContactResponse(CamelModel):
    id: uuid.UUID
    first_name: Optional[str]
    last_name: Optional[str]
    name: str
    nickname: Optional[str]
    dob: Optional[date]
    phones: list[PhoneEntry]
    emails: list[EmailEntry]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DeletedContact(BaseModel):
    id: uuid.UUID


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[Any] = None
