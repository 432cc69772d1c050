"""
Normalization rules applied to every contact before it is written.

``normalize_contact`` is a pure function: it trims the free-text fields,
derives the display ``name`` and drops phone/email entries without content.
It raises ``ValidationFailure`` when no usable name remains.
"""

from typing import Optional

from contactbook.common.exceptions import ValidationFailure
from contactbook.contacts.schemas import ContactCreate, EmailEntry, NormalizedContact, PhoneEntry

NAME_REQUIRED_MESSAGE = "At least First Name or Last Name is required"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def derive_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    parts = [part for part in (_clean(first_name), _clean(last_name)) if part]
    return " ".join(parts) or None


def filter_phones(phones: list[PhoneEntry]) -> list[PhoneEntry]:
    return [phone for phone in phones if _clean(phone.number)]


def filter_emails(emails: list[EmailEntry]) -> list[EmailEntry]:
    return [email for email in emails if _clean(email.address)]


def normalize_contact(data: ContactCreate) -> NormalizedContact:
    first_name = _clean(data.first_name)
    last_name = _clean(data.last_name)

    # An explicit name only counts when there is nothing to derive it from.
    name = derive_name(first_name, last_name) or _clean(data.name)
    if not name:
        raise ValidationFailure(NAME_REQUIRED_MESSAGE, errors={"name": NAME_REQUIRED_MESSAGE})

    return NormalizedContact(
        first_name=first_name,
        last_name=last_name,
        name=name,
        nickname=_clean(data.nickname),
        dob=data.dob,
        phones=filter_phones(data.phones),
        emails=filter_emails(data.emails),
    )
