import logging
import re
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.common.base_models import utcnow
from contactbook.common.exceptions import Conflict, InternalFailure, InvalidInput, NotFound
from contactbook.contacts.models import Contact
from contactbook.contacts.normalization import normalize_contact
from contactbook.contacts.schemas import ContactCreate, ContactUpdate, NormalizedContact

logger = logging.getLogger(__name__)

# "UNIQUE constraint failed: contacts.email" (SQLite) or
# "Key (email)=(a@b.c) already exists." (PostgreSQL)
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")
_POSTGRES_UNIQUE_RE = re.compile(r"Key \((\w+)\)=")


def parse_contact_id(contact_id: str | uuid.UUID) -> uuid.UUID:
    if isinstance(contact_id, uuid.UUID):
        return contact_id
    try:
        return uuid.UUID(contact_id)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid contact ID format")


def conflict_from_integrity_error(exc: IntegrityError) -> Conflict:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    match = _SQLITE_UNIQUE_RE.search(detail) or _POSTGRES_UNIQUE_RE.search(detail)
    if match is None:
        return Conflict("Contact already exists.")
    field = match.group(1)
    return Conflict(f"{field[:1].upper()}{field[1:]} already exists.", errors={field: "duplicate value"})


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Translate driver exceptions into the API error taxonomy."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Uniqueness violation while %s: %s", action, exc.orig)
        raise conflict_from_integrity_error(exc) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error %s", action)
        raise InternalFailure(f"Error {action}") from exc


def _apply(contact: Contact, normalized: NormalizedContact) -> None:
    contact.first_name = normalized.first_name
    contact.last_name = normalized.last_name
    contact.name = normalized.name
    contact.nickname = normalized.nickname
    contact.dob = normalized.dob
    contact.phones = [phone.model_dump(mode="json") for phone in normalized.phones]
    contact.emails = [email.model_dump(mode="json") for email in normalized.emails]


def _as_input(contact: Contact) -> dict:
    data = {
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "nickname": contact.nickname,
        "dob": contact.dob,
        "phones": list(contact.phones or []),
        "emails": list(contact.emails or []),
    }
    if not (contact.first_name or contact.last_name):
        data["name"] = contact.name
    return data


async def get_contacts(db: AsyncSession) -> list[Contact]:
    with _storage_errors("fetching contacts"):
        result = await db.execute(select(Contact).order_by(Contact.created_at.desc()))
        return list(result.scalars().all())


async def _load(db: AsyncSession, contact_id: uuid.UUID) -> Contact:
    result = await db.execute(select(Contact).where(Contact.id == contact_id))
    contact = result.scalar_one_or_none()
    if contact is None:
        raise NotFound("Contact not found")
    return contact


async def get_contact(db: AsyncSession, contact_id: str | uuid.UUID) -> Contact:
    key = parse_contact_id(contact_id)
    with _storage_errors("fetching contact"):
        return await _load(db, key)


async def create_contact(db: AsyncSession, data: ContactCreate) -> Contact:
    normalized = normalize_contact(data)
    now = utcnow()
    contact = Contact(id=uuid.uuid4(), created_at=now, updated_at=now)
    _apply(contact, normalized)
    with _storage_errors("creating contact"):
        db.add(contact)
        await db.flush()
        await db.refresh(contact)
    logger.info("Created contact %s", contact.id)
    return contact


async def update_contact(db: AsyncSession, contact_id: str | uuid.UUID, data: ContactUpdate) -> Contact:
    key = parse_contact_id(contact_id)
    with _storage_errors("updating contact"):
        contact = await _load(db, key)

    # Fields missing from the body keep their stored values; the merged
    # record is normalized as a whole.
    merged = ContactUpdate.model_validate({**_as_input(contact), **data.model_dump(exclude_unset=True)})
    normalized = normalize_contact(merged)
    _apply(contact, normalized)
    contact.updated_at = utcnow()
    with _storage_errors("updating contact"):
        await db.flush()
        await db.refresh(contact)
    logger.info("Updated contact %s", contact.id)
    return contact


async def delete_contact(db: AsyncSession, contact_id: str | uuid.UUID) -> uuid.UUID:
    key = parse_contact_id(contact_id)
    with _storage_errors("deleting contact"):
        contact = await _load(db, key)
        await db.delete(contact)
        await db.flush()
    logger.info("Deleted contact %s", key)
    return key
