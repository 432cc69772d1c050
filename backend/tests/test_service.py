"""
Service-layer tests: identifier parsing, storage error translation and
direct create/update/delete against a database session.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.common.exceptions import Conflict, InternalFailure, InvalidInput, NotFound
from contactbook.contacts import service
from contactbook.contacts.schemas import ContactCreate, ContactUpdate


# ---------------------------------------------------------------------------
# Identifier parsing
# ---------------------------------------------------------------------------

class TestParseContactId:
    def test_accepts_uuid_string(self):
        value = uuid.uuid4()
        assert service.parse_contact_id(str(value)) == value

    def test_accepts_uuid_instance(self):
        value = uuid.uuid4()
        assert service.parse_contact_id(value) is value

    @pytest.mark.parametrize("raw", ["not-a-valid-id", "123", "", "64b7f0c2e4b0a1a2b3c4d5e6"])
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidInput) as exc_info:
            service.parse_contact_id(raw)
        assert exc_info.value.message == "Invalid contact ID format"


# ---------------------------------------------------------------------------
# Storage error translation
# ---------------------------------------------------------------------------

class TestConflictTranslation:
    def test_sqlite_unique_message(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: contacts.email"))
        conflict = service.conflict_from_integrity_error(exc)
        assert isinstance(conflict, Conflict)
        assert conflict.status_code == 400
        assert conflict.message == "Email already exists."
        assert conflict.errors == {"email": "duplicate value"}

    def test_postgres_unique_message(self):
        exc = IntegrityError(
            "INSERT",
            {},
            Exception(
                'duplicate key value violates unique constraint "uq"\n'
                "DETAIL:  Key (nickname)=(jj) already exists."
            ),
        )
        assert service.conflict_from_integrity_error(exc).message == "Nickname already exists."

    def test_unknown_field(self):
        exc = IntegrityError("INSERT", {}, Exception("constraint violated"))
        assert service.conflict_from_integrity_error(exc).message == "Contact already exists."

    async def test_create_maps_integrity_error(self, db_session: AsyncSession, monkeypatch):
        async def failing_flush(*args, **kwargs):
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: contacts.name"))

        monkeypatch.setattr(db_session, "flush", failing_flush)
        with pytest.raises(Conflict) as exc_info:
            await service.create_contact(db_session, ContactCreate(first_name="Jo"))
        assert exc_info.value.message == "Name already exists."

    async def test_other_storage_errors_become_internal_failure(self, db_session: AsyncSession, monkeypatch):
        async def failing_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "execute", failing_execute)
        with pytest.raises(InternalFailure) as exc_info:
            await service.get_contacts(db_session)
        assert exc_info.value.message == "Error fetching contacts"
        assert exc_info.value.status_code == 500


# ---------------------------------------------------------------------------
# Direct CRUD
# ---------------------------------------------------------------------------

class TestContactService:
    async def test_create_assigns_id_and_timestamps(self, db_session: AsyncSession):
        contact = await service.create_contact(db_session, ContactCreate(first_name="Ann", last_name="Smith"))
        assert isinstance(contact.id, uuid.UUID)
        assert contact.name == "Ann Smith"
        assert contact.created_at is not None
        assert contact.updated_at == contact.created_at

    async def test_update_advances_updated_at(self, db_session: AsyncSession):
        contact = await service.create_contact(db_session, ContactCreate(first_name="Ann", last_name="Smith"))
        created_at, first_update = contact.created_at, contact.updated_at

        updated = await service.update_contact(db_session, str(contact.id), ContactUpdate(first_name="Anna"))
        assert updated.name == "Anna Smith"
        assert updated.updated_at > first_update
        assert updated.created_at == created_at

    async def test_update_keeps_name_only_contact(self, db_session: AsyncSession):
        contact = await service.create_contact(db_session, ContactCreate(name="Front Desk"))
        updated = await service.update_contact(db_session, contact.id, ContactUpdate(nickname="desk"))
        assert updated.name == "Front Desk"
        assert updated.nickname == "desk"

    async def test_list_newest_first(self, db_session: AsyncSession):
        first = await service.create_contact(db_session, ContactCreate(first_name="First"))
        second = await service.create_contact(db_session, ContactCreate(first_name="Second"))
        contacts = await service.get_contacts(db_session)
        assert [c.id for c in contacts] == [second.id, first.id]

    async def test_delete_then_get(self, db_session: AsyncSession):
        contact = await service.create_contact(db_session, ContactCreate(first_name="Gone"))
        deleted_id = await service.delete_contact(db_session, str(contact.id))
        assert deleted_id == contact.id
        with pytest.raises(NotFound):
            await service.get_contact(db_session, deleted_id)

    async def test_delete_missing(self, db_session: AsyncSession):
        with pytest.raises(NotFound):
            await service.delete_contact(db_session, uuid.uuid4())
