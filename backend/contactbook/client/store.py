"""
Client-side state container for the contact list.

``ContactStore`` owns a ``ContactState`` snapshot and replaces it on every
transition. Views subscribe to be told when a new snapshot is available.
Operations never raise: API failures end up in ``state.error`` with
``state.status`` set to ``Status.failed``.
"""

import enum
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Optional

from pydantic import ValidationError

from contactbook.client.api import ApiError, ContactService
from contactbook.contacts.schemas import ContactCreate, ContactResponse, ContactUpdate

logger = logging.getLogger(__name__)


class Status(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    succeeded = "succeeded"
    failed = "failed"


@dataclass(frozen=True)
class ContactState:
    contacts: list[ContactResponse] = field(default_factory=list)
    status: Status = Status.idle
    error: Optional[str] = None


Listener = Callable[[ContactState], None]


def _same_id(contact: ContactResponse, contact_id: str | uuid.UUID) -> bool:
    return str(contact.id) == str(contact_id)


class ContactStore:
    def __init__(self, service: ContactService, state: Optional[ContactState] = None):
        self.service = service
        self._state = state or ContactState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ContactState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    # -- transitions ----------------------------------------------------

    def _pending(self) -> None:
        self._set(status=Status.loading, error=None)

    def _rejected(self, action: str, exc: Exception) -> None:
        if isinstance(exc, ApiError):
            message = exc.message
        elif isinstance(exc, ValidationError):
            message = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
            )
        else:
            message = str(exc)
        logger.warning("Failed to %s: %s", action, message)
        self._set(status=Status.failed, error=message)

    def reject(self, action: str, exc: Exception) -> None:
        """Record a failure raised before any request was sent, e.g. bad form input."""
        self._rejected(action, exc)

    def clear_error(self) -> None:
        self._set(error=None)

    def reset_status(self) -> None:
        self._set(status=Status.idle)

    # -- async operations -----------------------------------------------

    async def fetch_all(self) -> None:
        self._pending()
        try:
            contacts = await self.service.get_contacts()
        except (ApiError, ValidationError) as exc:
            self._rejected("fetch contacts", exc)
            return
        self._set(status=Status.succeeded, contacts=contacts)

    async def add(self, contact: ContactCreate) -> Optional[ContactResponse]:
        self._pending()
        try:
            created = await self.service.create_contact(contact)
        except (ApiError, ValidationError) as exc:
            self._rejected("add contact", exc)
            return None
        # Read the list at settle time so concurrent operations are not lost.
        self._set(status=Status.succeeded, contacts=[*self._state.contacts, created])
        return created

    async def update(self, contact_id: str | uuid.UUID, changes: ContactUpdate) -> Optional[ContactResponse]:
        self._pending()
        try:
            updated = await self.service.update_contact(contact_id, changes)
        except (ApiError, ValidationError) as exc:
            self._rejected("update contact", exc)
            return None
        contacts = [updated if _same_id(c, updated.id) else c for c in self._state.contacts]
        self._set(status=Status.succeeded, contacts=contacts)
        return updated

    async def delete(self, contact_id: str | uuid.UUID) -> bool:
        self._pending()
        try:
            await self.service.delete_contact(contact_id)
        except ApiError as exc:
            self._rejected("delete contact", exc)
            return False
        contacts = [c for c in self._state.contacts if not _same_id(c, contact_id)]
        self._set(status=Status.succeeded, contacts=contacts)
        return True
