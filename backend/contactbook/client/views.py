"""
Console presentation for contacts: the editable form draft, the list
table, the detail panel and one-shot error notifications.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from contactbook.client.store import ContactStore, Status
from contactbook.contacts.models import EmailType, PhoneType
from contactbook.contacts.schemas import ContactCreate, ContactResponse, ContactUpdate, EmailEntry, PhoneEntry

console = Console()


def _blank_phone() -> PhoneEntry:
    return PhoneEntry(type=PhoneType.mobile, number="")


def _blank_email() -> EmailEntry:
    return EmailEntry(type=EmailType.personal, address="")


@dataclass
class ContactForm:
    """Draft of a contact being created or edited.

    Always holds at least one phone and one email entry; an untouched
    placeholder is dropped by the server when the form is submitted.
    """

    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    dob: str = ""
    phones: list[PhoneEntry] = field(default_factory=lambda: [_blank_phone()])
    emails: list[EmailEntry] = field(default_factory=lambda: [_blank_email()])
    contact_id: Optional[uuid.UUID] = None

    @classmethod
    def from_contact(cls, contact: ContactResponse) -> "ContactForm":
        return cls(
            first_name=contact.first_name or "",
            last_name=contact.last_name or "",
            nickname=contact.nickname or "",
            dob=contact.dob.isoformat() if contact.dob else "",
            phones=[p.model_copy() for p in contact.phones] or [_blank_phone()],
            emails=[e.model_copy() for e in contact.emails] or [_blank_email()],
            contact_id=contact.id,
        )

    @property
    def is_edit(self) -> bool:
        return self.contact_id is not None

    def add_phone(self, kind: PhoneType = PhoneType.mobile, number: str = "") -> None:
        # Fill the placeholder before growing the list.
        if len(self.phones) == 1 and not (self.phones[0].number or "").strip():
            self.phones[0] = PhoneEntry(type=kind, number=number)
        else:
            self.phones.append(PhoneEntry(type=kind, number=number))

    def remove_phone(self, index: int) -> None:
        del self.phones[index]
        if not self.phones:
            self.phones.append(_blank_phone())

    def add_email(self, kind: EmailType = EmailType.personal, address: str = "") -> None:
        if len(self.emails) == 1 and not (self.emails[0].address or "").strip():
            self.emails[0] = EmailEntry(type=kind, address=address)
        else:
            self.emails.append(EmailEntry(type=kind, address=address))

    def remove_email(self, index: int) -> None:
        del self.emails[index]
        if not self.emails:
            self.emails.append(_blank_email())

    def to_payload(self) -> ContactCreate:
        model = ContactUpdate if self.is_edit else ContactCreate
        return model(
            first_name=self.first_name,
            last_name=self.last_name,
            nickname=self.nickname,
            dob=self.dob or None,
            phones=self.phones,
            emails=self.emails,
        )

    async def submit(self, store: ContactStore) -> Optional[ContactResponse]:
        try:
            payload = self.to_payload()
        except ValidationError as exc:
            store.reject("update contact" if self.is_edit else "add contact", exc)
            return None
        if self.is_edit:
            return await store.update(self.contact_id, payload)
        return await store.add(payload)


def _first(values: list[str]) -> str:
    return values[0] if values else ""


def render_contact_list(contacts: list[ContactResponse], out: Optional[Console] = None) -> Table:
    out = out or console
    table = Table(title="Contacts", box=box.SIMPLE_HEAVY)
    table.add_column("Name", style="bold")
    table.add_column("Nickname")
    table.add_column("Phone")
    table.add_column("Email")
    table.add_column("ID", style="dim")

    for contact in contacts:
        table.add_row(
            contact.name,
            contact.nickname or "",
            _first([p.number for p in contact.phones if p.number]),
            _first([e.address for e in contact.emails if e.address]),
            str(contact.id),
        )

    if contacts:
        out.print(table)
    else:
        out.print("[dim]No contacts yet.[/dim]")
    return table


def render_contact_detail(contact: ContactResponse, out: Optional[Console] = None) -> Panel:
    out = out or console
    body = Text()
    if contact.first_name:
        body.append(f"First name: {contact.first_name}\n")
    if contact.last_name:
        body.append(f"Last name:  {contact.last_name}\n")
    if contact.nickname:
        body.append(f"Nickname:   {contact.nickname}\n")
    if contact.dob:
        body.append(f"Born:       {contact.dob.isoformat()}\n")

    for phone in contact.phones:
        body.append(f"{phone.type.value:<9}   {phone.number}\n", style="cyan")
    for email in contact.emails:
        body.append(f"{email.type.value:<9}   {email.address}\n", style="green")

    body.append(f"\nCreated {contact.created_at:%Y-%m-%d %H:%M}", style="dim")
    body.append(f"  Updated {contact.updated_at:%Y-%m-%d %H:%M}", style="dim")

    panel = Panel(body, title=contact.name, subtitle=str(contact.id), box=box.ROUNDED)
    out.print(panel)
    return panel


def show_notification(store: ContactStore, out: Optional[Console] = None) -> Optional[str]:
    """Print the pending error once and clear it; returns what was shown."""
    out = out or console
    state = store.state
    if state.status is Status.failed and state.error:
        out.print(f"[bold red]Error:[/bold red] {state.error}")
        store.clear_error()
        return state.error
    return None
