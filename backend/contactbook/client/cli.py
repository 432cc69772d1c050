"""
Command line front end for the contacts API.

Usage:
    contactbook list
    contactbook show <id>
    contactbook add --first Ann --last Smith --phone Mobile:555-0100 --email Work:ann@example.com
    contactbook edit <id> --first Anna
    contactbook delete <id>
"""

import argparse
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from contactbook.client.api import ApiError, ContactService
from contactbook.client.store import ContactStore, Status
from contactbook.client.views import (
    ContactForm,
    console,
    render_contact_detail,
    render_contact_list,
    show_notification,
)
from contactbook.config import settings
from contactbook.contacts.models import EmailType, PhoneType
from contactbook.log_config import setup_logging

log = logging.getLogger(__name__)


def _typed_value(raw: str, enum_cls, default):
    """Split ``Type:value``; a bare value gets the default type."""
    kind, sep, value = raw.partition(":")
    if sep and kind.capitalize() in {member.value for member in enum_cls}:
        return enum_cls(kind.capitalize()), value
    return default, raw


def _add_field_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--first", dest="first_name", help="First name")
    parser.add_argument("--last", dest="last_name", help="Last name")
    parser.add_argument("--nickname", help="Nickname")
    parser.add_argument("--dob", help="Date of birth (YYYY-MM-DD)")
    parser.add_argument(
        "--phone", action="append", default=[], metavar="[TYPE:]NUMBER", help="Mobile, Work, Home or Other"
    )
    parser.add_argument(
        "--email", action="append", default=[], metavar="[TYPE:]ADDRESS", help="Personal, Work or Other"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contactbook", description="Manage contacts")
    parser.add_argument("--api", default=settings.api_base_url, help="Contacts API base URL")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all contacts")

    show = sub.add_parser("show", help="Show one contact")
    show.add_argument("contact_id")

    add = sub.add_parser("add", help="Create a contact")
    _add_field_arguments(add)

    edit = sub.add_parser("edit", help="Update a contact")
    edit.add_argument("contact_id")
    _add_field_arguments(edit)

    delete = sub.add_parser("delete", help="Delete a contact")
    delete.add_argument("contact_id")
    return parser


def _apply_arguments(form: ContactForm, args: argparse.Namespace) -> None:
    for attr in ("first_name", "last_name", "nickname", "dob"):
        value = getattr(args, attr)
        if value is not None:
            setattr(form, attr, value)
    for raw in args.phone:
        kind, number = _typed_value(raw, PhoneType, PhoneType.mobile)
        form.add_phone(kind, number)
    for raw in args.email:
        kind, address = _typed_value(raw, EmailType, EmailType.personal)
        form.add_email(kind, address)


async def run_command(args: argparse.Namespace, store: ContactStore) -> int:
    if args.command == "list":
        if store.state.status is Status.idle:
            await store.fetch_all()
        if show_notification(store):
            return 1
        render_contact_list(store.state.contacts)
        return 0

    if args.command in ("show", "edit"):
        try:
            match = await store.service.get_contact(args.contact_id)
        except (ApiError, ValidationError) as exc:
            store.reject("fetch contact", exc)
            show_notification(store)
            return 1
        if args.command == "show":
            render_contact_detail(match)
            return 0
        form = ContactForm.from_contact(match)
    elif args.command == "add":
        form = ContactForm()
    else:
        deleted = await store.delete(args.contact_id)
        if not deleted:
            show_notification(store)
            return 1
        console.print(f"Deleted contact {args.contact_id}")
        return 0

    _apply_arguments(form, args)
    saved = await form.submit(store)
    if saved is None:
        show_notification(store)
        return 1
    render_contact_detail(saved)
    return 0


async def _main(args: argparse.Namespace) -> int:
    async with ContactService(args.api) as service:
        return await run_command(args, ContactStore(service))


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    log.debug("Using API at %s", args.api)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    raise SystemExit(main())
