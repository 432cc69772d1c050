import enum
from datetime import date
from typing import Optional

from sqlalchemy import JSON, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from contactbook.common.base_models import TimestampMixin, UUIDBase


class PhoneType(str, enum.Enum):
    mobile = "Mobile"
    work = "Work"
    home = "Home"
    other = "Other"


class EmailType(str, enum.Enum):
    personal = "Personal"
    work = "Work"
    other = "Other"


class Contact(UUIDBase, TimestampMixin):
    __tablename__ = "contacts"

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    name: Mapped[str] = mapped_column(String(201), nullable=False, index=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    dob: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    # Ordered lists of {"type": ..., "number": ...} / {"type": ..., "address": ...}
    phones: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    emails: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
