"""
Snapshots of sent emails, and the shape assertions expect them in.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from email.utils import parseaddr
from typing import Any, Optional, Protocol, runtime_checkable

from django.core.mail import EmailMessage


@runtime_checkable
class Email(Protocol):
    """Minimum an email needs to expose to be checked by the mail tracker."""

    @property
    def subject(self) -> str: ...

    @property
    def body(self) -> str: ...

    @property
    def from_addresses(self) -> Mapping[str, str]: ...

    @property
    def to_addresses(self) -> Mapping[str, str]: ...


def parse_addresses(addresses: Optional[str | Iterable[str]]) -> dict[str, str]:
    """
    Convert address strings to a mapping of address to display name.

    Accepts a single string, or a list of strings, in either the
    "user@example.com" or "Name <user@example.com>" format.
    """

    if not addresses:
        return {}

    if isinstance(addresses, str):
        addresses = [addresses]

    parsed = {}
    for value in addresses:
        name, address = parseaddr(str(value))
        parsed[address or str(value)] = name

    return parsed


@dataclass(frozen=True)
class RecordedEmail:
    """Read-only copy of an email at the moment it was sent."""

    subject: str
    body: str
    from_addresses: Mapping[str, str]
    to_addresses: Mapping[str, str]
    cc_addresses: Mapping[str, str] = field(default_factory=dict)
    bcc_addresses: Mapping[str, str] = field(default_factory=dict)
    reply_to: tuple[str, ...] = ()
    alternatives: tuple[tuple[Any, str], ...] = ()
    message: Optional[EmailMessage] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_message(cls, message: EmailMessage) -> "RecordedEmail":
        """Take a snapshot of a django email message."""

        alternatives = tuple(
            (alt[0], alt[1]) for alt in getattr(message, "alternatives", None) or []
        )

        return cls(
            subject=message.subject,
            body=message.body,
            from_addresses=parse_addresses(message.from_email),
            to_addresses=parse_addresses(message.to),
            cc_addresses=parse_addresses(message.cc),
            bcc_addresses=parse_addresses(message.bcc),
            reply_to=tuple(message.reply_to or ()),
            alternatives=alternatives,
            message=message,
        )

    @property
    def html_body(self) -> Optional[str]:
        """All html alternatives attached to the email joined together, if any."""

        bodies = [
            content for content, mimetype in self.alternatives if mimetype == "text/html"
        ]

        if len(bodies) == 0:
            return None

        return "\n".join(bodies)

    def __str__(self):
        recipients = ", ".join(self.to_addresses.keys())
        return f"<Email to={recipients or 'EMPTY'} subject={self.subject!r}>"


def as_email(email: Email | EmailMessage) -> Email:
    """Return object as an `Email`, taking a snapshot of django messages."""

    if isinstance(email, EmailMessage):
        return RecordedEmail.from_message(email)

    return email
