"""
Ordered record of emails sent during a single test.
"""

from collections.abc import Iterator
from typing import Optional

from mail_tracking.core.messages import Email


class MailLedger:
    """
    Append-only list of sent emails, in the order they were sent.

    A ledger belongs to one test, there is no way to remove emails
    once recorded. Create a new ledger to start over.
    """

    def __init__(self):
        self._emails: list[Email] = []

    def __len__(self):
        return len(self._emails)

    def __iter__(self) -> Iterator[Email]:
        return iter(tuple(self._emails))

    def __repr__(self):
        return f"<MailLedger emails={len(self._emails)}>"

    def record(self, email: Email):
        """Add email to the end of the ledger."""
        self._emails.append(email)

    def last(self) -> Optional[Email]:
        """Most recently recorded email, or none if nothing was sent."""

        if not self._emails:
            return None

        return self._emails[-1]

    def count(self) -> int:
        return len(self._emails)

    def all(self) -> tuple[Email, ...]:
        return tuple(self._emails)

    def filter(
        self,
        to: Optional[str] = None,
        from_: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> list[Email]:
        """Return emails matching all of the given fields, oldest first."""

        matches = []

        for email in self._emails:
            if to is not None and to not in email.to_addresses:
                continue
            if from_ is not None and from_ not in email.from_addresses:
                continue
            if subject is not None and email.subject != subject:
                continue

            matches.append(email)

        return matches
