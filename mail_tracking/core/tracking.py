"""
Assertions over emails sent while a test runs.
"""

from typing import Optional, Self

from django.core.mail import EmailMessage

from mail_tracking.core.exceptions import (
    MailAssertionError,
    MailTrackingError,
    NoEmailsSentError,
)
from mail_tracking.core.ledger import MailLedger
from mail_tracking.core.messages import Email, as_email
from mail_tracking.core.recorder import Registration, register_recorder


class MailTracker:
    """
    Records emails sent during a test, and checks them.

    Assertions check the most recently sent email unless one is passed
    in explicitly. Every assertion returns the tracker, so they can be
    chained:

        tracker.assert_sent_count(1).assert_to("user@example.com")
    """

    def __init__(self, targets: Optional[list[str]] = None):
        self.ledger = MailLedger()
        self.targets = targets
        self._registration: Optional[Registration] = None

    def __enter__(self):
        return self.start()

    def __exit__(self, *args):
        self.stop()

    @property
    def is_tracking(self):
        return self._registration is not None and self._registration.active

    def start(self) -> Self:
        """Begin recording outgoing mail."""

        if self.is_tracking:
            raise MailTrackingError("Mail tracker has already been started.")

        self._registration = register_recorder(self.ledger, targets=self.targets)
        return self

    def stop(self):
        """Stop recording, recorded emails stay available."""

        if self._registration is None:
            return

        self._registration.unregister()
        self._registration = None

    ##########################
    # Recorded emails
    ##########################

    @property
    def emails(self) -> tuple[Email, ...]:
        return self.ledger.all()

    @property
    def last_email(self) -> Optional[Email]:
        return self.ledger.last()

    def count(self) -> int:
        return self.ledger.count()

    def emails_to(self, address: str) -> list[Email]:
        """All emails sent to address, oldest first."""
        return self.ledger.filter(to=address)

    def emails_from(self, address: str) -> list[Email]:
        """All emails sent from address, oldest first."""
        return self.ledger.filter(from_=address)

    def get_email(self, email: Optional[Email | EmailMessage] = None) -> Email:
        """Return given email, or the last one sent."""

        if self.count() == 0:
            raise NoEmailsSentError(
                "No emails have been sent, there is no email to check."
            )

        if email is None:
            return self.ledger.last()

        return as_email(email)

    def _check(self, condition: bool, msg: str) -> Self:
        if not condition:
            raise MailAssertionError(msg)

        return self

    ##########################
    # Assertions
    ##########################

    def assert_sent_count(self, count: int) -> Self:
        """Exactly `count` emails should have been sent."""

        sent = self.count()
        return self._check(
            sent == count,
            f"Expected {count} emails to have been sent, but {sent} were.",
        )

    def assert_any_sent(self) -> Self:
        """At least one email should have been sent."""

        return self._check(self.count() > 0, "No emails sent.")

    def assert_none_sent(self) -> Self:
        """No emails should have been sent."""

        sent = self.count()
        return self._check(
            sent == 0,
            f"Did not expect any emails to have been sent, but {sent} were.",
        )

    def assert_subject(
        self, subject: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """Email subject should match exactly."""

        actual = self.get_email(email).subject
        return self._check(
            actual == subject,
            f"No email with a subject of {subject!r} was found, got {actual!r}.",
        )

    def assert_subject_contains(
        self, excerpt: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """Email subject should include the excerpt."""

        actual = self.get_email(email).subject
        return self._check(
            excerpt in actual,
            f"No email with a subject containing {excerpt!r} was found, "
            f"got {actual!r}.",
        )

    def assert_body_equals(
        self, body: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """Email body should match exactly."""

        actual = self.get_email(email).body
        return self._check(
            actual == body,
            f"No email with the body {body!r} was sent, got {actual!r}.",
        )

    def assert_body_contains(
        self, excerpt: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """Email body should include the excerpt."""

        return self._check(
            excerpt in self.get_email(email).body,
            f"No email containing {excerpt!r} in its body was found.",
        )

    def assert_from(
        self,
        address: str,
        email: Optional[Email | EmailMessage] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Email should have been sent from the address.

        Only the address is checked unless a display name is given.
        """

        senders = self.get_email(email).from_addresses
        self._check(address in senders, f"No email was sent from {address}.")

        if name is not None:
            self._check(
                senders[address] == name,
                f"No email was sent from {name} <{address}>, "
                f"got {senders[address] or 'EMPTY'}.",
            )

        return self

    def assert_to(
        self,
        address: str,
        email: Optional[Email | EmailMessage] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Email should have been sent to the address.

        Only the address is checked unless a display name is given.
        """

        recipients = self.get_email(email).to_addresses
        self._check(address in recipients, f"No email was sent to {address}.")

        if name is not None:
            self._check(
                recipients[address] == name,
                f"No email was sent to {name} <{address}>, "
                f"got {recipients[address] or 'EMPTY'}.",
            )

        return self

    def assert_in_bodies(self, substring: str) -> Self:
        """
        Every sent email should include the substring in its body.

        Html alternatives are used as the body when an email has one.
        """

        self.get_email()

        for email in self.emails:
            body = getattr(email, "html_body", None) or email.body
            self._check(
                substring in body,
                f"Email {email} does not contain {substring!r} in its body.",
            )

        return self
