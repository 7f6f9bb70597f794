from typing import Optional, Self

from django.core.mail import EmailMessage
from django.test import TestCase

from mail_tracking.core.messages import Email
from mail_tracking.core.tracking import MailTracker


class TestsBase(TestCase):
    """Abstract testing utilities."""

    def assertObjFields(self, object, fields: dict):
        """Object fields should match given field values."""
        for key, value in fields.items():
            obj_value = getattr(object, key)
            self.assertEqual(obj_value, value)

    def assertLength(self, target: list, length=1, msg=None):
        """Provided list should be specified length."""
        if msg is None:
            msg = f"Invalid length of {len(target)}, expected {length}."

        self.assertEqual(len(target), length, msg)


class EmailTestsBase(TestsBase):
    """
    Testing utilities for sending emails.

    A new mail tracker is started before each test, and available
    as `self.mail`. Emails from previous tests are never visible.
    """

    mail: MailTracker

    def setUp(self):
        super().setUp()

        self.mail = MailTracker().start()
        self.addCleanup(self.mail.stop)

    def assertEmailsSent(self, count: int) -> Self:
        """The number of sent emails should equal given count."""

        self.mail.assert_sent_count(count)
        return self

    def assertEmailWasSent(self) -> Self:
        """At least one email should have been sent."""

        self.mail.assert_any_sent()
        return self

    def assertEmailWasNotSent(self) -> Self:
        """No emails should have been sent."""

        self.mail.assert_none_sent()
        return self

    def assertEmailSubject(
        self, subject: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """The last email's subject should match the given string."""

        self.mail.assert_subject(subject, email)
        return self

    def assertEmailEquals(
        self, body: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """The last email's body should equal the given text."""

        self.mail.assert_body_equals(body, email)
        return self

    def assertEmailContains(
        self, excerpt: str, email: Optional[Email | EmailMessage] = None
    ) -> Self:
        """The last email's body should contain the given text."""

        self.mail.assert_body_contains(excerpt, email)
        return self

    def assertEmailFrom(
        self,
        sender: str,
        email: Optional[Email | EmailMessage] = None,
        name: Optional[str] = None,
    ) -> Self:
        """The last email should have been sent by the given address."""

        self.mail.assert_from(sender, email, name=name)
        return self

    def assertEmailTo(
        self,
        recipient: str,
        email: Optional[Email | EmailMessage] = None,
        name: Optional[str] = None,
    ) -> Self:
        """The last email should have been sent to the given recipient."""

        self.mail.assert_to(recipient, email, name=name)
        return self

    def assertInEmailBodies(self, substring: str) -> Self:
        """The sent emails should include the substring in the email bodies."""

        self.mail.assert_in_bodies(substring)
        return self
