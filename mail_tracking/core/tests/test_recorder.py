from unittest import mock

from django.core import mail
from django.test import override_settings

from mail_tracking.abstracts.tests import TestsBase
from mail_tracking.core.ledger import MailLedger
from mail_tracking.core.recorder import MailRecorder, register_recorder
from mail_tracking.core.tests.utils import create_test_message, fake


class MailRecorderTests(TestsBase):
    """Unit tests for the recording email backend."""

    def setUp(self):
        super().setUp()
        self.ledger = MailLedger()

    def test_send_messages(self):
        """Should record each message in order and return the count."""

        messages = [create_test_message(subject=f"Email {i}") for i in range(3)]
        recorder = MailRecorder(self.ledger)

        sent = recorder.send_messages(messages)

        self.assertEqual(sent, 3)
        self.assertEqual(
            [email.subject for email in self.ledger],
            ["Email 0", "Email 1", "Email 2"],
        )

    def test_send_no_messages(self):
        """Should record nothing for an empty list."""

        recorder = MailRecorder(self.ledger)

        self.assertEqual(recorder.send_messages([]), 0)
        self.assertEqual(recorder.send_messages(None), 0)
        self.assertEqual(self.ledger.count(), 0)

    def test_malformed_message_raises(self):
        """Should let errors from malformed messages propagate."""

        recorder = MailRecorder(self.ledger)

        with self.assertRaises(AttributeError):
            recorder.send_messages([object()])

        self.assertEqual(self.ledger.count(), 0)

    @mock.patch("mail_tracking.core.recorder.print_error")
    def test_malformed_message_fail_silently(self, mock_print_error):
        """Should log and skip malformed messages when failing silently."""

        recorder = MailRecorder(self.ledger, fail_silently=True)

        sent = recorder.send_messages([object(), create_test_message()])

        self.assertEqual(sent, 1)
        self.assertEqual(self.ledger.count(), 1)
        mock_print_error.assert_called_once()


class RegisterRecorderTests(TestsBase):
    """Unit tests for routing django mail to a recorder."""

    def setUp(self):
        super().setUp()
        self.ledger = MailLedger()

    def test_register_records_sent_mail(self):
        """Should record mail sent through django's mail api."""

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)

        mail.send_mail(
            subject="Hi",
            message="Hello world",
            from_email="admin@example.com",
            recipient_list=["a@x.com"],
        )

        self.assertEqual(self.ledger.count(), 1)
        self.assertEqual(self.ledger.last().subject, "Hi")
        self.assertEqual(getattr(mail, "outbox", []), [])

    def test_register_records_message_send(self):
        """Should record mail sent from message objects."""

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)

        message = create_test_message()
        message.send()

        self.assertIs(self.ledger.last().message, message)

    def test_register_records_admin_mail(self):
        """Should record mail sent to site admins and managers."""

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)

        mail.mail_admins(fake.sentence(), fake.paragraph())
        mail.mail_managers(fake.sentence(), fake.paragraph())

        self.assertEqual(self.ledger.count(), 2)
        self.assertIn("admin@example.com", self.ledger.all()[0].to_addresses)
        self.assertIn("manager@example.com", self.ledger.all()[1].to_addresses)

    def test_register_ignores_requested_backend(self):
        """Should record mail even when a specific backend is requested."""

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)

        connection = mail.get_connection(
            "django.core.mail.backends.smtp.EmailBackend", fail_silently=True
        )

        self.assertIsInstance(connection, MailRecorder)
        self.assertTrue(connection.fail_silently)

    def test_unregister(self):
        """Should restore django's mail connection after unregistering."""

        original = mail.get_connection
        registration = register_recorder(self.ledger)

        self.assertIsNot(mail.get_connection, original)
        self.assertTrue(registration.active)

        registration.unregister()
        registration.unregister()

        self.assertIs(mail.get_connection, original)
        self.assertFalse(registration.active)

    def test_separate_ledgers(self):
        """Should only record mail into the registered ledger."""

        other = MailLedger()

        registration = register_recorder(other)
        mail.send_mail("First", "Body", "admin@example.com", ["a@x.com"])
        registration.unregister()

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)
        mail.send_mail("Second", "Body", "admin@example.com", ["a@x.com"])

        self.assertEqual([e.subject for e in other], ["First"])
        self.assertEqual([e.subject for e in self.ledger], ["Second"])

    @override_settings(
        MAIL_TRACKING_CONNECTION_TARGETS=[
            "django.core.mail.get_connection",
            "mail_tracking.core.tests.test_recorder.get_connection",
        ]
    )
    def test_register_configured_targets(self):
        """Should patch every connection target in settings."""

        registration = register_recorder(self.ledger)
        self.addCleanup(registration.unregister)

        self.assertIsInstance(get_connection(), MailRecorder)

    def test_register_bad_target(self):
        """Should undo earlier patches if a target cannot be patched."""

        original = mail.get_connection

        with self.assertRaises((AttributeError, ModuleNotFoundError)):
            register_recorder(
                self.ledger,
                targets=["django.core.mail.get_connection", "mail_tracking.missing.x"],
            )

        self.assertIs(mail.get_connection, original)


# Stand in for an app module that imported `get_connection` directly.
get_connection = mail.get_connection


class OverlappingRegistrationsTests(TestsBase):
    """Unit tests for several ledgers registered at the same time."""

    def test_unregister_out_of_order(self):
        """Should restore django's mail connection whatever the unregister order."""

        original = mail.get_connection
        first, second = MailLedger(), MailLedger()

        r1 = register_recorder(first)
        r2 = register_recorder(second)
        r1.unregister()

        mail.send_mail("Hi", "Body", "admin@example.com", ["a@x.com"])
        r2.unregister()

        self.assertIs(mail.get_connection, original)
        self.assertEqual(first.count(), 0)
        self.assertEqual(second.count(), 1)

    def test_every_ledger_records(self):
        """Should record each email into every registered ledger."""

        first, second = MailLedger(), MailLedger()

        r1 = register_recorder(first)
        self.addCleanup(r1.unregister)
        mail.send_mail("Before", "Body", "admin@example.com", ["a@x.com"])

        r2 = register_recorder(second)
        mail.send_mail("During", "Body", "admin@example.com", ["a@x.com"])
        r2.unregister()

        mail.send_mail("After", "Body", "admin@example.com", ["a@x.com"])

        self.assertEqual([e.subject for e in first], ["Before", "During", "After"])
        self.assertEqual([e.subject for e in second], ["During"])

    def test_recorder_many_ledgers(self):
        """Should record each message once into each ledger given."""

        first, second = MailLedger(), MailLedger()
        recorder = MailRecorder([first, second])

        sent = recorder.send_messages([create_test_message(subject="Hi")])

        self.assertEqual(sent, 1)
        self.assertEqual(first.last().subject, "Hi")
        self.assertIs(first.last(), second.last())
