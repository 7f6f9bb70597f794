from typing import Optional

from django.core import mail
from faker import Faker

from mail_tracking.core.messages import RecordedEmail

fake = Faker()


def create_test_message(
    to: Optional[list[str]] = None, html_body: Optional[str] = None, **kwargs
):
    """Create django email message for testing purposes."""

    payload = {
        "subject": fake.sentence(nb_words=4),
        "body": fake.paragraph(nb_sentences=5),
        "from_email": fake.safe_email(),
        "to": to or [fake.safe_email()],
        **kwargs,
    }

    message = mail.EmailMultiAlternatives(**payload)

    if html_body:
        message.attach_alternative(html_body, "text/html")

    return message


def create_test_email(**kwargs) -> RecordedEmail:
    """Create recorded email snapshot for testing purposes."""

    return RecordedEmail.from_message(create_test_message(**kwargs))


def create_test_emails(count=5, **kwargs) -> list[RecordedEmail]:
    """Create multiple recorded emails."""

    return [create_test_email(**kwargs) for _ in range(count)]
