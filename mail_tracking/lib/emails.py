from typing import Optional

from django.core import mail
from django.utils.html import strip_tags

from mail_tracking.conf import get_default_from_email


def send_html_mail(
    subject: str,
    to: list[str],
    html_body: str,
    from_email: Optional[str] = None,
    text_body=None,
    send_separately=False,
):
    """
    Send HTML email using mail.EmailMultiAlternatives class.

    When `send_separately` is set, each recipient gets their own email
    (ie they will not see eachother in the email app's "to" field).

    Returns the number of emails sent.
    """

    text_body = text_body or strip_tags(html_body)
    from_email = from_email or get_default_from_email()

    recipient_groups = [[email] for email in to] if send_separately else [to]
    sent = 0

    for recipients in recipient_groups:
        message = mail.EmailMultiAlternatives(
            from_email=from_email,
            subject=subject,
            body=text_body,
            to=recipients,
        )
        message.attach_alternative(html_body, "text/html")
        sent += message.send()

    return sent
