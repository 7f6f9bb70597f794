"""
Record emails sent by django during a test, and assert on them.
"""

from mail_tracking.core.exceptions import (
    MailAssertionError,
    MailTrackingError,
    NoEmailsSentError,
)
from mail_tracking.core.ledger import MailLedger
from mail_tracking.core.messages import Email, RecordedEmail
from mail_tracking.core.recorder import MailRecorder, register_recorder
from mail_tracking.core.tracking import MailTracker

__all__ = [
    "Email",
    "MailAssertionError",
    "MailLedger",
    "MailRecorder",
    "MailTracker",
    "MailTrackingError",
    "NoEmailsSentError",
    "RecordedEmail",
    "register_recorder",
]
