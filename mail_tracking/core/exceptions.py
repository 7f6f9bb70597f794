"""
Errors raised while tracking and asserting on sent emails.
"""


class MailTrackingError(Exception):
    """Mail tracker was used outside of its lifecycle."""


class MailAssertionError(AssertionError):
    """A recorded email did not match what the test expected."""


class NoEmailsSentError(AssertionError):
    """
    An assertion needed an email to check, but none were sent.

    Kept separate from `MailAssertionError` so a test can tell "nothing
    was sent" apart from "the wrong thing was sent".
    """
