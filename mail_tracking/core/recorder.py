"""
Email backend that records messages instead of delivering them.
"""

import logging
from typing import Optional
from unittest import mock

from django.core.mail import EmailMessage
from django.core.mail.backends.base import BaseEmailBackend

from mail_tracking.conf import get_connection_targets
from mail_tracking.core.ledger import MailLedger
from mail_tracking.core.messages import RecordedEmail
from mail_tracking.utils.logging import print_error


class MailRecorder(BaseEmailBackend):
    """
    Passes every message django tries to send over to ledgers.

    Nothing leaves the process, the message is recorded in place of
    being delivered.
    """

    def __init__(
        self, ledgers: MailLedger | list[MailLedger], fail_silently=False, **kwargs
    ):
        super().__init__(fail_silently=fail_silently, **kwargs)

        if isinstance(ledgers, MailLedger):
            ledgers = [ledgers]

        self.ledgers = ledgers

    def send_messages(self, email_messages: Optional[list[EmailMessage]]) -> int:
        """Record messages in the order given, return number recorded."""

        if not email_messages:
            return 0

        recorded = 0
        for message in email_messages:
            try:
                email = RecordedEmail.from_message(message)
            except Exception as e:
                if not self.fail_silently:
                    raise

                print_error(exc=e)
                continue

            for ledger in self.ledgers:
                ledger.record(email)
            recorded += 1

            logging.debug(f"Recorded email {email}.")

        return recorded


# Ledgers currently receiving mail, oldest first.
_active_ledgers: list[MailLedger] = []

# Target path -> (patcher, number of registrations using it).
_patchers: dict[str, tuple] = {}


def _get_connection(backend=None, fail_silently=False, **kwds):
    return MailRecorder(_active_ledgers, fail_silently=fail_silently, **kwds)


def _acquire_target(target: str):
    if target in _patchers:
        patcher, count = _patchers[target]
        _patchers[target] = (patcher, count + 1)
        return

    patcher = mock.patch(target, new=_get_connection)
    patcher.start()
    _patchers[target] = (patcher, 1)

    logging.debug(f"Registered mail recorder at {target}.")


def _release_target(target: str):
    patcher, count = _patchers[target]

    if count > 1:
        _patchers[target] = (patcher, count - 1)
        return

    del _patchers[target]
    patcher.stop()

    logging.debug(f"Unregistered mail recorder from {target}.")


class Registration:
    """
    A ledger receiving outgoing mail.

    Every target is patched once no matter how many ledgers are
    registered, and restored when the last registration using it
    is removed. Registrations can be removed in any order.
    """

    def __init__(self, ledger: MailLedger, targets: list[str]):
        self.ledger = ledger
        self._targets = targets

    @property
    def active(self):
        return any(ledger is self.ledger for ledger in _active_ledgers)

    def unregister(self):
        """Stop sending mail to the ledger, restore `get_connection` if unused."""

        if not self.active:
            return

        for i, ledger in enumerate(_active_ledgers):
            if ledger is self.ledger:
                del _active_ledgers[i]
                break

        for target in reversed(self._targets):
            _release_target(target)


def register_recorder(
    ledger: MailLedger, targets: Optional[list[str]] = None
) -> Registration:
    """
    Make django hand all outgoing mail to a recorder that includes the ledger.

    Each target is a dotted path to a `get_connection` function, the
    default comes from the `MAIL_TRACKING_CONNECTION_TARGETS` setting.
    While several ledgers are registered, each one records every email.
    """

    if targets is None:
        targets = get_connection_targets()

    acquired = []
    try:
        for target in targets:
            _acquire_target(target)
            acquired.append(target)
    except Exception:
        for target in reversed(acquired):
            _release_target(target)
        raise

    _active_ledgers.append(ledger)
    return Registration(ledger, acquired)
