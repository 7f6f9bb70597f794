"""
Package settings, read from django settings with defaults.
"""

from django.conf import settings

DEFAULT_CONNECTION_TARGETS = ["django.core.mail.get_connection"]


def get_connection_targets() -> list[str]:
    """Dotted paths to `get_connection` that get swapped for the recorder."""

    targets = getattr(
        settings, "MAIL_TRACKING_CONNECTION_TARGETS", DEFAULT_CONNECTION_TARGETS
    )
    return list(targets)


def is_testing() -> bool:
    return bool(getattr(settings, "TESTING", False))


def get_default_from_email() -> str:
    return settings.DEFAULT_FROM_EMAIL
