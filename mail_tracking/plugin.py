"""
Pytest fixtures for mail tracking.

Enable in a conftest.py with:

    pytest_plugins = ["mail_tracking.plugin"]
"""

import pytest

from mail_tracking.core.tracking import MailTracker


@pytest.fixture
def mail_tracker():
    """Tracker that records emails sent during the test."""

    tracker = MailTracker()
    with tracker:
        yield tracker
