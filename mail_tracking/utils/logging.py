"""
Logging and exception utils.
"""

import logging
import traceback
from typing import Optional

from mail_tracking.conf import is_testing


def print_error(print_in_tests=False, exc: Optional[Exception] = None):
    """Log an error with stacktrace that's been handled via try/except."""
    if is_testing() and not print_in_tests:
        return

    if exc:
        tb = "".join(traceback.format_exception(exc))
    else:
        tb = traceback.format_exc()

    logging.warning(tb)
