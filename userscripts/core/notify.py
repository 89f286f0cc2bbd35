"""
Notifier - Host notification sink.

The loader never raises per-script failures to its caller. Everything the
user should see goes through a Notifier: plain status messages via notify()
and failures via notify_error().

Key features:
- Notifier protocol for host integration
- LoggingNotifier default that writes to the standard logging system
- report_error() to format a ScriptError with its cause and traceback
"""

import logging
import traceback
from typing import Protocol

from userscripts.plugin.errors import ScriptError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Fire-and-forget sink for human-readable messages."""

    def notify(self, message: str) -> None: ...

    def notify_error(self, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that forwards messages to a logger."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def notify(self, message: str) -> None:
        self._log.info(message)

    def notify_error(self, title: str, message: str) -> None:
        self._log.error("%s: %s", title, message)


def report_error(notifier: Notifier, error: ScriptError) -> None:
    """
    Report an error to the notifier.

    The message is built from the underlying cause when there is one, so the
    user sees the script's own exception and where it was raised.

    Args:
        notifier: Notification sink
        error: Error to report
    """
    cause = error.__cause__ or error
    details = "".join(
        traceback.format_exception(type(cause), cause, cause.__traceback__)
    )
    logger.debug("Reporting %s", error.title, exc_info=cause)
    notifier.notify_error(error.title, f"{cause}:\n{details}")
