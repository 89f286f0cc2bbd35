"""
Userscripts Core - Host-facing collaborators.

This module provides the notifier interface used to surface status and
error messages to whatever host runs the scripts.
"""

from userscripts.core.notify import LoggingNotifier, Notifier, report_error

__all__ = ["LoggingNotifier", "Notifier", "report_error"]
