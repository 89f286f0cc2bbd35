"""
usctl - Userscripts command-line tool.

Resolve, inspect and run user scripts outside of a host application.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
