"""
Userscripts Plugin System - Script discovery, resolution and lifecycle.

This module handles:
- Script naming (URI <-> name <-> filename)
- Dynamic loading of script directories
- Dependency fetching until the graph is closed
- Dependency-ordered init/enable and reverse-ordered disable
"""

__all__ = []
