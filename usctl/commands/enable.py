"""
usctl enable command (-E).

Enable all scripts, keep them running until interrupted, then disable
them in reverse dependency order.
"""

import asyncio
import contextlib

from usctl.cli import CLIError
from userscripts import ScriptLoader
from userscripts.config import Settings


def enable_command(settings: Settings) -> int:
    """
    Execute enable command.

    Returns:
        Exit code (0 once scripts were disabled again)

    Raises:
        CLIError: If the scripts could not be enabled
    """
    with contextlib.suppress(KeyboardInterrupt):
        return asyncio.run(enable_async(settings))
    return 0


async def enable_async(settings: Settings) -> int:
    """Async enable implementation."""
    loader = ScriptLoader.from_settings(settings)
    try:
        if not await loader.enable():
            raise CLIError("Scripts could not be enabled; see the errors above")
        print("Scripts enabled. Press Ctrl-C to disable.")
        await asyncio.Event().wait()
    finally:
        loader.disable()
        await loader.aclose()
    return 0
