"""
usctl query command (-Q).

Resolve dependencies and list scripts in dependency order without running
any of their hooks.
"""

import asyncio

from usctl.cli import CLIError
from userscripts import ScriptLoader
from userscripts.config import Settings
from userscripts.core.notify import report_error
from userscripts.plugin.errors import CyclicDependencyError
from userscripts.plugin.lifecycle import LifecycleManager
from userscripts.plugin.registry import Script


def query_command(settings: Settings) -> int:
    """
    Execute query command.

    Returns:
        Exit code (0 if every dependency resolved)

    Raises:
        CLIError: If resolution fails or the scripts depend on each other in
            a cycle
    """
    return asyncio.run(query_async(settings))


def format_script(script: Script) -> str:
    """One line per script: name, origin and dependency aliases."""
    line = f"{script.name} [{script.origin.value}]"
    if script.uri:
        line += f" <{script.uri}>"
    aliases = sorted(edge.alias for edge in (script.dependencies or {}).values())
    if aliases:
        line += f" needs: {', '.join(aliases)}"
    return line


async def query_async(settings: Settings) -> int:
    """Async query implementation."""
    loader = ScriptLoader.from_settings(settings)
    try:
        registry, result = await loader.resolve()
    finally:
        await loader.aclose()

    if not result.converged:
        raise CLIError(f"Failed to resolve dependencies: {result.error}")

    try:
        scripts = LifecycleManager(registry, loader.notifier).order()
    except CyclicDependencyError as e:
        report_error(loader.notifier, e)
        raise CLIError(str(e)) from e

    for script in scripts:
        print(format_script(script))
    return 0
