"""
Script Loader.

This module provides the lifecycle entry points a host calls.

Key features:
- Fresh registry per enable cycle
- Local discovery followed by iterative dependency fetching
- Dependency-ordered init/enable, reverse-ordered disable
- Nothing is enabled unless resolution converges
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from userscripts.config import Settings
from userscripts.core.notify import LoggingNotifier, Notifier, report_error
from userscripts.plugin.errors import CyclicDependencyError
from userscripts.plugin.fetcher import Fetcher
from userscripts.plugin.lifecycle import LifecycleManager
from userscripts.plugin.loader import load_scripts_at
from userscripts.plugin.registry import ScriptRegistry
from userscripts.plugin.resolver import Resolver, ResolveResult

logger = logging.getLogger(__name__)


class ScriptLoader:
    """
    Enables and disables user scripts.

    The registry built by enable() is kept until the matching disable().
    """

    def __init__(
        self,
        local_dir: Path,
        cache_dir: Path,
        notifier: Notifier | None = None,
        fetcher: Fetcher | None = None,
        loader: Callable[[Path], Mapping[str, Any]] = load_scripts_at,
    ):
        """
        Initialize ScriptLoader.

        Args:
            local_dir: Directory of local scripts
            cache_dir: Directory for fetched dependencies
            notifier: Sink for status and error messages
            fetcher: Dependency downloader
            loader: Directory -> {name: module} collaborator
        """
        self.local_dir = Path(local_dir)
        self.cache_dir = Path(cache_dir)
        self.notifier = notifier or LoggingNotifier()
        self.fetcher = fetcher or Fetcher()
        self._loader = loader
        self._registry: ScriptRegistry | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, notifier: Notifier | None = None
    ) -> "ScriptLoader":
        return cls(
            settings.local_dir,
            settings.cache_dir,
            notifier=notifier,
            fetcher=Fetcher(timeout=settings.fetch_timeout),
        )

    @property
    def registry(self) -> ScriptRegistry | None:
        """Registry of the last successful enable(), if still active."""
        return self._registry

    async def resolve(self) -> tuple[ScriptRegistry, ResolveResult]:
        """
        Build a fresh registry and fetch dependencies until it is closed.

        No hooks other than depends() are run.
        """
        registry = ScriptRegistry(self.notifier, loader=self._loader)
        resolver = Resolver(registry, self.fetcher, self.cache_dir, self.notifier)
        resolver.load_local(self.local_dir)
        return registry, await resolver.resolve()

    async def enable(self) -> bool:
        """
        Resolve and enable all scripts.

        Returns:
            True if scripts were enabled
        """
        self._registry = None
        registry, result = await self.resolve()
        if not result.converged:
            logger.info("Dependency resolution failed; no scripts enabled")
            return False

        lifecycle = LifecycleManager(registry, self.notifier)
        try:
            lifecycle.order()
        except CyclicDependencyError as e:
            report_error(self.notifier, e)
            return False

        self._registry = registry
        lifecycle.enable_all()
        return True

    def disable(self) -> None:
        """Disable the scripts of the last successful enable()."""
        registry, self._registry = self._registry, None
        if registry is None:
            return
        LifecycleManager(registry, self.notifier).disable_all()

    async def reload(self) -> bool:
        """Disable and re-enable, picking up edited scripts."""
        self.disable()
        return await self.enable()

    async def aclose(self) -> None:
        await self.fetcher.aclose()
