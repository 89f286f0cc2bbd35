"""
Dependency Resolver.

Repeats discovery and fetch rounds until every declared dependency is
present in the registry.

Each round loads the scripts cached so far, computes the dependencies
that are still missing, and downloads them. Rounds run strictly one after
another; the downloads within a round run concurrently.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from userscripts.core.notify import LoggingNotifier, Notifier, report_error
from userscripts.plugin.errors import ResolutionError
from userscripts.plugin.fetcher import Fetcher
from userscripts.plugin.naming import is_local, script_filename
from userscripts.plugin.registry import ScriptRegistry

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """
    Outcome of a resolution run.

    Attributes:
        converged: True if no dependency is missing anymore
        rounds: Number of fetch rounds performed
        error: The failure that stopped resolution, if any
    """

    converged: bool
    rounds: int = 0
    error: ResolutionError | None = None


class Resolver:
    """Drives a registry to a closed dependency graph."""

    def __init__(
        self,
        registry: ScriptRegistry,
        fetcher: Fetcher,
        cache_dir: Path,
        notifier: Notifier | None = None,
    ):
        self.registry = registry
        self.fetcher = fetcher
        self.cache_dir = cache_dir
        self.notifier = notifier or LoggingNotifier()

    def load_local(self, local_dir: Path) -> None:
        """Register every script in the local directory."""
        self.registry.merge(self.registry.discover(local_dir), lambda name: True)
        self.registry.resolve_dependencies()

    def load_remote(self) -> None:
        """Register cached scripts that are local or depended upon."""
        self.registry.merge(self.registry.discover(self.cache_dir), self._admits)
        self.registry.resolve_dependencies()

    def _admits(self, name: str) -> bool:
        return is_local(name) or self.registry.is_depended_upon(name)

    async def resolve(self) -> ResolveResult:
        """
        Fetch missing dependencies until none are left.

        Status messages are sent to the notifier for every fetch round. The
        closing "finished" message is only sent if something was fetched.
        The first fetch failure is reported and stops resolution.

        Returns:
            ResolveResult
        """
        rounds = 0

        while True:
            self.load_remote()
            missing = self.registry.missing_dependencies()

            if not missing:
                if rounds:
                    self.notifier.notify("Finished retrieving dependencies.")
                logger.info(
                    "Resolved %d scripts after %d fetch rounds",
                    len(self.registry),
                    rounds,
                )
                return ResolveResult(converged=True, rounds=rounds)

            self.notifier.notify(
                "Retrieving dependencies:\n{}".format("\n".join(missing))
            )
            queue = {uri: script_filename(name) for uri, name in missing.items()}

            try:
                await self.fetcher.fetch_all(self.cache_dir, queue)
            except ResolutionError as e:
                report_error(self.notifier, e)
                return ResolveResult(converged=False, rounds=rounds, error=e)

            rounds += 1
