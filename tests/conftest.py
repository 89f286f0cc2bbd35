"""Shared fixtures for the userscripts test suite."""

import sys
import tempfile
import textwrap
import types
from pathlib import Path

import pytest

EVENTS_MODULE = "userscripts_test_events"


class RecordingNotifier:
    """Notifier that keeps every message for inspection."""

    def __init__(self):
        self.messages: list[str] = []
        self.errors: list[tuple[str, str]] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)

    def notify_error(self, title: str, message: str) -> None:
        self.errors.append((title, message))

    @property
    def error_titles(self) -> list[str]:
        return [title for title, _ in self.errors]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def events():
    """
    Shared event list that test scripts append to.

    Scripts record calls with:
        from userscripts_test_events import events
    """
    module = types.ModuleType(EVENTS_MODULE)
    module.events = []
    sys.modules[EVENTS_MODULE] = module
    yield module.events
    del sys.modules[EVENTS_MODULE]


@pytest.fixture
def dirs():
    """Temporary local and cache script directories."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        local_dir = root / "data" / "userscripts" / "scripts"
        cache_dir = root / "cache" / "userscripts" / "scripts"
        local_dir.mkdir(parents=True)
        yield types.SimpleNamespace(root=root, local=local_dir, cache=cache_dir)


def script_source(name: str, depends: dict[str, str] | None = None) -> str:
    """Source of a script that records every hook call in the events list."""
    lines = ["from userscripts_test_events import events", ""]
    if depends is not None:
        lines += ["def depends():", f"    return {depends!r}", ""]
    lines += [
        "def init(deps):",
        f"    events.append(('init', {name!r}, sorted(deps)))",
        "",
        "def enable():",
        f"    events.append(('enable', {name!r}))",
        "",
        "def disable():",
        f"    events.append(('disable', {name!r}))",
    ]
    return "\n".join(lines) + "\n"


def write_script(directory: Path, filename: str, source: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


@pytest.fixture
def scripts():
    """Helpers for writing test scripts: scripts.source(...), scripts.write(...)."""
    return types.SimpleNamespace(source=script_source, write=write_script)
