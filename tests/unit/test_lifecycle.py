"""
Tests for script lifecycle ordering and failure isolation.

This test suite covers:
1. Dependency-ordered init/enable, reverse-ordered disable
2. Dependency objects passed to init()
3. Per-hook and per-script failure isolation
"""

from types import SimpleNamespace

import pytest

from userscripts.plugin.errors import CyclicDependencyError
from userscripts.plugin.lifecycle import LifecycleManager
from userscripts.plugin.registry import ScriptRegistry


def recording_script(name, calls, depends=None, fail=()):
    """In-memory script recording its hook calls; hooks in fail raise."""

    def hook(kind):
        def run(*args):
            calls.append((kind, name) + args)
            if kind in fail:
                raise RuntimeError(f"{kind} of {name} failed")

        return run

    script = SimpleNamespace(
        init=hook("init"), enable=hook("enable"), disable=hook("disable")
    )
    if depends is not None:
        script.depends = lambda: depends
    return script


def build_registry(notifier, modules):
    registry = ScriptRegistry(notifier)
    registry.merge(modules, lambda name: True)
    registry.resolve_dependencies()
    return registry


class TestOrdering:
    """Test hook ordering."""

    def test_chain_order(self, notifier):
        calls = []
        registry = build_registry(
            notifier,
            {
                "a": recording_script("a", calls, {"b": "b"}),
                "b": recording_script("b", calls, {"c": "c"}),
                "c": recording_script("c", calls),
            },
        )
        lifecycle = LifecycleManager(registry, notifier)

        lifecycle.enable_all()
        enabled = [name for kind, name, *_ in calls if kind == "enable"]
        assert enabled == ["c", "b", "a"]

        calls.clear()
        lifecycle.disable_all()
        assert calls == [("disable", "a"), ("disable", "b"), ("disable", "c")]

    def test_init_receives_dependency_modules(self, notifier):
        calls = []
        util = SimpleNamespace(VALUE=42)
        app = recording_script("app", calls, {"helper": "util"})
        registry = build_registry(notifier, {"app": app, "util": util})

        LifecycleManager(registry, notifier).enable_all()

        assert calls[0] == ("init", "app", {"helper": util})
        assert calls[1] == ("enable", "app")

    def test_init_before_enable_per_script(self, notifier):
        calls = []
        registry = build_registry(notifier, {"solo": recording_script("solo", calls)})
        LifecycleManager(registry, notifier).enable_all()
        assert calls == [("init", "solo", {}), ("enable", "solo")]

    def test_missing_hooks_are_skipped(self, notifier):
        registry = build_registry(notifier, {"bare": SimpleNamespace()})
        lifecycle = LifecycleManager(registry, notifier)
        lifecycle.enable_all()
        lifecycle.disable_all()
        assert notifier.errors == []

    def test_cycle_raises_before_any_hook(self, notifier):
        calls = []
        registry = build_registry(
            notifier,
            {
                "a": recording_script("a", calls, {"b": "b"}),
                "b": recording_script("b", calls, {"a": "a"}),
            },
        )
        with pytest.raises(CyclicDependencyError):
            LifecycleManager(registry, notifier).enable_all()
        assert calls == []


class TestFailureIsolation:
    """Test that failing hooks are reported and contained."""

    def test_enable_failure_does_not_stop_dependents(self, notifier):
        calls = []
        registry = build_registry(
            notifier,
            {
                "app": recording_script("app", calls, {"lib": "lib"}),
                "lib": recording_script("lib", calls, fail={"enable"}),
            },
        )

        LifecycleManager(registry, notifier).enable_all()

        assert ("enable", "app") in calls
        assert notifier.error_titles == ["EnableError when enabling script lib"]
        assert "enable of lib failed" in notifier.errors[0][1]

    def test_init_failure_still_enables(self, notifier):
        calls = []
        registry = build_registry(
            notifier, {"x": recording_script("x", calls, fail={"init"})}
        )

        LifecycleManager(registry, notifier).enable_all()

        assert calls == [("init", "x", {}), ("enable", "x")]
        assert notifier.error_titles == ["InitError when initializing script x"]

    def test_disable_failure_continues(self, notifier):
        calls = []
        registry = build_registry(
            notifier,
            {
                "a": recording_script("a", calls, {"b": "b"}, fail={"disable"}),
                "b": recording_script("b", calls),
            },
        )

        LifecycleManager(registry, notifier).disable_all()

        assert calls == [("disable", "a"), ("disable", "b")]
        assert notifier.error_titles == ["DisableError when disabling script a"]
