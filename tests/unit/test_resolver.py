"""
Tests for the dependency resolver.

This test suite covers:
1. Fast path (nothing to fetch)
2. Iterative rounds for chained remote dependencies
3. Admission of cached scripts
4. Failure handling and notifications
"""

import httpx
import pytest

from userscripts.plugin.errors import FetchError
from userscripts.plugin.fetcher import Fetcher
from userscripts.plugin.naming import script_filename, uri_to_name
from userscripts.plugin.registry import ScriptRegistry
from userscripts.plugin.resolver import Resolver


def serving(routes: dict[str, str], requests: list[str] | None = None) -> Fetcher:
    async def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if requests is not None:
            requests.append(url)
        if url in routes:
            return httpx.Response(200, text=routes[url])
        return httpx.Response(404)

    return Fetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def make_resolver(dirs, notifier, fetcher):
    registry = ScriptRegistry(notifier)
    resolver = Resolver(registry, fetcher, dirs.cache, notifier)
    resolver.load_local(dirs.local)
    return registry, resolver


@pytest.mark.asyncio
async def test_no_dependencies_converges_quietly(dirs, scripts, notifier, events):
    scripts.write(dirs.local, "foo.py", scripts.source("foo"))
    registry, resolver = make_resolver(dirs, notifier, serving({}))

    result = await resolver.resolve()

    assert result.converged
    assert result.rounds == 0
    assert registry.names() == ["foo"]
    assert notifier.messages == []
    assert not dirs.cache.exists()


@pytest.mark.asyncio
async def test_chained_remote_dependencies(dirs, scripts, notifier, events):
    """Each newly fetched script that declares a new dependency costs a round."""
    scripts.write(
        dirs.local, "main.py", scripts.source("main", {"a": "https://x/lib/a.py"})
    )
    fetcher = serving(
        {
            "https://x/lib/a.py": scripts.source("a", {"b": "./b"}),
            "https://x/lib/b.py": scripts.source("b"),
        }
    )
    registry, resolver = make_resolver(dirs, notifier, fetcher)

    result = await resolver.resolve()

    assert result.converged
    assert result.rounds == 2
    assert set(registry.names()) == {
        "main",
        uri_to_name("https://x/lib/a.py"),
        uri_to_name("https://x/lib/b.py"),
    }
    assert notifier.messages == [
        "Retrieving dependencies:\nhttps://x/lib/a.py",
        "Retrieving dependencies:\nhttps://x/lib/b.py",
        "Finished retrieving dependencies.",
    ]
    assert (dirs.cache / script_filename(uri_to_name("https://x/lib/b.py"))).exists()


@pytest.mark.asyncio
async def test_cached_dependencies_need_no_rounds(dirs, scripts, notifier, events):
    uri = "https://x/lib/a.py"
    scripts.write(dirs.local, "main.py", scripts.source("main", {"a": uri}))
    scripts.write(dirs.cache, script_filename(uri_to_name(uri)), scripts.source("a"))
    requests = []
    registry, resolver = make_resolver(dirs, notifier, serving({}, requests))

    result = await resolver.resolve()

    assert result.converged
    assert result.rounds == 0
    assert uri_to_name(uri) in registry
    assert requests == []
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_unreferenced_cached_scripts_are_ignored(dirs, scripts, notifier, events):
    """Cached remote scripts nobody depends on are not admitted or imported."""
    orphan = uri_to_name("https://x/orphan.py")
    scripts.write(dirs.local, "main.py", scripts.source("main"))
    scripts.write(
        dirs.cache,
        script_filename(orphan),
        "from userscripts_test_events import events\nevents.append('orphan')\n",
    )
    scripts.write(dirs.cache, "stray.py", scripts.source("stray"))
    registry, resolver = make_resolver(dirs, notifier, serving({}))

    result = await resolver.resolve()

    assert result.converged
    assert orphan not in registry
    assert "stray" in registry
    assert "orphan" not in events


@pytest.mark.asyncio
async def test_shared_dependency_fetched_once(dirs, scripts, notifier, events):
    uri = "https://x/shared.py"
    scripts.write(dirs.local, "a.py", scripts.source("a", {"s": uri}))
    scripts.write(dirs.local, "b.py", scripts.source("b", {"shared": uri}))
    requests = []
    registry, resolver = make_resolver(
        dirs, notifier, serving({uri: scripts.source("s")}, requests)
    )

    result = await resolver.resolve()

    assert result.converged
    assert result.rounds == 1
    assert requests == [uri]


@pytest.mark.asyncio
async def test_fetch_failure_stops_resolution(dirs, scripts, notifier, events):
    scripts.write(
        dirs.local, "main.py", scripts.source("main", {"gone": "https://x/gone.py"})
    )
    registry, resolver = make_resolver(dirs, notifier, serving({}))

    result = await resolver.resolve()

    assert not result.converged
    assert result.rounds == 0
    assert isinstance(result.error, FetchError)
    assert notifier.messages == ["Retrieving dependencies:\nhttps://x/gone.py"]
    assert notifier.error_titles == ["FetchError when retrieving https://x/gone.py"]
