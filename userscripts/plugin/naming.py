"""
Script Naming.

Pure functions mapping between dependency URIs, script names and cache
filenames.

A local script is named by its file stem. A remote script is named by the
percent-encoded form of the URI it was fetched from, so its origin can always
be recovered from its name and it can never clash with a local stem.
"""

import re
from urllib.parse import quote, unquote, urljoin

SCRIPT_SUFFIX = ".py"

_ABSOLUTE_URI = re.compile(r"^(?:/|.+://)")


def uri_to_name(uri: str) -> str:
    """
    Encode a URI as a script name.

    Every reserved character is escaped, including ':' and '/', so the result
    is always a valid single path component.

    Args:
        uri: Absolute URI

    Returns:
        Script name
    """
    return quote(uri, safe="")


def name_to_uri(name: str) -> str:
    """Decode a script name back to the URI it was built from."""
    return unquote(name)


def is_absolute_uri(value: str) -> bool:
    """Check whether value is an absolute path or has a scheme://."""
    return bool(_ABSOLUTE_URI.match(value))


def is_local(name: str) -> bool:
    """Check whether a script name refers to a local script."""
    return not is_absolute_uri(name_to_uri(name))


def resolve_neighbor(uri: str, neighbor: str) -> str:
    """
    Resolve a path relative to the parent of uri.

    (scheme://a/b/c, d) -> scheme://a/b/d
    """
    return urljoin(uri, neighbor)


def resolve_dependency_uri(script_name: str, uri: str) -> str:
    """
    Resolve a dependency URI declared by a script.

    Absolute URIs are returned unchanged, as are all URIs declared by local
    scripts. Relative URIs declared by remote scripts are resolved against the
    declaring script's own URI and get the script suffix appended.

    Args:
        script_name: Name of the declaring script
        uri: URI as declared in depends()

    Returns:
        Resolved URI
    """
    if is_absolute_uri(uri) or is_local(script_name):
        return uri
    return resolve_neighbor(name_to_uri(script_name), uri) + SCRIPT_SUFFIX


def script_filename(name: str) -> str:
    """Scripts are always stored as their name plus the script suffix."""
    return name + SCRIPT_SUFFIX
