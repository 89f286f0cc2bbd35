"""
Dependency Graph Ordering.

Depth-first topological sort with cycle detection over a
{name: [dependency names]} mapping.
"""

from collections.abc import Iterable, Mapping
from enum import Enum

from userscripts.plugin.errors import CyclicDependencyError


class _Mark(Enum):
    IN_PROGRESS = 1
    DONE = 2


def topological_sort(graph: Mapping[str, Iterable[str]]) -> list[str]:
    """
    Order nodes so that every dependency precedes its dependents.

    Nodes are visited in the graph's iteration order, which breaks ties
    between independent nodes. A dependency that is not itself a key has no
    further dependencies; it still appears in the result.

    Args:
        graph: node -> nodes it depends on

    Returns:
        Nodes in dependency order

    Raises:
        CyclicDependencyError: If the graph contains a cycle
    """
    marks: dict[str, _Mark] = {}
    path: list[str] = []
    result: list[str] = []

    def visit(node: str) -> None:
        mark = marks.get(node)
        if mark is _Mark.DONE:
            return
        if mark is _Mark.IN_PROGRESS:
            start = path.index(node)
            raise CyclicDependencyError(path[start:] + [node])

        marks[node] = _Mark.IN_PROGRESS
        path.append(node)
        for dependency in graph.get(node, ()):
            visit(dependency)
        path.pop()
        marks[node] = _Mark.DONE
        result.append(node)

    for node in graph:
        visit(node)

    return result
