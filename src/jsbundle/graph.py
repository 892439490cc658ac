"""Dependency graph construction and ordering.

The graph maps each module identifier to the identifiers it imports:

    >>> graph = build_graph(["c"], extractor.dependencies_of)
    >>> graph
    {'c': ['a', 'b'], 'a': [], 'b': ['a']}
    >>> order_dependencies(graph)
    ['a', 'b', 'c']
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable

from jsbundle.errors import CyclicDependency
from jsbundle.logging import get_logger

DependencyGraph = dict[str, list[str]]


def build_graph(
    identifiers: Iterable[str],
    dependencies_of: Callable[[str], list[str]],
) -> DependencyGraph:
    """Build the dependency graph reachable from the given roots.

    Walks depth-first, roots in the order given, then each module's
    dependencies in the order it imports them. A module already in the graph
    is not expanded again.

    Raises:
        CyclicDependency: If a module is reached again while still being expanded
    """
    graph: DependencyGraph = {}
    path: list[str] = []
    visiting: set[str] = set()

    def recur(identifier: str) -> None:
        if identifier in visiting:
            cycle = path[path.index(identifier) :] + [identifier]
            raise CyclicDependency(
                f"Circular dependency: {' -> '.join(cycle)}",
                cycle=cycle,
            )
        if identifier in graph:
            return

        path.append(identifier)
        visiting.add(identifier)
        graph[identifier] = dependencies_of(identifier)
        for dependency in graph[identifier]:
            recur(dependency)
        visiting.discard(identifier)
        path.pop()

    for identifier in identifiers:
        recur(identifier)

    get_logger().debug(f"Dependency graph has {len(graph)} modules")
    return graph


def order_dependencies(graph: DependencyGraph) -> list[str]:
    """Order modules so each one comes after everything it depends on.

    Starts from the identifiers sorted by name. The head of the queue is
    emitted once all its dependencies have been emitted; otherwise it moves
    to the back of the queue. The exact output order is part of the bundle's
    byte layout, so ties always resolve by queue position.

    Raises:
        CyclicDependency: If a full pass over the queue emits nothing
    """
    pending = deque(sorted(graph))
    ordered: list[str] = []
    emitted: set[str] = set()
    stalled = 0

    while pending:
        identifier = pending.popleft()
        if all(dependency in emitted for dependency in graph[identifier]):
            ordered.append(identifier)
            emitted.add(identifier)
            stalled = 0
        else:
            pending.append(identifier)
            stalled += 1
            if stalled >= len(pending):
                unresolved = sorted(pending)
                raise CyclicDependency(
                    f"Cannot order modules with unresolved dependencies: {', '.join(unresolved)}",
                    cycle=unresolved,
                )

    return ordered
