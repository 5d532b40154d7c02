"""Helpers for interrogating a built dependency graph."""

from __future__ import annotations

from typing import List, Optional

import networkx as nx

from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.export import to_networkx
from mutant_context.analysis.model import Dependency, MethodRecord


def callers_of(graph: DependencyGraph, method: MethodRecord) -> List[Dependency]:
    """Edges whose callee is ``method``, in recording order."""

    return [dependency for dependency in graph.edges() if dependency.callee == method]


def leaf_methods(graph: DependencyGraph) -> List[MethodRecord]:
    """Methods with no recorded outgoing edge."""

    return [method for method in graph.iter_methods() if not graph.dependencies_of(method)]


def find_methods(graph: DependencyGraph, name: str) -> List[MethodRecord]:
    """Methods in the graph matching a plain name, a qualified name or a signature."""

    return [
        method
        for method in graph.iter_methods()
        if name in (method.method_name, method.fully_qualified_name, method.signature)
    ]


def call_chain(graph: DependencyGraph, target: MethodRecord) -> Optional[List[MethodRecord]]:
    """
    Shortest chain of calls leading from the root to ``target``.

    Returns ``None`` when ``target`` is not reachable in the graph.
    """

    nx_graph = to_networkx(graph)
    source = graph.root.signature
    if target.signature not in nx_graph:
        return None
    try:
        path = nx.shortest_path(nx_graph, source=source, target=target.signature)
    except nx.NetworkXNoPath:
        return None
    return [nx_graph.nodes[node]["record"] for node in path]


__all__ = ["call_chain", "callers_of", "find_methods", "leaf_methods"]
