"""Conversion of dependency graphs into networkx and on-disk formats."""

from __future__ import annotations

import json
from pathlib import Path

import networkx as nx

from mutant_context.analysis.context import ContextExtractor
from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.model import MethodRecord

EXPORT_FORMATS = ("json", "graphml")


def _node_id(method: MethodRecord) -> str:
    return method.signature


def _node_attributes(method: MethodRecord, *, is_root: bool) -> dict[str, object]:
    return {
        "name": method.method_name,
        "class": method.class_name,
        "package": method.package_name,
        "qualified_name": method.fully_qualified_name,
        "signature": method.signature,
        "is_static": method.is_static,
        "location": str(method.location) if method.location is not None else None,
        "is_root": is_root,
    }


def to_networkx(graph: DependencyGraph) -> nx.MultiDiGraph:
    """Return a multigraph keyed by signature with one edge per call site."""

    root = graph.root
    result = nx.MultiDiGraph(root=_node_id(root), name=root.fully_qualified_name)

    for method in graph.iter_methods():
        result.add_node(_node_id(method), record=method, **_node_attributes(method, is_root=method == root))

    for dependency in graph.edges():
        result.add_edge(
            _node_id(dependency.caller),
            _node_id(dependency.callee),
            call_site=str(dependency.call_site),
            line=dependency.call_site.begin_line,
        )

    result.graph["node_count"] = result.number_of_nodes()
    result.graph["edge_count"] = result.number_of_edges()
    result.graph["failures"] = sorted(method.signature for method in graph.failures)
    return result


def _sanitize_for_graphml(graph: nx.MultiDiGraph) -> nx.MultiDiGraph:
    """Return a copy of the graph with GraphML-friendly attributes."""

    def sanitize(mapping):
        for key in list(mapping.keys()):
            value = mapping[key]
            if value is None or isinstance(value, MethodRecord):
                del mapping[key]
                continue
            if isinstance(value, (list, tuple, set)):
                mapping[key] = ",".join(str(item) for item in value)
            elif isinstance(value, dict):
                mapping[key] = json.dumps(value)

    copy = graph.copy()
    sanitize(copy.graph)
    for _, data in copy.nodes(data=True):
        sanitize(data)
    for _, _, data in copy.edges(data=True):
        sanitize(data)
    return copy


def export_dependency_structure(graph: DependencyGraph, destination: Path) -> Path:
    """Persist the dependency structure of ``graph`` as JSON."""

    destination = Path(destination)
    payload = ContextExtractor().extract_dependency_structure(graph)
    payload["failures"] = {method.signature: reason for method, reason in graph.failures.items()}

    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    return destination


def export_graphml(graph: DependencyGraph, destination: Path) -> Path:
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    nx.write_graphml(_sanitize_for_graphml(to_networkx(graph)), destination)
    return destination


def export_graph(graph: DependencyGraph, destination: Path, export_format: str = "json") -> Path:
    fmt = export_format.lower()
    if fmt == "json":
        return export_dependency_structure(graph, destination)
    if fmt == "graphml":
        return export_graphml(graph, destination)
    raise ValueError(f"Unsupported format: {export_format}")


__all__ = ["EXPORT_FORMATS", "export_dependency_structure", "export_graph", "export_graphml", "to_networkx"]
