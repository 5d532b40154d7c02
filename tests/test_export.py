"""Tests for networkx conversion, export, queries and visualization."""

from __future__ import annotations

import json
from pathlib import Path

import networkx as nx
import pytest

from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.export import export_dependency_structure, export_graph, export_graphml, to_networkx
from mutant_context.analysis.graph_queries import call_chain, callers_of, find_methods, leaf_methods
from mutant_context.analysis.model import Dependency, SourceLocation
from mutant_context.analysis.visualization import plot_dependency_graph


def _sample(method_factory) -> DependencyGraph:
    main = method_factory("main", cls="App")
    parse = method_factory("parse", ["String"], cls="Parser")
    evaluate = method_factory("evaluate", cls="Parser")
    graph = DependencyGraph(main)
    graph.add_dependency(Dependency(main, parse, SourceLocation("App.java", 3, 9, 3, 20)))
    graph.add_dependency(Dependency(main, parse, SourceLocation("App.java", 4, 9, 4, 20)))
    graph.add_dependency(Dependency(parse, evaluate, SourceLocation("Parser.java", 12, 9, 12, 18)))
    return graph


def test_to_networkx(method_factory) -> None:
    graph = _sample(method_factory)
    nx_graph = to_networkx(graph)

    assert isinstance(nx_graph, nx.MultiDiGraph)
    assert nx_graph.number_of_nodes() == 3
    assert nx_graph.number_of_edges() == 3
    assert nx_graph.graph["root"] == "void main()"

    node = nx_graph.nodes["void parse(String arg0)"]
    assert node["class"] == "Parser"
    assert node["qualified_name"] == "com.example.Parser.parse"
    assert node["is_root"] is False
    assert nx_graph.nodes["void main()"]["is_root"] is True


def test_export_dependency_structure(tmp_path: Path, method_factory) -> None:
    graph = _sample(method_factory)
    graph.record_failure(graph.root, "Source file not found: App.java")

    destination = export_dependency_structure(graph, tmp_path / "out" / "main.json")

    with destination.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    assert payload["rootMethod"]["signature"] == "void main()"
    assert len(payload["dependencies"]) == 3
    assert payload["methodCount"] == 3
    assert payload["failures"] == {"void main()": "Source file not found: App.java"}


def test_export_graphml(tmp_path: Path, method_factory) -> None:
    destination = export_graphml(_sample(method_factory), tmp_path / "main.graphml")
    loaded = nx.read_graphml(destination)

    assert loaded.number_of_nodes() == 3
    assert loaded.number_of_edges() == 3
    assert loaded.nodes["void main()"]["qualified_name"] == "com.example.App.main"


def test_export_rejects_unknown_format(tmp_path: Path, method_factory) -> None:
    with pytest.raises(ValueError, match="Unsupported format"):
        export_graph(_sample(method_factory), tmp_path / "main.dot", "dot")


def test_queries(method_factory) -> None:
    graph = _sample(method_factory)
    main = graph.root
    (parse,) = find_methods(graph, "parse")
    (evaluate,) = find_methods(graph, "com.example.Parser.evaluate")

    assert [edge.caller for edge in callers_of(graph, parse)] == [main, main]
    assert leaf_methods(graph) == [evaluate]
    assert call_chain(graph, evaluate) == [main, parse, evaluate]
    assert call_chain(graph, method_factory("elsewhere")) is None
    assert find_methods(graph, "void main()") == [main]


def test_plot_dependency_graph(tmp_path: Path, method_factory) -> None:
    output = plot_dependency_graph(_sample(method_factory), tmp_path / "figures" / "main.png", layout="shell")

    assert output.exists()
    assert output.stat().st_size > 0
