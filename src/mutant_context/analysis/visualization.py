"""Visualization helpers for dependency graphs."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import matplotlib.pyplot as plt
import networkx as nx

from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.export import to_networkx

ROOT_COLOUR = "#d62728"


def _subset_graph(graph: nx.MultiDiGraph, root: str, max_nodes: int | None) -> nx.MultiDiGraph:
    if max_nodes is None or graph.number_of_nodes() <= max_nodes:
        return graph

    # Keep the methods closest to the root so the drawing stays connected.
    distances = nx.single_source_shortest_path_length(graph, root)
    keep = sorted(distances, key=lambda node: distances[node])[:max_nodes]
    return graph.subgraph(keep).copy()


def _class_colours(graph: nx.MultiDiGraph) -> dict[str, object]:
    classes = sorted({str(data.get("class", "unknown")) for _, data in graph.nodes(data=True)})
    palette = plt.get_cmap("tab20")
    return {name: palette(idx % palette.N) for idx, name in enumerate(classes)}


def plot_dependency_graph(
    graph: DependencyGraph,
    output_path: Path,
    *,
    max_nodes: int | None = 200,
    layout: str = "spring",
    show_labels: bool = True,
    title: str | None = None,
) -> Path:
    """
    Render a dependency graph to ``output_path`` using matplotlib.

    Nodes are coloured by declaring class and the root is drawn in red. Large graphs are cut
    down to the ``max_nodes`` methods nearest to the root.
    """

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    root = graph.root.signature
    nx_graph = _subset_graph(to_networkx(graph), root, max_nodes)
    if nx_graph.number_of_nodes() == 0:
        raise ValueError("Graph contains no nodes to visualize.")

    colours = _class_colours(nx_graph)
    node_colours = [
        ROOT_COLOUR if node == root else colours.get(str(data.get("class", "unknown")))
        for node, data in nx_graph.nodes(data=True)
    ]
    node_sizes = [300 + nx_graph.degree(node) * 40 for node in nx_graph.nodes()]

    if layout == "kamada-kawai":
        positions = nx.kamada_kawai_layout(nx_graph)
    elif layout == "shell":
        positions = nx.shell_layout(nx_graph)
    else:
        positions = nx.spring_layout(nx_graph, seed=42, iterations=100)

    plt.figure(figsize=(12, 12))
    nx.draw_networkx_edges(nx_graph, positions, alpha=0.4, width=0.8, arrows=True, arrowsize=12)
    nx.draw_networkx_nodes(nx_graph, positions, node_color=node_colours, node_size=node_sizes, alpha=0.9)

    if show_labels and nx_graph.number_of_nodes() <= 150:
        labels = {node: f"{data.get('class')}.{data.get('name')}" for node, data in nx_graph.nodes(data=True)}
        nx.draw_networkx_labels(nx_graph, positions, labels=labels, font_size=7)

    if title is None:
        summary = Counter(str(data.get("class", "unknown")) for _, data in nx_graph.nodes(data=True))
        title = f"{graph.root.fully_qualified_name}: " + ", ".join(
            f"{name} ({count})" for name, count in summary.most_common()
        )

    plt.title(title)
    plt.axis("off")
    plt.tight_layout()
    plt.savefig(output_path, dpi=200)
    plt.close()
    return output_path


__all__ = ["plot_dependency_graph"]
