"""High-level orchestration for analysing a single target method."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from mutant_context.analysis.context import ContextExtractor
from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.graph_builder import GraphBuilder
from mutant_context.analysis.model import MethodRecord
from mutant_context.analysis.resolver import MethodIndex, SimpleMethodResolver
from mutant_context.analysis.tracker import CallExtractor, DependencyTracker
from mutant_context.config import AnalysisConfig
from mutant_context.io.java_source import JavaCallExtractor, JavaSourceParser, collect_methods, iter_source_files

LOGGER = logging.getLogger(__name__)


class SourceAnalyzer(Protocol):
    """Protocol expected from components that turn a source file into method records."""

    def parse_file(self, path: Path) -> List[MethodRecord]:
        ...


@dataclass(slots=True)
class AnalysisResult:
    config: AnalysisConfig
    index: MethodIndex
    root: MethodRecord
    graph: DependencyGraph
    report: str
    errors: List[str] = field(default_factory=list)

    @property
    def method_count(self) -> int:
        return len(self.graph.all_methods())


def load_index(
    config: AnalysisConfig,
    analyzer: Optional[SourceAnalyzer] = None,
) -> tuple[MethodIndex, List[str]]:
    """Parse every source file under ``config.source_path`` into a method index."""

    source_path = config.source_path
    if not source_path.exists():
        raise FileNotFoundError(f"Source path {source_path} not found.")
    if source_path.is_file() and source_path.suffix not in config.suffixes:
        raise ValueError(f"Source path must be a directory or a {'/'.join(config.suffixes)} file")

    files = list(iter_source_files(source_path, config.suffixes))
    methods, errors = collect_methods(files, analyzer or JavaSourceParser())
    LOGGER.info("Indexed %d methods from %d files under %s", len(methods), len(files), source_path)
    return MethodIndex(methods), errors


def build_graph(
    config: AnalysisConfig,
    index: MethodIndex,
    extractor: CallExtractor,
) -> tuple[MethodRecord, DependencyGraph]:
    """
    Locate the root method and build its dependency graph.

    Raises :class:`~mutant_context.analysis.model.MethodNotFoundError` before any traversal
    when the root is missing from ``index``.
    """

    root = index.lookup(config.target, config.signature)
    builder = GraphBuilder(
        SimpleMethodResolver(index),
        DependencyTracker(extractor),
        max_depth=config.max_depth,
    )
    return root, builder.build(root)


def analyze_method(
    config: AnalysisConfig,
    *,
    analyzer: Optional[SourceAnalyzer] = None,
    extractor: Optional[CallExtractor] = None,
) -> AnalysisResult:
    """
    Entry point for the full analysis: index sources, build the graph, render the report.

    The analyzer and extractor default to the tree-sitter Java implementations.
    """

    extractor = extractor or JavaCallExtractor()

    index, errors = load_index(config, analyzer)
    root, graph = build_graph(config, index, extractor)
    report = ContextExtractor().extract_context(graph)
    return AnalysisResult(config=config, index=index, root=root, graph=graph, report=report, errors=errors)


__all__ = ["AnalysisResult", "SourceAnalyzer", "analyze_method", "build_graph", "load_index"]
