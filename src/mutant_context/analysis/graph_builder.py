"""Depth-first construction of a method dependency graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Set

from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.model import AnalysisError, CallSite, MethodRecord
from mutant_context.analysis.resolver import MethodResolver
from mutant_context.analysis.tracker import DependencyTracker

LOGGER = logging.getLogger(__name__)

UNLIMITED_DEPTH = -1


@dataclass
class _Frame:
    method: MethodRecord
    depth: int
    calls: Iterator[CallSite]


@dataclass
class _Traversal:
    graph: DependencyGraph
    visited: Set[MethodRecord] = field(default_factory=set)
    stack: List[_Frame] = field(default_factory=list)
    expanded: int = 0


class GraphBuilder:
    """
    Build the dependency graph reachable from a root method.

    The root sits at depth 0 and every resolved call adds one level. A method is expanded at
    most once per build: revisits are ignored whatever path reaches them, which is also what
    breaks call cycles. With ``max_depth >= 0`` methods deeper than the bound still receive
    their incoming edge but are not expanded. A negative ``max_depth`` means no bound.

    Traversal uses an explicit stack of frames instead of recursion. Each frame holds the
    remaining call sites of a method being expanded, so edges are recorded and callees are
    expanded in the same order as the recursive walk.
    """

    def __init__(
        self,
        resolver: MethodResolver,
        tracker: DependencyTracker,
        *,
        max_depth: int = UNLIMITED_DEPTH,
    ) -> None:
        self.resolver = resolver
        self.tracker = tracker
        self.max_depth = max_depth

    def build(self, root: MethodRecord) -> DependencyGraph:
        state = _Traversal(graph=DependencyGraph(root))
        self._enter(state, root, 0)

        while state.stack:
            frame = state.stack[-1]
            call = next(frame.calls, None)
            if call is None:
                state.stack.pop()
                continue

            callee = self.resolver.resolve(call.name, call.argument_types)
            if callee is None:
                continue

            state.graph.add_dependency(self.tracker.create_dependency(frame.method, callee, call.location))
            self._enter(state, callee, frame.depth + 1)

        LOGGER.info(
            "Built dependency graph for %s: %d methods expanded, %d edges, %d failures",
            root.fully_qualified_name,
            state.expanded,
            state.graph.edge_count(),
            len(state.graph.failures),
        )
        return state.graph

    def _beyond_depth(self, depth: int) -> bool:
        return self.max_depth >= 0 and depth > self.max_depth

    def _enter(self, state: _Traversal, method: MethodRecord, depth: int) -> None:
        if method in state.visited or self._beyond_depth(depth):
            return
        state.visited.add(method)
        state.expanded += 1

        try:
            calls = self.tracker.find_calls(method)
        except AnalysisError as exc:
            LOGGER.warning("Skipping calls of %s: %s", method.fully_qualified_name, exc)
            state.graph.record_failure(method, str(exc))
            return

        LOGGER.debug("Expanding %s at depth %d (%d call sites)", method.signature, depth, len(calls))
        state.stack.append(_Frame(method, depth, iter(calls)))


__all__ = ["GraphBuilder", "UNLIMITED_DEPTH"]
