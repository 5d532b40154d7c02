"""The caller → call-edge structure produced by :class:`GraphBuilder`."""

from __future__ import annotations

from types import MappingProxyType
from typing import AbstractSet, Dict, Iterator, Mapping, Tuple

from mutant_context.analysis.model import Dependency, MethodRecord


class DependencyGraph:
    """
    Dependency graph rooted at a single method.

    Edges are stored per caller in insertion order; an edge that is equal by value to one
    already present is ignored. The builder is the only writer, readers get views.
    """

    def __init__(self, root: MethodRecord) -> None:
        self._root = root
        self._dependencies: Dict[MethodRecord, Dict[Dependency, None]] = {}
        self._failures: Dict[MethodRecord, str] = {}

    @property
    def root(self) -> MethodRecord:
        return self._root

    @property
    def failures(self) -> Mapping[MethodRecord, str]:
        """Methods whose call sites could not be extracted, with the reason."""

        return MappingProxyType(self._failures)

    def add_dependency(self, dependency: Dependency) -> None:
        self._dependencies.setdefault(dependency.caller, {})[dependency] = None

    def record_failure(self, method: MethodRecord, reason: str) -> None:
        self._failures[method] = reason

    def dependencies_of(self, method: MethodRecord) -> AbstractSet[Dependency]:
        """Outgoing edges of ``method``; empty when it made no resolved calls or was never expanded."""

        return self._dependencies.get(method, {}).keys()

    def items(self) -> Iterator[Tuple[MethodRecord, AbstractSet[Dependency]]]:
        for caller, edges in self._dependencies.items():
            yield caller, edges.keys()

    def edges(self) -> Iterator[Dependency]:
        for edges in self._dependencies.values():
            yield from edges

    def iter_methods(self) -> Iterator[MethodRecord]:
        """Root, callers and callees, each once, in the order they were first recorded."""

        seen = {self._root}
        yield self._root
        for caller, edges in self._dependencies.items():
            if caller not in seen:
                seen.add(caller)
                yield caller
            for dependency in edges:
                if dependency.callee not in seen:
                    seen.add(dependency.callee)
                    yield dependency.callee

    def all_methods(self) -> frozenset[MethodRecord]:
        return frozenset(self.iter_methods())

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._dependencies.values())

    def __len__(self) -> int:
        return len(self.all_methods())

    def __str__(self) -> str:
        lines = [f"Dependency Graph for {self._root.signature}:"]
        for caller, edges in self._dependencies.items():
            lines.append(f"  {caller.signature} calls:")
            for dependency in edges:
                lines.append(f"    {dependency.callee.signature} at {dependency.call_site}")
        return "\n".join(lines) + "\n"


__all__ = ["DependencyGraph"]
