"""Serialise a dependency graph into a context report."""

from __future__ import annotations

from typing import Any, Dict, List

from mutant_context.analysis.dependency_graph import DependencyGraph
from mutant_context.analysis.model import MethodRecord


class ContextExtractor:
    """
    Render everything a root method can reach as plain text.

    The report opens with the root method, then lists each callee once, the first time it
    appears while walking callers in insertion order, annotated with the caller it was
    reached from. Its length is therefore bounded by the number of methods, not edges.
    """

    def extract_context(self, graph: DependencyGraph) -> str:
        lines: List[str] = ["ROOT METHOD:"]
        root = graph.root
        self._append_method(lines, root)
        seen = {root}

        lines.append("")
        lines.append("DEPENDENCIES:")
        for caller, edges in graph.items():
            for dependency in edges:
                callee = dependency.callee
                if callee in seen:
                    continue
                lines.append(f"Method called from: {caller.fully_qualified_name}")
                self._append_method(lines, callee)
                lines.append("")
                seen.add(callee)

        lines.append(f"Total methods in dependency graph: {len(graph.all_methods())}")
        return "\n".join(lines) + "\n"

    def extract_dependency_structure(self, graph: DependencyGraph) -> Dict[str, Any]:
        """Dictionary form of the graph for JSON export and visualisation front-ends."""

        return {
            "rootMethod": _format_method(graph.root),
            "dependencies": [
                {
                    "caller": _format_method(dependency.caller),
                    "callee": _format_method(dependency.callee),
                    "callSite": str(dependency.call_site),
                }
                for dependency in graph.edges()
            ],
            "methodCount": len(graph.all_methods()),
        }

    @staticmethod
    def _append_method(lines: List[str], method: MethodRecord) -> None:
        lines.append(f"Package: {method.package_name}")
        lines.append(f"Class: {method.class_name}")
        lines.append(f"Method: {method.signature}")
        lines.append(f"Source: {method.location}")
        lines.append("Code:")
        lines.append(method.source_code)


def _format_method(method: MethodRecord) -> Dict[str, str]:
    return {
        "name": method.method_name,
        "class": method.class_name,
        "package": method.package_name,
        "signature": method.signature,
    }


__all__ = ["ContextExtractor"]
