"""Outgoing call sites of a single method."""

from __future__ import annotations

from typing import Protocol, Sequence

from mutant_context.analysis.model import AnalysisError, CallSite, Dependency, MethodRecord, SourceLocation


class CallExtractor(Protocol):
    """Protocol expected from components that list the calls made inside a method body."""

    def extract_calls(self, method: MethodRecord) -> Sequence[CallSite]:
        ...


class DependencyTracker:
    """Thin adapter over a :class:`CallExtractor` that normalises its failures."""

    def __init__(self, extractor: CallExtractor) -> None:
        self.extractor = extractor

    def find_calls(self, method: MethodRecord) -> list[CallSite]:
        """
        Return the call sites of ``method`` in source order.

        Raises :class:`AnalysisError` when the method's source cannot be read or parsed.
        """

        try:
            return list(self.extractor.extract_calls(method))
        except AnalysisError:
            raise
        except (OSError, ValueError) as exc:
            raise AnalysisError(f"Failed to extract calls from {method.fully_qualified_name}: {exc}") from exc

    def create_dependency(self, caller: MethodRecord, callee: MethodRecord, call_site: SourceLocation) -> Dependency:
        return Dependency(caller, callee, call_site)


__all__ = ["CallExtractor", "DependencyTracker"]
