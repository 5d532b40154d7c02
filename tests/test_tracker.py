"""Tests for the dependency tracker's handling of extractor failures."""

from __future__ import annotations

import pytest

from mutant_context.analysis.graph_builder import GraphBuilder
from mutant_context.analysis.model import AnalysisError
from mutant_context.analysis.resolver import MethodIndex, SimpleMethodResolver
from mutant_context.analysis.tracker import DependencyTracker


class RaisingExtractor:
    """Returns canned call sites, raising ``error`` for the methods named in ``broken``."""

    def __init__(self, calls, broken, error: Exception) -> None:
        self.calls = calls
        self.broken = set(broken)
        self.error = error
        self.requests: list[str] = []

    def extract_calls(self, method):
        self.requests.append(method.method_name)
        if method.method_name in self.broken:
            raise self.error
        return self.calls.get(method.method_name, [])


@pytest.mark.parametrize("error", [OSError("disk gone"), ValueError("bad offset")])
def test_find_calls_wraps_extractor_errors(method_factory, error) -> None:
    method = method_factory("main")
    tracker = DependencyTracker(RaisingExtractor({}, ["main"], error))

    with pytest.raises(AnalysisError, match="com.example.Demo.main") as info:
        tracker.find_calls(method)

    assert info.value.__cause__ is error
    assert str(error) in str(info.value)


def test_find_calls_passes_analysis_errors_through(method_factory) -> None:
    error = AnalysisError("Failed to parse file: Demo.java")
    tracker = DependencyTracker(RaisingExtractor({}, ["main"], error))

    with pytest.raises(AnalysisError) as info:
        tracker.find_calls(method_factory("main"))

    assert info.value is error


def test_find_calls_returns_a_list(method_factory, call_factory) -> None:
    tracker = DependencyTracker(RaisingExtractor({"main": (call_factory("a"), call_factory("b"))}, [], OSError()))

    calls = tracker.find_calls(method_factory("main"))

    assert isinstance(calls, list)
    assert [call.name for call in calls] == ["a", "b"]


@pytest.mark.parametrize("error", [OSError("disk gone"), ValueError("bad offset")])
def test_builder_records_wrapped_failure_and_continues(method_factory, call_factory, error) -> None:
    main, broken, after, below = (method_factory(name) for name in ("main", "broken", "after", "below"))
    extractor = RaisingExtractor(
        {
            "main": [call_factory("broken", line=2), call_factory("after", line=3)],
            "broken": [call_factory("below", line=8)],
        },
        ["broken"],
        error,
    )
    builder = GraphBuilder(SimpleMethodResolver(MethodIndex([main, broken, after, below])), DependencyTracker(extractor))

    graph = builder.build(main)

    assert extractor.requests == ["main", "broken", "after"]
    assert {(edge.caller.method_name, edge.callee.method_name) for edge in graph.edges()} == {
        ("main", "broken"),
        ("main", "after"),
    }
    assert set(graph.failures) == {broken}
    assert str(error) in graph.failures[broken]
    assert below not in graph.all_methods()
