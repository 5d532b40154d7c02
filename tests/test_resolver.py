"""Tests for the method index and the heuristic resolver."""

from __future__ import annotations

import pytest

from mutant_context.analysis.model import MethodNotFoundError
from mutant_context.analysis.resolver import MethodIndex, MethodResolver, SimpleMethodResolver


def test_unknown_name_is_unresolved(method_factory) -> None:
    resolver = SimpleMethodResolver(MethodIndex([method_factory("main")]))
    assert resolver.resolve("println", ["Unknown"]) is None


def test_single_candidate_wins_regardless_of_arity(method_factory) -> None:
    helper = method_factory("helper", ["int"])
    resolver = SimpleMethodResolver(MethodIndex([helper]))

    assert resolver.resolve("helper", []) == helper
    assert resolver.resolve("helper", ["Unknown", "Unknown", "Unknown"]) == helper


def test_overloads_are_narrowed_by_argument_count(method_factory) -> None:
    one = method_factory("foo", ["int"])
    two = method_factory("foo", ["int", "String"])
    resolver = SimpleMethodResolver(MethodIndex([one, two]))

    assert resolver.resolve("foo", ["Unknown", "Unknown"]) is two
    assert resolver.resolve("foo", ["int"]) is one


def test_same_arity_overloads_pick_first_declared(method_factory) -> None:
    first = method_factory("foo", ["int"], cls="Alpha")
    second = method_factory("foo", ["String"], cls="Beta")
    resolver = SimpleMethodResolver(MethodIndex([first, second]))

    assert resolver.resolve("foo", ["String"]) is first


def test_no_arity_match_or_hints_falls_back_to_first(method_factory) -> None:
    first = method_factory("foo", ["int"])
    second = method_factory("foo", ["int", "int"])
    resolver = SimpleMethodResolver(MethodIndex([first, second]))

    assert resolver.resolve("foo", ["Unknown", "Unknown", "Unknown"]) is first
    assert resolver.resolve("foo", []) is first


def test_simple_resolver_satisfies_protocol(method_factory) -> None:
    resolver: MethodResolver = SimpleMethodResolver(MethodIndex([method_factory("main")]))
    assert resolver.resolve("main", []) is not None


def test_index_lookup_by_qualified_name(method_factory) -> None:
    plain = method_factory("run")
    overload = method_factory("run", ["int"])
    index = MethodIndex([plain, overload, method_factory("stop", cls="Other")])

    assert len(index) == 3
    assert index.candidates("run") == (plain, overload)
    assert index.qualified("com.example.Other.stop")[0].method_name == "stop"
    assert index.lookup("com.example.Demo.run") is plain
    assert index.lookup("com.example.Demo.run", "void run(int arg0)") is overload


def test_index_lookup_missing_method_raises(method_factory) -> None:
    index = MethodIndex([method_factory("run")])

    with pytest.raises(MethodNotFoundError, match="com.example.Demo.walk"):
        index.lookup("com.example.Demo.walk")
    with pytest.raises(MethodNotFoundError):
        index.lookup("com.example.Demo.run", "void run(long arg0)")


def test_index_is_read_only(method_factory) -> None:
    methods = [method_factory("run")]
    index = MethodIndex(methods)
    methods.append(method_factory("later"))

    assert index.candidates("later") == ()
    with pytest.raises(TypeError):
        index._by_name["later"] = ()  # type: ignore[index]
