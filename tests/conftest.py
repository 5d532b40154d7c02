"""Shared fixtures for the test-suite."""

from __future__ import annotations

import os
from typing import Callable, Dict, List, Sequence

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from mutant_context.analysis.model import AnalysisError, CallSite, MethodRecord, SourceLocation  # noqa: E402


def make_method(name: str, params: Sequence[str] = (), *, cls: str = "Demo", package: str = "com.example") -> MethodRecord:
    rendered = ", ".join(f"{p_type} arg{idx}" for idx, p_type in enumerate(params))
    return MethodRecord(
        package_name=package,
        class_name=cls,
        method_name=name,
        signature=f"void {name}({rendered})",
        source_code=f"void {name}({rendered}) {{}}",
        location=SourceLocation(f"{cls}.java", 1, 1, 3, 1),
        parameter_types=list(params),
    )


def make_call(name: str, arity: int = 0, line: int = 1) -> CallSite:
    return CallSite(name, ["Unknown"] * arity, SourceLocation("Demo.java", line, 1, line, 10))


class FakeExtractor:
    """Call extractor driven by a ``signature -> call sites`` table."""

    def __init__(self, calls: Dict[str, List[CallSite]], failing: Sequence[str] = ()) -> None:
        self.calls = calls
        self.failing = set(failing)
        self.requests: List[str] = []

    def extract_calls(self, method: MethodRecord) -> List[CallSite]:
        self.requests.append(method.signature)
        if method.signature in self.failing:
            raise AnalysisError(f"Failed to parse file: {method.location.file_path}")
        return self.calls.get(method.signature, [])


@pytest.fixture
def method_factory() -> Callable[..., MethodRecord]:
    return make_method


@pytest.fixture
def call_factory() -> Callable[..., CallSite]:
    return make_call


@pytest.fixture
def extractor_factory() -> Callable[..., FakeExtractor]:
    return FakeExtractor
