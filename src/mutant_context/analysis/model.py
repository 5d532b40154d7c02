"""Value types shared by the resolver, the graph builder and the report writers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

UNKNOWN_TYPE = "Unknown"


class AnalysisError(RuntimeError):
    """A source file or method body could not be read or parsed."""


class MethodNotFoundError(LookupError):
    """The requested method is not part of the method universe."""


@dataclass(frozen=True)
class SourceLocation:
    """A 1-based source span; the end column is inclusive."""

    file_path: str
    begin_line: int
    begin_column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.begin_line}:{self.begin_column} to {self.end_line}:{self.end_column}"


@dataclass(frozen=True)
class MethodRecord:
    """
    A method declaration found by the source analyzer.

    Equality and hashing use ``signature`` only: two records with the same signature are the
    same method even when they were declared in different classes.
    """

    package_name: str = field(compare=False)
    class_name: str = field(compare=False)
    method_name: str = field(compare=False)
    signature: str
    source_code: str = field(default="", compare=False, repr=False)
    location: SourceLocation | None = field(default=None, compare=False, repr=False)
    is_static: bool = field(default=False, compare=False)
    parameter_types: Tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        # Callers may pass a list; the record keeps a tuple.
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))

    @property
    def fully_qualified_name(self) -> str:
        if self.package_name:
            return f"{self.package_name}.{self.class_name}.{self.method_name}"
        return f"{self.class_name}.{self.method_name}"

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def __str__(self) -> str:
        return self.signature


@dataclass(frozen=True)
class Dependency:
    """One call edge; two call sites between the same pair of methods are distinct edges."""

    caller: MethodRecord
    callee: MethodRecord
    call_site: SourceLocation

    def __str__(self) -> str:
        return f"{self.caller.method_name} calls {self.callee.method_name} at {self.call_site}"


@dataclass(frozen=True)
class CallSite:
    """A call expression as reported by a call extractor."""

    name: str
    argument_types: Tuple[str, ...]
    location: SourceLocation

    def __post_init__(self) -> None:
        object.__setattr__(self, "argument_types", tuple(self.argument_types))


__all__ = [
    "AnalysisError",
    "CallSite",
    "Dependency",
    "MethodNotFoundError",
    "MethodRecord",
    "SourceLocation",
    "UNKNOWN_TYPE",
]
