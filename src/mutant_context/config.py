"""Configuration primitives for the project."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from mutant_context.analysis.graph_builder import UNLIMITED_DEPTH


@dataclass(slots=True)
class AnalysisConfig:
    """Settings for analysing one target method."""

    source_path: Path
    class_name: str
    method_name: str
    max_depth: int = UNLIMITED_DEPTH
    signature: Optional[str] = None
    suffixes: Tuple[str, ...] = (".java",)

    def __post_init__(self) -> None:
        self.source_path = Path(self.source_path).expanduser()
        self.class_name = self.class_name.strip()
        self.method_name = self.method_name.strip()
        if not self.class_name:
            raise ValueError("A fully qualified class name is required.")
        if not self.method_name:
            raise ValueError("A method name is required.")
        self.suffixes = tuple(self.suffixes)

    @property
    def target(self) -> str:
        return f"{self.class_name}.{self.method_name}"

    @property
    def depth_label(self) -> str:
        return "unlimited" if self.max_depth < 0 else str(self.max_depth)

    @classmethod
    def from_target(
        cls,
        source_path: Path,
        target: str,
        *,
        max_depth: int = UNLIMITED_DEPTH,
        signature: Optional[str] = None,
    ) -> "AnalysisConfig":
        """Factory helper accepting ``package.Class.method`` in a single string."""

        class_name, _, method_name = target.strip().rpartition(".")
        if not class_name:
            raise ValueError(f"Target {target!r} must look like package.Class.method")
        return cls(
            source_path=source_path,
            class_name=class_name,
            method_name=method_name,
            max_depth=max_depth,
            signature=signature,
        )
