"""Method dependency graphs and context reports for equivalent-mutant analysis."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mutant-context")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev mode
    __version__ = "0.0.0"

__all__ = ["__version__"]
