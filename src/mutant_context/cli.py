"""Command line entry points for the project."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from mutant_context import __version__
from mutant_context.analysis.export import EXPORT_FORMATS, export_graph
from mutant_context.analysis.graph_builder import UNLIMITED_DEPTH
from mutant_context.analysis.graph_queries import call_chain, find_methods
from mutant_context.analysis.model import MethodNotFoundError
from mutant_context.analysis.visualization import plot_dependency_graph
from mutant_context.config import AnalysisConfig
from mutant_context.io.java_source import collect_methods, iter_source_files
from mutant_context.pipelines.analyze_method import AnalysisResult, analyze_method

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _config(source: Path, class_name: str, method: str, depth: int, signature: Optional[str]) -> AnalysisConfig:
    try:
        return AnalysisConfig(
            source_path=source,
            class_name=class_name,
            method_name=method,
            max_depth=depth,
            signature=signature,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _run_analysis(config: AnalysisConfig) -> AnalysisResult:
    if not config.source_path.exists():
        raise typer.BadParameter(f"Source path {config.source_path} does not exist.")
    try:
        return analyze_method(config)
    except (MethodNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _report_errors(result: AnalysisResult) -> None:
    if result.errors:
        typer.secho("Files skipped:", fg=typer.colors.YELLOW)
        for err in result.errors[:10]:
            typer.echo(f"  - {err}")
        if len(result.errors) > 10:
            typer.echo(f"  ... ({len(result.errors) - 10} more)")
    if result.graph.failures:
        typer.secho("Methods without call analysis:", fg=typer.colors.YELLOW)
        for method, reason in result.graph.failures.items():
            typer.echo(f"  - {method.fully_qualified_name}: {reason}")


app = typer.Typer(help="Method dependency graphs and context reports for equivalent-mutant analysis.")

SOURCE_OPTION = typer.Option(..., "--source", "-s", help="Java source directory or file.")
CLASS_OPTION = typer.Option(..., "--class", "-c", help="Fully qualified name of the class, e.g. com.example.MyClass.")
METHOD_OPTION = typer.Option(..., "--method", "-m", help="Name of the method to analyse.")
DEPTH_OPTION = typer.Option(UNLIMITED_DEPTH, "--depth", "-d", help="Maximum recursion depth (-1 for unlimited).")
SIGNATURE_OPTION = typer.Option(None, "--signature", help="Exact signature to pick among overloads.")


def _print_version(display_version: bool) -> None:
    if display_version:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    display_version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit.", callback=_print_version, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


@app.command("analyze")
def analyze(
    source: Path = SOURCE_OPTION,
    class_name: str = CLASS_OPTION,
    method: str = METHOD_OPTION,
    depth: int = DEPTH_OPTION,
    signature: Optional[str] = SIGNATURE_OPTION,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the context report to this file."),
) -> None:
    """Build the dependency graph of a method and print its context report."""

    config = _config(source, class_name, method, depth, signature)
    typer.echo(f"Analyzing method: {config.target}")
    typer.echo(f"Source path: {config.source_path}")
    typer.echo(f"Max depth: {config.depth_label}")

    result = _run_analysis(config)

    typer.echo("\nMethod Context:")
    typer.echo(result.report)
    _report_errors(result)

    if output:
        destination = output.expanduser().resolve()
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(result.report, encoding="utf-8")
        typer.echo(f"Context report written to {destination}")


@app.command("list-methods")
def list_methods(
    source: Path = SOURCE_OPTION,
    class_name: Optional[str] = typer.Option(None, "--class", "-c", help="Only list methods of this class."),
) -> None:
    """List every method the source analyzer finds."""

    source = source.expanduser()
    if not source.exists():
        raise typer.BadParameter(f"Source path {source} does not exist.")
    methods, errors = collect_methods(iter_source_files(source))

    shown = 0
    for method in methods:
        owner = method.fully_qualified_name.rpartition(".")[0]
        if class_name and owner != class_name:
            continue
        marker = " [static]" if method.is_static else ""
        typer.echo(f"{method.fully_qualified_name}  {method.signature}{marker}  @ {method.location}")
        shown += 1

    typer.echo(f"Methods: {shown}")
    for err in errors:
        typer.secho(f"  skipped: {err}", fg=typer.colors.YELLOW)


@app.command("export")
def export(
    source: Path = SOURCE_OPTION,
    class_name: str = CLASS_OPTION,
    method: str = METHOD_OPTION,
    depth: int = DEPTH_OPTION,
    signature: Optional[str] = SIGNATURE_OPTION,
    output: Path = typer.Option(..., "--output", "-o", help="Destination file."),
    export_format: str = typer.Option("json", "--format", help=f"Output format ({' or '.join(EXPORT_FORMATS)})."),
) -> None:
    """Write the dependency graph of a method as JSON or GraphML."""

    if export_format.lower() not in EXPORT_FORMATS:
        raise typer.BadParameter(f"Unsupported format: {export_format}")

    result = _run_analysis(_config(source, class_name, method, depth, signature))
    destination = export_graph(result.graph, output.expanduser().resolve(), export_format)
    typer.echo(f"Methods: {result.method_count}  Edges: {result.graph.edge_count()}")
    typer.echo(f"Dependency graph written to {destination}")


@app.command("visualize")
def visualize(
    source: Path = SOURCE_OPTION,
    class_name: str = CLASS_OPTION,
    method: str = METHOD_OPTION,
    depth: int = DEPTH_OPTION,
    signature: Optional[str] = SIGNATURE_OPTION,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination PNG (defaults to reports/<target>.png)."),
    max_nodes: Optional[int] = typer.Option(200, help="Limit the number of methods drawn."),
    layout: str = typer.Option("spring", help="Layout algorithm: spring, shell or kamada-kawai."),
    show_labels: bool = typer.Option(True, help="Render Class.method labels (best for <=150 methods)."),
) -> None:
    """Render the dependency graph of a method into a static image."""

    config = _config(source, class_name, method, depth, signature)
    result = _run_analysis(config)

    default_output = Path("reports") / f"{config.target}.png"
    output_path = (output or default_output).expanduser().resolve()
    png_path = plot_dependency_graph(
        result.graph,
        output_path,
        max_nodes=max_nodes,
        layout=layout,
        show_labels=show_labels,
    )

    typer.echo(f"Methods: {result.method_count}  Edges: {result.graph.edge_count()}")
    typer.echo(f"Visualization saved to {png_path}")


@app.command("chain")
def chain(
    source: Path = SOURCE_OPTION,
    class_name: str = CLASS_OPTION,
    method: str = METHOD_OPTION,
    target: str = typer.Option(..., "--to", help="Method name, qualified name or signature to reach."),
    depth: int = DEPTH_OPTION,
    signature: Optional[str] = SIGNATURE_OPTION,
) -> None:
    """Print the shortest call chain from the analysed method to another method."""

    result = _run_analysis(_config(source, class_name, method, depth, signature))
    matches = find_methods(result.graph, target)
    if not matches:
        typer.secho(f"{target} is not part of the dependency graph of {result.root.fully_qualified_name}.", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    path = call_chain(result.graph, matches[0])
    if path is None:
        typer.secho(f"No call chain reaches {target}.", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    for hop, record in enumerate(path):
        typer.echo(f"{'  ' * hop}{record.fully_qualified_name}  {record.signature}")


def run() -> None:
    """Entry point used by ``python -m mutant_context.cli``."""

    app()


if __name__ == "__main__":
    run()
