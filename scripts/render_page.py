#!/usr/bin/env python3
"""
First-Page Preview CLI

Compiles a LaTeX file and renders its first page to PNG, or reports compile errors
against the source.

Commands:
    render - Compile and write a PNG of the first page
    check  - Compile only and print the diagnostics report

Examples:\n

    render_page.py render paper.tex                         # Writes paper.png

    render_page.py render paper.tex -o preview.png -f "#000" # Black background

    render_page.py render paper.tex -c configs/render.yaml  # Custom settings

    render_page.py check paper.tex                          # Errors only
"""

import os
import time
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from pagesnap.contexts.compilation.compiler import LatexCompiler
from pagesnap.contexts.compilation.document import CompileFailure
from pagesnap.contexts.diagnostics.report import ReportFormatError
from pagesnap.contexts.rendering import RenderError, SourceDiagnosticsError, render
from pagesnap.contexts.rendering.logger import setup_rendering_logger
from pagesnap.contexts.rendering.rasterizer import WHITE, parse_color
from pagesnap.utils.config import load_render_settings
from pagesnap.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Render the first page of a LaTeX document to PNG with source-anchored error reports",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _read_source(source_file: Path) -> str:
    if not source_file.exists():
        typer.secho(f"Error: Source file not found: {source_file}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return source_file.read_text(encoding="utf-8")


def _echo_report(error: SourceDiagnosticsError) -> None:
    try:
        report = str(error)
    except ReportFormatError as e:
        typer.secho(f"Error: could not format diagnostics: {e}", fg=typer.colors.RED, err=True)
        for diagnostic in error.diagnostics:
            typer.echo(f"  - {diagnostic.message}", err=True)
        return
    typer.echo(report, err=True)


@app.command("render")
def render_command(
    source_file: Annotated[
        Path,
        typer.Argument(help="LaTeX source file"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="PNG path (default: <source stem>.png)"),
    ] = None,
    fill: Annotated[
        str,
        typer.Option("--fill", "-f", help="Background color as #rgb, #rrggbb or #rrggbbaa"),
    ] = "#ffffff",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML render settings"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output (engine log, scale)"),
    ] = False,
):
    """
    Compile a LaTeX file and write its first page as PNG.

    Examples:\n

        $ render_page.py render paper.tex                  # Writes paper.png

        $ render_page.py render paper.tex --fill "#0000"   # Transparent background
    """
    try:
        fill_color = parse_color(fill) if fill else WHITE
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    settings = load_render_settings(config)
    source = _read_source(source_file)
    output = output or source_file.with_suffix(".png")

    log_file = setup_rendering_logger(
        LOGS_PATH / f"render_{now()}", compiler=settings.latex_compiler, verbose=verbose
    )

    typer.secho(f"\nRendering: {source_file}", fg=typer.colors.BLUE, bold=True, err=True)
    try:
        result = render(
            settings.sandbox(),
            fill_color,
            source,
            policy=settings.resolution_policy(),
            tab_width=settings.tab_width,
        )
    except SourceDiagnosticsError as e:
        typer.secho(
            f"✗ Compilation failed with {len(e.diagnostics)} errors\n",
            fg=typer.colors.RED,
            bold=True,
            err=True,
        )
        _echo_report(e)
        raise typer.Exit(code=1)
    except RenderError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        # Malformed page geometry, e.g. a zero-area MediaBox
        typer.secho(f"✗ Cannot render first page: {e}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.write_bytes(result.image)
    typer.secho("✓ Render succeeded", fg=typer.colors.GREEN, bold=True, err=True)
    typer.echo(f"  PNG: {output}", err=True)
    if result.more_pages:
        typer.echo(f"  Pages not rendered: {result.more_pages}", err=True)
    if log_file:
        typer.echo(f"  Log: {log_file}", err=True)
    raise typer.Exit(code=0)


@app.command("check")
def check_command(
    source_file: Annotated[
        Path,
        typer.Argument(help="LaTeX source file"),
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML render settings"),
    ] = None,
):
    """
    Compile a LaTeX file and print its diagnostics report.

    Exits with code 1 when the source has errors.
    """
    settings = load_render_settings(config)
    source = _read_source(source_file)
    setup_rendering_logger(compiler=settings.latex_compiler)

    world = settings.sandbox().with_source(source)
    start_time = time.time()
    try:
        document = LatexCompiler().compile(world)
    except CompileFailure as failure:
        error = SourceDiagnosticsError(world.into_source(), failure.diagnostics, settings.tab_width)
        _echo_report(error)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"✓ No errors ({len(document)} pages, {time.time() - start_time:.2f}s)",
        fg=typer.colors.GREEN,
        bold=True,
    )
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
