"""CLI application entry point for sketchify.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from sketchify import __version__
from sketchify.cli.output import (
    console,
    print_error,
    print_header,
    print_input_info,
    print_region_table,
    print_step,
    print_success,
)
from sketchify.config import LoggingConfig, ProcessingConfig, SketchifySettings
from sketchify.core import PathProcessor
from sketchify.domain import PathInput
from sketchify.exceptions import ConfigurationError, SketchifyError
from sketchify.io import PathFileReader, RegionWriter, parse_fill_rule

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Create the Typer app
app = typer.Typer(
    name="sketchify",
    help="Classify the regions of vector paths as filled areas or holes for CAD sketches.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Sketchify[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Classify the regions of vector paths as filled areas or holes for CAD sketches."""


@app.command()
def convert(
    path_data: Annotated[
        list[str] | None,
        typer.Argument(
            help="SVG path data strings (e.g. 'M0,0 L10,0 L10,10 Z')",
            show_default=False,
        ),
    ] = None,
    input_file: Annotated[
        Path | None,
        typer.Option(
            "--input",
            "-i",
            help="Read paths from a JSON or text file",
        ),
    ] = None,
    fill_rule: Annotated[
        str,
        typer.Option(
            "--fill-rule",
            "-f",
            help="Fill rule for paths that do not name one (nonzero|evenodd)",
        ),
    ] = "nonzero",
    json_output: Annotated[
        Path | None,
        typer.Option(
            "--json",
            "-o",
            help="Write classified regions to a JSON file",
        ),
    ] = None,
    fail_fast: Annotated[
        bool,
        typer.Option(
            "--fail-fast",
            help="Stop at the first path that fails",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show every region in the summary",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Split paths at their self-intersections and classify each region.

    Every region is reported as filled or as a hole of its enclosing
    filled region, using the nonzero or even-odd fill rule.

    Example:
        sketchify convert "M0,0 L100,0 L100,100 L0,100 Z M25,25 L25,75 L75,75 L75,25 Z"

    Exits with code 1 if any path could not be processed.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if log_level.upper() not in _LOG_LEVELS:
        print_error(
            f"Invalid log level: {log_level}",
            details=f"Valid values: {', '.join(_LOG_LEVELS)}",
        )
        raise typer.Exit(code=1)

    if not path_data and input_file is None:
        print_error(
            "No paths given",
            details="Pass path data as arguments or use --input FILE.",
        )
        raise typer.Exit(code=1)

    try:
        default_rule = parse_fill_rule(fill_rule)

        inputs: list[PathInput] = []
        if input_file is not None:
            if not input_file.is_file():
                print_error(
                    f"Input file not found: {input_file}",
                    details=f"The file '{input_file}' does not exist or is not a file.",
                )
                raise typer.Exit(code=1)
            inputs.extend(PathFileReader(input_file, default_rule).read())
        for index, data in enumerate(path_data or [], start=1):
            inputs.append(PathInput(name=f"arg-{index}", fill_rule=default_rule, path_data=data))

        if not quiet:
            print_header(__version__)
            print_step("Reading paths")
            print_input_info(
                source=str(input_file) if input_file is not None else "command line",
                path_count=len(inputs),
                fill_rule=default_rule.value,
            )

        settings = SketchifySettings(
            processing=ProcessingConfig(
                default_fill_rule=default_rule,
                fail_fast=fail_fast,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level.upper(),
            ),
        )

        if not quiet:
            print_step("Classifying regions")

        processor = PathProcessor(settings, quiet=quiet)
        outcomes = processor.process_batch(inputs)
        stats = processor.stats

        if not quiet:
            print_region_table(outcomes, verbose=verbose)

        written = None
        if json_output is not None:
            written = RegionWriter(json_output).write(outcomes)

        if not quiet:
            print_success(
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                regions=stats.region_count,
                holes=stats.hole_count,
                errors=stats.error_count,
                output_path=str(written) if written is not None else None,
                avg_time_ms=stats.avg_path_time_ms,
            )

        if any(not outcome.succeeded for outcome in outcomes):
            raise typer.Exit(code=1)

    except ConfigurationError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)
    except SketchifyError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except OSError as e:
        print_error(f"File error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
