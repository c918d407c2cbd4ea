"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from sketchify.domain import PathOutcome

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Sketchify[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_input_info(source: str, path_count: int, fill_rule: str) -> None:
    """Print where paths came from.

    Args:
        source: Input file name, or "command line"
        path_count: Number of paths to process
        fill_rule: Default fill rule
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(source)
    console.print(line)
    plural = "path" if path_count == 1 else "paths"
    console.print(f"  {path_count} {plural} {SYM_DOT} {fill_rule} fill rule")


def build_region_table(outcomes: Sequence[PathOutcome], verbose: bool = False) -> Table:
    """Build the per-path summary table.

    With ``verbose`` each region gets its own row under its path.
    """
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Path")
    table.add_column("Rule")
    table.add_column("Filled", justify="right")
    table.add_column("Holes", justify="right")
    table.add_column("Orphans", justify="right")
    table.add_column("Crossings", justify="right")
    table.add_column("Time", justify="right")

    for outcome in outcomes:
        classified = outcome.classified
        if classified is None:
            table.add_row(
                Text(outcome.name),
                "",
                Text(f"{SYM_ERR} {outcome.error_type}", style="red"),
                "",
                "",
                "",
                f"{outcome.duration_ms:.1f}ms",
            )
            continue

        table.add_row(
            Text(outcome.name),
            classified.fill_rule.value,
            str(len(classified.filled_regions())),
            str(len(classified.holes())),
            str(len(classified.orphans)),
            str(classified.intersection_count),
            f"{outcome.duration_ms:.1f}ms",
        )
        if verbose:
            for region in classified.regions:
                kind = "hole" if region.is_hole else "filled"
                parent = f" in {region.parent_region_id}" if region.parent_region_id is not None else ""
                table.add_row(
                    f"  {SYM_DOT} region {region.id}",
                    "",
                    f"{kind}{parent}",
                    f"w={region.winding_number}",
                    f"d={region.depth}",
                    f"{len(region.fragment_ids)} frags",
                    "",
                )
    return table


def print_region_table(outcomes: Sequence[PathOutcome], verbose: bool = False) -> None:
    """Print the per-path summary table."""
    console.print()
    console.print(build_region_table(outcomes, verbose))


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    total_time_s: float,
    processed: int,
    regions: int,
    holes: int,
    errors: int,
    output_path: str | None = None,
    avg_time_ms: float | None = None,
) -> None:
    """Print completion message with summary.

    Args:
        total_time_s: Total processing time in seconds
        processed: Number of paths processed
        regions: Total number of regions found
        holes: Total number of holes among them
        errors: Number of paths that failed
        output_path: JSON output path, if one was written
        avg_time_ms: Average processing time per path in milliseconds
    """
    time_str = _format_time(total_time_s)

    if errors:
        console.print(f"\n[bold yellow]{SYM_ERR} Finished with errors[/bold yellow] in {time_str}")
    else:
        console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    if output_path is not None:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    error_style = "red" if errors > 0 else "green"
    plural = "path" if processed == 1 else "paths"
    console.print(
        f"  {processed} {plural} {SYM_DOT} {regions} regions {SYM_DOT} {holes} holes {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
