"""CLI for dircmp."""

import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import DircmpConfig, load_config, resolve_algorithm
from .errors import DircmpError
from .reconcile import ChangeKind, Classification, compare
from .record import Record, load_record, record_path_for, save_record
from .snapshot import Snapshot

console = Console()
error_console = Console(stderr=True)

# Line prefix and style for each reported change
CHANGE_TAGS: dict[ChangeKind, tuple[str, str]] = {
    ChangeKind.ONLY_IN_DIRECTORY: ("[dir]", "green"),
    ChangeKind.ONLY_IN_RECORD: ("[rec]", "red"),
    ChangeKind.DIFFERS: ("[dif]", "yellow"),
}

COMPARE_HELP = """Compare DIRECTORY with a previously generated record.

\b
[dir] means that the file is only in the directory
[rec] means that the file is only in the record
[dif] means that there is a difference in the file
"""


def setup_logging(level: str) -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {message}",
        colorize=False,
    )


def handle_errors(func: Callable) -> Callable:
    """Report dircmp errors as a one-line message and exit with status 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DircmpError as e:
            logger.debug("Command failed: {!r}", e)
            error_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
            sys.exit(1)

    return wrapper


def find_record(record_path: Path) -> Record:
    """Load a record, also trying the normalized record suffix."""
    if not record_path.exists():
        normalized = record_path_for(record_path)
        if normalized.exists():
            logger.debug("Using {} for {}", normalized, record_path)
            record_path = normalized
    return load_record(record_path)


def print_change(classification: Classification) -> None:
    """Print one tagged line for a changed path."""
    tag, style = CHANGE_TAGS[classification.kind]
    console.print(Text.assemble((tag, style), " ", classification.path), soft_wrap=True)


def get_config(ctx: click.Context) -> DircmpConfig:
    """Get the configuration loaded by the command group."""
    return ctx.obj["config"]


@click.group()
@click.version_option(version=__version__, prog_name="dircmp")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON configuration file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """dircmp - Compare complete directories by hashing all files."""
    try:
        config = load_config(config_path)
    except DircmpError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(1)

    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("directory", type=click.Path(path_type=Path))
@click.argument("record_path", type=click.Path(path_type=Path))
@click.option(
    "--algorithm",
    default=None,
    help="Digest algorithm (defaults to the configured one)",
)
@click.pass_context
@handle_errors
def record(
    ctx: click.Context, directory: Path, record_path: Path, algorithm: str | None
) -> None:
    """Create a record of DIRECTORY for later comparisons.

    The record is written to RECORD_PATH with its extension replaced by .json.
    """
    config = get_config(ctx)
    algorithm = resolve_algorithm(algorithm) if algorithm else config.algorithm

    snapshot = Snapshot.build(directory, algorithm=algorithm, chunk_size=config.chunk_size)
    saved_path = save_record(snapshot.to_record(), record_path)

    console.print(
        f"Recorded [bold]{len(snapshot)}[/bold] files from "
        f"[dim]{escape(str(directory))}[/dim] to [dim]{escape(str(saved_path))}[/dim]",
        soft_wrap=True,
    )


@main.command(name="compare", help=COMPARE_HELP)
@click.argument("directory", type=click.Path(path_type=Path))
@click.argument("record_path", type=click.Path(path_type=Path))
@click.option("--summary", is_flag=True, help="Print a table of counts after the changes")
@click.pass_context
@handle_errors
def compare_command(
    ctx: click.Context, directory: Path, record_path: Path, summary: bool
) -> None:
    config = get_config(ctx)
    saved = find_record(record_path)

    comparison = compare(directory, saved, config.chunk_size, on_change=print_change)

    if summary:
        table = Table(title="Comparison")
        table.add_column("Status", style="cyan")
        table.add_column("Count", justify="right")

        table.add_row("Only in directory", str(len(comparison.only_in_directory)))
        table.add_row("Only in record", str(len(comparison.only_in_record)))
        table.add_row("Differs", str(len(comparison.differs)))
        table.add_row("Unchanged", str(comparison.stats.unchanged))

        console.print(table)


@main.command(name="list")
@click.argument("record_path", type=click.Path(path_type=Path))
@handle_errors
def list_record(record_path: Path) -> None:
    """List all paths and digests stored in RECORD_PATH."""
    saved = find_record(record_path)
    for path, digest in saved.sorted_items():
        console.print(Text(f"{path} -> {digest}"), soft_wrap=True)


if __name__ == "__main__":
    main()
