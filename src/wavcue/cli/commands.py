import logging
import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from wavcue.cli.validators import validate_frame_offset, validate_label
from wavcue.format import RiffError, WaveFile, label_from_path, patch_file

app = App(
    name="wavcue",
    help="Replace the cue markers of a WAVE file with a single labelled cue point",
)
console = Console()
error_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in red."""
    error_console.print(message, style="bold red", markup=False)


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green", markup=False)


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    error_console.print(message, style="bold yellow", markup=False)


def configure_logging(trace: bool) -> None:
    """Route wavcue log records to stderr, at DEBUG level when tracing."""
    logger = logging.getLogger("wavcue")
    logger.setLevel(logging.DEBUG if trace else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(
            RichHandler(console=error_console, show_time=False, show_path=False)
        )


def failure_status(strict: bool) -> int:
    # Failures exit 0 unless --strict is given
    return 1 if strict else 0


def chunk_table(wave: WaveFile, title: str) -> Table:
    """Build a table of the chunk tree of ``wave``."""
    table = Table(title=title)
    table.add_column("Chunk", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Detail")

    for row in wave.describe():
        table.add_row(
            "  " * row.depth + escape(repr(row.chunk_id)),
            str(row.on_disk_size),
            escape(row.detail),
        )

    return table


@app.default
def patch(
    source: Path,
    target: Path,
    *,
    trace: Annotated[bool, Parameter(name=["--trace", "-t"], negative="")] = False,
    label: Annotated[str | None, Parameter(validator=validate_label)] = None,
    offset: Annotated[int, Parameter(validator=validate_frame_offset)] = 0,
    strict: bool = False,
) -> int:
    """
    Replace the cue points and labels of a WAVE file with one labelled cue point.

    Parameters
    ----------
    source: Path
        The WAV file to read
    target: Path
        Where to write the patched WAV file
    trace: bool
        Trace chunk loading and print the patched chunk layout
    label: str | None
        Label text (default: source file name without directory and extension)
    offset: int
        Sample frame of the cue point
    strict: bool
        Exit with status 1 when the file cannot be patched
    """
    configure_logging(trace)

    if label is None:
        label = label_from_path(source)

    if source.resolve() == target.resolve():
        print_warning(f"Warning: overwriting source file {source}")

    try:
        wave = patch_file(source, target, label=label, frame_offset=offset)
    except RiffError as e:
        print_error(f"Error: {e}")
        return failure_status(strict)

    if trace:
        console.print(chunk_table(wave, escape(f"{target} (RIFF size {wave.header.riff_size})")))

    print_success(f"Labelled {target} with {label!r} at frame {offset}")
    return 0


@app.command
def info(file: Path, *, strict: bool = False) -> int:
    """
    Display the chunk layout of a WAVE file.

    Parameters
    ----------
    file: Path
        The WAV file to inspect
    strict: bool
        Exit with status 1 when the file cannot be read
    """
    configure_logging(False)

    try:
        wave = WaveFile.load(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return failure_status(strict)

    console.print(f"Wave file: {escape(str(file))}")
    console.print(f"  RIFF size: {wave.header.riff_size} bytes")
    console.print(f"  Chunks: {len(wave.chunks)}")
    console.print(chunk_table(wave, escape(str(file))))
    return 0


if __name__ == "__main__":
    sys.exit(app())
