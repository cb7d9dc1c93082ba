"""ripzip CLI application with Typer."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from ripzip import __version__
from ripzip.app.zip_service import JobOutcome
from ripzip.bootstrap import bootstrap_application
from ripzip.config import get_settings, set_settings
from ripzip.utils.sizes import format_size, parse_size

app = typer.Typer(
    name="rip",
    help="rip - Cross-platform ZIP handling that just works everywhere",
    add_completion=False,
)

_HANDLER_MARKER = "_ripzip_cli_handler"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"rip version {__version__}")
        raise typer.Exit()


def _parse_size_option(value: str | None) -> int | None:
    """Parse ``10K`` / ``5M`` / ``2G`` style size options."""
    if value is None:
        return None
    try:
        return parse_size(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _configure_logging(verbose: bool) -> None:
    """Route ripzip log records to the current stderr."""
    logger = logging.getLogger("ripzip")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _report(outcome: JobOutcome, verbose: bool) -> None:
    if outcome.ok and outcome.result is not None:
        result = outcome.result
        typer.secho(
            f"Successfully created ZIP file: {outcome.destination}",
            fg=typer.colors.GREEN,
        )
        if verbose:
            typer.echo(
                f"  Files: {len(result.entries)}  Size: {format_size(result.total_bytes)}"
            )
        if result.skipped:
            typer.secho(
                f"  Skipped {len(result.skipped)} file(s)",
                fg=typer.colors.YELLOW,
                err=True,
            )
        return

    typer.secho(
        f"Error creating ZIP file for {outcome.source}: {outcome.error}",
        fg=typer.colors.RED,
        err=True,
    )


@app.command()
def main(
    sources: Annotated[
        list[Path],
        typer.Argument(help="Directories to zip (supports drag and drop)"),
    ],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Use verbose output"),
    ] = False,
    zip64: Annotated[
        bool,
        typer.Option("--zip64", help="Enable ZIP64 support for large files (>4GB)"),
    ] = False,
    capped: Annotated[
        bool,
        typer.Option("--capped", help="Apply default size caps (1 GiB per file, 4 GiB total)"),
    ] = False,
    max_file_size: Annotated[
        str | None,
        typer.Option(
            "--max-file-size",
            help="Skip files larger than SIZE (e.g. 500M)",
            metavar="SIZE",
        ),
    ] = None,
    max_total_size: Annotated[
        str | None,
        typer.Option(
            "--max-total-size",
            help="Abort when the archived total exceeds SIZE (e.g. 2G)",
            metavar="SIZE",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write archives to this directory"),
    ] = None,
    keep_partial: Annotated[
        bool,
        typer.Option("--keep-partial", help="Keep incomplete archives after a failure"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Create a ZIP archive next to each SOURCE directory."""
    file_limit = _parse_size_option(max_file_size)
    total_limit = _parse_size_option(max_total_size)

    # Update settings with CLI flags
    settings = get_settings()
    updates: dict[str, object] = {}
    if verbose:
        updates["verbose"] = True
    if zip64:
        updates["zip64"] = True
    if capped:
        updates["size_capped"] = True
    if file_limit is not None:
        updates["max_file_size"] = file_limit
    if total_limit is not None:
        updates["max_total_size"] = total_limit
    if output_dir is not None:
        updates["output_dir"] = output_dir
    if keep_partial:
        updates["keep_partial"] = True
    if updates:
        settings = settings.model_copy(update=updates)
    set_settings(settings)

    _configure_logging(settings.verbose)

    container = bootstrap_application(settings, progress=typer.echo)
    options = settings.archive_options()

    failures = 0
    for source in sources:
        outcome = container.zip_service.archive_directory(source, options)
        _report(outcome, settings.verbose)
        if not outcome.ok:
            failures += 1

    if failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
