"""Compare command — report the differences between two schemas or folders."""

import io
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..api import diff_files, diff_folders
from ..config import REPORT_FORMATS
from ..exceptions import XsDiffError
from ..logging_config import setup_logging
from . import app
from ._common import err_console, resolve_config

_EXTENSIONS = {"text": ".txt", "html": ".html", "rich": ".txt"}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"xsdiff version {__version__}")
        raise typer.Exit(0)


@app.command()
def compare(
    control: Path = typer.Argument(
        ...,
        help="Baseline schema file (or folder of schemas)",
        exists=True,
        readable=True,
    ),
    test: Path = typer.Argument(
        ...,
        help="Candidate schema file (or folder of schemas)",
        exists=True,
        readable=True,
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Report format: text (default), html, rich",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to this file (a directory when comparing folders)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Report the differences between two versions of an XML schema.

    [bold cyan]Examples:[/bold cyan]

      xsdiff old/order.xsd new/order.xsd

      xsdiff old/order.xsd new/order.xsd --format html -o diff.html

      xsdiff schemas-v1/ schemas-v2/ -o reports/
    """
    if verbose and quiet:
        err_console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    if fmt is not None and fmt not in REPORT_FORMATS:
        err_console.print(
            f"[red]Error:[/red] --format must be one of: {', '.join(REPORT_FORMATS)}"
        )
        raise typer.Exit(1)

    if control.is_dir() != test.is_dir():
        err_console.print("[red]Error:[/red] CONTROL and TEST must both be files or both folders")
        raise typer.Exit(1)

    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(config=config, fmt=fmt, verbose=verbose, quiet=quiet)
        logger.debug("Loaded configuration: %s", settings)

        # A single rich report prints itself while it is produced; folder
        # reports and reports going to a file are recorded off screen
        folders = control.is_dir()
        prints_live = settings.report_format == "rich" and output is None and not folders
        console = None
        if settings.report_format == "rich" and not prints_live:
            console = Console(file=io.StringIO(), record=True, width=120)

        if folders:
            reports = diff_folders(control, test, config=settings, console=console)
            if output is not None:
                output.mkdir(parents=True, exist_ok=True)
                suffix = _EXTENSIONS[settings.report_format]
                for name, text in reports.items():
                    target = output / (name + suffix)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(text, encoding="utf-8")
                err_console.print(f"[green]Wrote {len(reports)} report(s) to {output}[/green]")
            else:
                for name, text in reports.items():
                    typer.echo(f"=== {name} ===")
                    typer.echo(text, nl=False)

        else:
            report = diff_files(control, test, config=settings, console=console)
            if output is not None:
                output.write_text(report, encoding="utf-8")
                err_console.print(f"[green]Report written to {output}[/green]")
            elif not prints_live:
                typer.echo(report, nl=False)

    except XsDiffError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Comparison interrupted by user")
        err_console.print("\n[yellow]Comparison interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during comparison")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
