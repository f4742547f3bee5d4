"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import DiffConfig, load_config

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    fmt: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> DiffConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if fmt is not None:
        overrides["report_format"] = fmt
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
