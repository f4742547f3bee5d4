"""Public API for xsdiff.

Example:
    >>> from xsdiff import diff_files
    >>> print(diff_files("v1/order.xsd", "v2/order.xsd"))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console

from .config import DiffConfig, load_config
from .documents import load_document
from .exceptions import InvalidPathError
from .formatters import ReportOutput, get_output
from .report import XmlSchemaDiffReport

logger = logging.getLogger(__name__)

SCHEMA_GLOB = "*.xsd"

PathLike = Union[str, Path]


def diff_documents(
    control: Any,
    test: Any,
    output: Optional[ReportOutput] = None,
    config: Optional[DiffConfig] = None,
) -> ReportOutput:
    """Compare two parsed documents and return the filled report output."""
    config = config or load_config()
    output = output or get_output(config.report_format)
    XmlSchemaDiffReport(output, config=config).run_diff(control, test)
    return output


def diff_files(
    control_path: PathLike,
    test_path: PathLike,
    config: Optional[DiffConfig] = None,
    console: Optional[Console] = None,
) -> str:
    """Compare two XML files and return the rendered report.

    Raises:
        InvalidPathError: If either path is not a file
        DocumentParseError: If either file is not well formed XML
    """
    config = config or load_config()
    control_path, test_path = Path(control_path), Path(test_path)
    for path in (control_path, test_path):
        if not path.is_file():
            raise InvalidPathError(path, "not a file")

    logger.info("Comparing %s -> %s", control_path, test_path)
    control = load_document(control_path, config)
    test = load_document(test_path, config)
    output = get_output(config.report_format, console=console)
    return diff_documents(control, test, output=output, config=config).render()


def diff_folders(
    control_dir: PathLike,
    test_dir: PathLike,
    config: Optional[DiffConfig] = None,
    pattern: str = SCHEMA_GLOB,
    console: Optional[Console] = None,
) -> dict[str, str]:
    """Compare every schema in two folders, pairing files by relative path.

    Returns:
        Relative file name -> report text, sorted by name. A schema present
        on one side only maps to a one-line ``ADDED schema`` /
        ``DELETED schema`` notice.

    Raises:
        InvalidPathError: If either path is not a directory
    """
    config = config or load_config()
    control_dir, test_dir = Path(control_dir), Path(test_dir)
    for path in (control_dir, test_dir):
        if not path.is_dir():
            raise InvalidPathError(path, "not a directory")

    control_files = {p.relative_to(control_dir).as_posix() for p in control_dir.rglob(pattern)}
    test_files = {p.relative_to(test_dir).as_posix() for p in test_dir.rglob(pattern)}

    reports: dict[str, str] = {}
    for name in sorted(control_files | test_files):
        if name not in test_files:
            reports[name] = f"DELETED schema {name}\n"
        elif name not in control_files:
            reports[name] = f"ADDED schema {name}\n"
        else:
            reports[name] = diff_files(
                control_dir / name, test_dir / name, config=config, console=console
            )
    logger.info("Compared %d schema file(s)", len(reports))
    return reports
