"""Report outputs for xsdiff."""

from typing import Optional

from rich.console import Console

from .base import CHANGES_HEADER, DIFF_DELIMITER, REPORT_HEADER, ReportOutput
from .html_formatter import HtmlReportOutput
from .rich_formatter import RichReportOutput
from .text_formatter import TextReportOutput

__all__ = [
    "ReportOutput",
    "TextReportOutput",
    "HtmlReportOutput",
    "RichReportOutput",
    "REPORT_HEADER",
    "CHANGES_HEADER",
    "DIFF_DELIMITER",
    "get_output",
]

_OUTPUTS = {
    "text": TextReportOutput,
    "html": HtmlReportOutput,
    "rich": RichReportOutput,
}


def get_output(name: str, console: Optional[Console] = None) -> ReportOutput:
    """Return a fresh report output by format name."""
    cls = _OUTPUTS.get(name)
    if cls is None:
        raise ValueError(f"Unknown report format: {name!r}. Choose from: {', '.join(_OUTPUTS)}")
    if cls is RichReportOutput:
        return RichReportOutput(console=console)
    return cls()
