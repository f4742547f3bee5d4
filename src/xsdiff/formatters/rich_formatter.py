"""Rich terminal report output with colour-coded entries."""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..changes import ChangeHolder
from .base import REPORT_HEADER, CHANGES_HEADER, ReportOutput, find_part_lines

# Report lines are built as Text, never parsed as markup: xpaths and
# attribute notices contain square brackets
_LINE_STYLES = (
    ("ADDED", "green"),
    ("DELETED", "red"),
    ("MODIFIED", "yellow"),
    ("!", "bold red"),
    (".", "cyan"),
)


def _line_style(line: str) -> str:
    if line in (REPORT_HEADER, CHANGES_HEADER):
        return "bold cyan"
    for prefix, style in _LINE_STYLES:
        if line.startswith(prefix):
            return style
    return ""


class _RichFragmentHandler:
    """Collects text diff fragments into one Text until the next line."""

    def __init__(self) -> None:
        self.text = Text()

    def equal(self, text: str) -> None:
        self.text.append(text)

    def insert(self, text: str) -> None:
        self.text.append(text, style="bold green")

    def delete(self, text: str) -> None:
        self.text.append(text, style="red strike")


class RichReportOutput(ReportOutput):
    """Prints the report to a Rich console as it is produced.

    The console records everything it prints, so ``render()`` returns the
    plain text printed since the previous ``render()`` call.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(record=True)
        self._handler = _RichFragmentHandler()

    def _print(self, renderable) -> None:
        self._flush_fragments()
        # Report lines carry xpaths; they must stay whole at any console width
        self._console.print(renderable, soft_wrap=isinstance(renderable, Text))

    def _flush_fragments(self) -> None:
        if self._handler.text.plain:
            self._console.print(self._handler.text, soft_wrap=True)
            self._handler.text = Text()

    def write(self, line: str) -> None:
        self._print(Text(line, style=_line_style(line)))

    def write_long(self, text: str) -> None:
        self._print(Text(text, style="dim"))

    def newline(self) -> None:
        self._print(Text(""))

    def add_added_part(self, text: str) -> None:
        self._print(Text(text, style="green"))

    def add_removed_part(self, text: str) -> None:
        self._print(Text(text, style="red"))

    def mark_part_added(self, parent_text: str, parts: List[str]) -> None:
        self._print(_highlight(parent_text, parts, "bold green"))

    def mark_part_removed(self, parent_text: str, parts: List[str]) -> None:
        self._print(_highlight(parent_text, parts, "bold red"))

    def mark_changes(self, key: str, holder: ChangeHolder) -> None:
        body = Text(holder.anchor_text, style="dim")
        for node_text in holder.added_nodes:
            body.append("\n")
            body.append(node_text, style="green")
        for node_text in holder.removed_nodes:
            body.append("\n")
            body.append(node_text, style="red")
        self._print(Panel(body, title=Text(key, style="bold"), title_align="left", expand=True))

    @property
    def handler(self) -> _RichFragmentHandler:
        return self._handler

    def render(self) -> str:
        self._flush_fragments()
        return self._console.export_text(clear=True)


def _highlight(parent_text: str, parts: List[str], style: str) -> Text:
    marked: set[int] = set()
    for part in parts:
        marked.update(find_part_lines(parent_text, part))

    text = Text()
    for number, line in enumerate(parent_text.splitlines()):
        if number:
            text.append("\n")
        text.append(line, style=style if number in marked else "dim")
    return text
