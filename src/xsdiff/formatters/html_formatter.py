"""HTML report output — a standalone page with highlighted changes."""

import html
from typing import List

from ..changes import ChangeHolder
from .base import ReportOutput, find_part_lines

_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; }}
pre {{ background: #f6f8fa; padding: 0.5em; }}
.added, ins {{ background: #e6ffed; color: #22863a; text-decoration: none; }}
.removed, del {{ background: #ffeef0; color: #cb2431; }}
.changes {{ border-top: 1px solid #ccc; margin-top: 1em; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


class _HtmlFragmentHandler:
    """Collects text diff fragments as ``<ins>``/``<del>`` for one ``<pre>`` block."""

    def __init__(self, parts: list[str]):
        self._parts = parts
        self._pending: list[str] = []

    def equal(self, text: str) -> None:
        self._pending.append(html.escape(text))

    def insert(self, text: str) -> None:
        self._pending.append(f"<ins>{html.escape(text)}</ins>")

    def delete(self, text: str) -> None:
        self._pending.append(f"<del>{html.escape(text)}</del>")

    def close(self) -> None:
        # Whitespace is significant inside <pre>, so the block is one part
        if self._pending:
            self._parts.append('<pre class="diff">' + "".join(self._pending) + "</pre>")
            self._pending = []


class HtmlReportOutput(ReportOutput):
    """Builds an HTML page; ``render()`` returns the complete document."""

    def __init__(self, title: str = "XML schema differences"):
        self.title = title
        self._parts: list[str] = []
        self._handler = _HtmlFragmentHandler(self._parts)

    def _append(self, fragment: str) -> None:
        self._handler.close()
        self._parts.append(fragment)

    def write(self, line: str) -> None:
        self._append(f"<div>{html.escape(line)}</div>")

    def write_long(self, text: str) -> None:
        self._append(f"<pre>{html.escape(text)}</pre>")

    def newline(self) -> None:
        self._append("<br>")

    def add_added_part(self, text: str) -> None:
        self._append(f'<pre class="added">{html.escape(text)}</pre>')

    def add_removed_part(self, text: str) -> None:
        self._append(f'<pre class="removed">{html.escape(text)}</pre>')

    def mark_part_added(self, parent_text: str, parts: List[str]) -> None:
        self._append(_highlight(parent_text, parts, "added"))

    def mark_part_removed(self, parent_text: str, parts: List[str]) -> None:
        self._append(_highlight(parent_text, parts, "removed"))

    def mark_changes(self, key: str, holder: ChangeHolder) -> None:
        items = [f'<div class="changes"><h3>{html.escape(key)}</h3>']
        items.append(f"<pre>{html.escape(holder.anchor_text)}</pre>")
        for text in holder.added_nodes:
            items.append(f'<pre class="added">{html.escape(text)}</pre>')
        for text in holder.removed_nodes:
            items.append(f'<pre class="removed">{html.escape(text)}</pre>')
        items.append("</div>")
        self._append("\n".join(items))

    @property
    def handler(self) -> _HtmlFragmentHandler:
        return self._handler

    def render(self) -> str:
        self._handler.close()
        return _PAGE.format(title=html.escape(self.title), body="\n".join(self._parts))


def _highlight(parent_text: str, parts: List[str], css_class: str) -> str:
    marked: set[int] = set()
    for part in parts:
        marked.update(find_part_lines(parent_text, part))

    lines = []
    for number, line in enumerate(parent_text.splitlines()):
        escaped = html.escape(line)
        if number in marked:
            escaped = f'<span class="{css_class}">{escaped}</span>'
        lines.append(escaped)
    return "<pre>" + "\n".join(lines) + "</pre>"
