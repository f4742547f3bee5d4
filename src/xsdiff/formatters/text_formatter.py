"""Plain text report output — the default, byte-stable format."""

from typing import List

from ..changes import ChangeHolder
from ..textdiff import DELETE, EQUAL, INSERT, to_markup
from .base import ReportOutput, find_part_lines

ADDED_PREFIX = "+ "
REMOVED_PREFIX = "- "
CONTEXT_PREFIX = "  "


class _PendingFragments:
    """Collects text diff fragments until the next line is written."""

    def __init__(self) -> None:
        self.fragments: list[tuple[str, str]] = []

    def equal(self, text: str) -> None:
        self.fragments.append((EQUAL, text))

    def insert(self, text: str) -> None:
        self.fragments.append((INSERT, text))

    def delete(self, text: str) -> None:
        self.fragments.append((DELETE, text))


class TextReportOutput(ReportOutput):
    """Line-oriented plain text report.

    Text diffs use wdiff style markup: ``[-removed-]`` and ``{+added+}``.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._pending = _PendingFragments()

    def _flush_fragments(self) -> None:
        if self._pending.fragments:
            self._lines.extend(to_markup(tuple(self._pending.fragments)).splitlines())
            self._pending.fragments.clear()

    def _extend(self, text: str, prefix: str = "") -> None:
        self._flush_fragments()
        self._lines.extend(prefix + line for line in text.splitlines() or [""])

    def write(self, line: str) -> None:
        self._extend(line)

    def write_long(self, text: str) -> None:
        self._extend(text)

    def newline(self) -> None:
        self._flush_fragments()
        self._lines.append("")

    def add_added_part(self, text: str) -> None:
        self._extend(text, ADDED_PREFIX)

    def add_removed_part(self, text: str) -> None:
        self._extend(text, REMOVED_PREFIX)

    def mark_part_added(self, parent_text: str, parts: List[str]) -> None:
        self._mark_parts(parent_text, parts, ADDED_PREFIX)

    def mark_part_removed(self, parent_text: str, parts: List[str]) -> None:
        self._mark_parts(parent_text, parts, REMOVED_PREFIX)

    def _mark_parts(self, parent_text: str, parts: List[str], prefix: str) -> None:
        """Repeat the parent's lines, prefixing the ones that belong to a part."""
        marked: set[int] = set()
        missing: list[str] = []
        for part in parts:
            lines = find_part_lines(parent_text, part)
            if lines:
                marked.update(lines)
            else:
                missing.append(part)

        self._flush_fragments()
        for number, line in enumerate(parent_text.splitlines()):
            self._lines.append((prefix if number in marked else CONTEXT_PREFIX) + line)
        for part in missing:
            self._extend(part, prefix)

    def mark_changes(self, key: str, holder: ChangeHolder) -> None:
        self._extend(f"== {key}")
        self._extend(holder.anchor_text, CONTEXT_PREFIX)
        for text in holder.added_nodes:
            self._extend(text, ADDED_PREFIX)
        for text in holder.removed_nodes:
            self._extend(text, REMOVED_PREFIX)

    @property
    def handler(self) -> _PendingFragments:
        return self._pending

    @property
    def lines(self) -> list[str]:
        self._flush_fragments()
        return list(self._lines)

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"
