"""Base report output interface for xsdiff.

A report output is the only place the report writes to. It is handed to
``XmlSchemaDiffReport`` explicitly and only ever appended to.
"""

from abc import ABC, abstractmethod
from typing import List

from ..changes import ChangeHolder
from ..textdiff import FragmentSink

REPORT_HEADER = "TYPE ; XPATH ; OLD VALUE"
CHANGES_HEADER = "++ ADDS ; REMOVES ++"
DIFF_DELIMITER = "~"


class ReportOutput(ABC):
    """Abstract base class for report outputs."""

    @abstractmethod
    def write(self, line: str) -> None:
        """Append one report line."""

    @abstractmethod
    def write_long(self, text: str) -> None:
        """Append a multi-line block, e.g. a serialized node with context."""

    @abstractmethod
    def newline(self) -> None:
        """Append an empty line."""

    @abstractmethod
    def add_added_part(self, text: str) -> None:
        """Append a fragment that exists only in the test document."""

    @abstractmethod
    def add_removed_part(self, text: str) -> None:
        """Append a fragment that exists only in the control document."""

    @abstractmethod
    def mark_part_added(self, parent_text: str, parts: List[str]) -> None:
        """Show ``parent_text`` with ``parts`` highlighted as added."""

    @abstractmethod
    def mark_part_removed(self, parent_text: str, parts: List[str]) -> None:
        """Show ``parent_text`` with ``parts`` highlighted as removed."""

    @abstractmethod
    def mark_changes(self, key: str, holder: ChangeHolder) -> None:
        """Append one grouped entry of the adds/removes section."""

    @property
    @abstractmethod
    def handler(self) -> FragmentSink:
        """Sink that receives text diff fragments at the current position."""

    @abstractmethod
    def render(self) -> str:
        """Return the full report as a string."""


def find_part_lines(parent_text: str, part: str) -> range:
    """Line numbers of ``parent_text`` covered by the first occurrence of ``part``.

    Lines are compared without indentation, since a subtree serialized on
    its own is indented differently from the same subtree inside its parent.
    """
    parent_lines = [line.strip() for line in parent_text.splitlines()]
    part_lines = [line.strip() for line in part.splitlines()]
    if not part_lines:
        return range(0)

    width = len(part_lines)
    for first in range(len(parent_lines) - width + 1):
        if parent_lines[first : first + width] == part_lines:
            return range(first, first + width)
    return range(0)
