"""Word-level text diff and the adapter the report calls it through.

A text diff engine is any callable ``engine(old_text, new_text, sink)``
that reports the edit as a sequence of ``sink.equal`` / ``sink.insert`` /
``sink.delete`` calls. ``word_diff`` is the default engine: it splits
serialized XML into tags, words and whitespace and aligns the tokens with
``difflib.SequenceMatcher``.

The adapter runs the engine against an in-memory buffer first. Only a
complete diff is replayed into the report; if the engine raises, the
report gets a one-line failure notice instead and carries on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Optional, Protocol

from .exceptions import TextDiffError

logger = logging.getLogger(__name__)

FAILURE_TEMPLATE = "(failed to diff text: {error})"

# Tags, whitespace runs and words are separate tokens
_TOKEN_RE = re.compile(r"<[^>]*>|\s+|[^\s<]+")

EQUAL = "equal"
INSERT = "insert"
DELETE = "delete"


class FragmentSink(Protocol):
    """Receiver of text diff fragments."""

    def equal(self, text: str) -> None: ...

    def insert(self, text: str) -> None: ...

    def delete(self, text: str) -> None: ...


TextDiffEngine = Callable[[str, str, FragmentSink], None]


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def word_diff(old_text: str, new_text: str, sink: FragmentSink) -> None:
    """Diff two texts token by token and stream the result into ``sink``.

    Raises:
        TextDiffError: If either snapshot is not text
    """
    try:
        old_tokens = tokenize(old_text)
        new_tokens = tokenize(new_text)
    except TypeError as e:
        raise TextDiffError(f"cannot tokenize snapshot: {e}") from e
    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            sink.equal("".join(old_tokens[i1:i2]))
        elif tag == "delete":
            sink.delete("".join(old_tokens[i1:i2]))
        elif tag == "insert":
            sink.insert("".join(new_tokens[j1:j2]))
        else:
            sink.delete("".join(old_tokens[i1:i2]))
            sink.insert("".join(new_tokens[j1:j2]))


def to_markup(fragments: tuple[tuple[str, str], ...]) -> str:
    """Plain text markup: ``[-removed-]`` and ``{+added+}``."""
    parts = []
    for op, text in fragments:
        if op == INSERT:
            parts.append("{+" + text + "+}")
        elif op == DELETE:
            parts.append("[-" + text + "-]")
        else:
            parts.append(text)
    return "".join(parts)


class FragmentBuffer:
    """FragmentSink that records fragments, merging runs of the same kind."""

    def __init__(self) -> None:
        self._fragments: list[tuple[str, str]] = []

    def _append(self, op: str, text: str) -> None:
        if not text:
            return
        if self._fragments and self._fragments[-1][0] == op:
            self._fragments[-1] = (op, self._fragments[-1][1] + text)
        else:
            self._fragments.append((op, text))

    def equal(self, text: str) -> None:
        self._append(EQUAL, text)

    def insert(self, text: str) -> None:
        self._append(INSERT, text)

    def delete(self, text: str) -> None:
        self._append(DELETE, text)

    @property
    def fragments(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._fragments)


@dataclass(frozen=True)
class TextDiffResult:
    """Outcome of one text diff: fragments on success, a message on failure."""

    fragments: tuple[tuple[str, str], ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failure_message(self) -> str:
        return FAILURE_TEMPLATE.format(error=self.error)

    def markup(self) -> str:
        if not self.ok:
            return self.failure_message
        return to_markup(self.fragments)

    def replay(self, sink: FragmentSink) -> None:
        for op, text in self.fragments:
            getattr(sink, op)(text)


class TextDiffAdapter:
    """Runs a text diff engine without letting its failures escape."""

    def __init__(self, engine: Optional[TextDiffEngine] = None):
        self.engine: TextDiffEngine = engine or word_diff

    def diff(self, old_text: str, new_text: str) -> TextDiffResult:
        buffer = FragmentBuffer()
        try:
            self.engine(old_text, new_text, buffer)
        except Exception as e:
            logger.warning("Text diff failed: %s", e)
            return TextDiffResult(error=f"{e.__class__.__name__}: {e}")
        return TextDiffResult(fragments=buffer.fragments)

    def diff_into(self, old_text: str, new_text: str, sink: FragmentSink) -> TextDiffResult:
        """Diff and write the fragments into ``sink`` if the diff succeeded."""
        result = self.diff(old_text, new_text)
        if result.ok:
            result.replay(sink)
        return result

    def diff_to_string(self, old_text: str, new_text: str) -> str:
        """Diff into a markup string, or the failure placeholder."""
        return self.diff(old_text, new_text).markup()
