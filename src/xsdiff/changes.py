"""Change aggregation — grouping added/removed nodes under their parent.

The report collects additions and removals that share a structural parent
into one ``ChangeHolder`` so they can be shown together, next to a
snapshot of the parent taken when the first change was seen. Holders live
in a ``ChangeTable`` that keeps first-creation order for the final
"adds / removes" section.

Lookup and creation share one key function, ``change_key``, so a second
addition under the same parent always finds the holder the first one
created. Additions and removals get separate holders even under the same
parent: an "added" holder is anchored in the test document and a
"removed" holder in the control document.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from .serialization import node_to_string
from .xpath import find_node, xpath_depth

logger = logging.getLogger(__name__)

OP_ADDED = "added"
OP_REMOVED = "removed"


def change_key(op_kind: str, xpath: str) -> str:
    """Key of the holder for changes of one kind under one parent path."""
    return f"{op_kind}-{xpath}"


class ChangeHolder:
    """Additions and removals collected under one parent node.

    The anchor text is fixed at creation; the two node lists only grow.
    """

    __slots__ = ("_anchor_text", "_added", "_removed")

    def __init__(self, anchor_text: str):
        self._anchor_text = anchor_text
        self._added: list[str] = []
        self._removed: list[str] = []

    @property
    def anchor_text(self) -> str:
        return self._anchor_text

    @property
    def added_nodes(self) -> tuple[str, ...]:
        return tuple(self._added)

    @property
    def removed_nodes(self) -> tuple[str, ...]:
        return tuple(self._removed)

    def added_node(self, node_text: str) -> None:
        self._added.append(node_text)

    def removed_node(self, node_text: str) -> None:
        self._removed.append(node_text)

    def __repr__(self) -> str:
        return (
            f"ChangeHolder(added={len(self._added)}, removed={len(self._removed)}, "
            f"anchor={self._anchor_text[:30]!r})"
        )


class ChangeTable:
    """Insertion-ordered, append-only mapping of key -> ChangeHolder."""

    def __init__(self) -> None:
        self._holders: dict[str, ChangeHolder] = {}

    def get(self, key: str) -> Optional[ChangeHolder]:
        return self._holders.get(key)

    def add(self, key: str, anchor_text: str) -> ChangeHolder:
        """Create the holder for ``key``; an existing holder is returned as is."""
        holder = self._holders.get(key)
        if holder is not None:
            return holder
        holder = ChangeHolder(anchor_text)
        self._holders[key] = holder
        return holder

    def keys(self) -> list[str]:
        return list(self._holders)

    def __contains__(self, key: object) -> bool:
        return key in self._holders

    def __len__(self) -> int:
        return len(self._holders)

    def __iter__(self) -> Iterator[tuple[str, ChangeHolder]]:
        return iter(list(self._holders.items()))


class ChangeAggregator:
    """Owns the ChangeTable of one report run and its depth filter.

    Args:
        min_holder_depth: Parent paths with fewer steps than this are
            "too close to the document root" and never get a holder.
    """

    def __init__(self, min_holder_depth: int = 2):
        self.min_holder_depth = min_holder_depth
        self.table = ChangeTable()

    def get_or_create(
        self,
        xpath: str,
        owner_document: Any,
        op_kind: str,
        anchor_text: Optional[str] = None,
    ) -> Optional[ChangeHolder]:
        """Find or create the holder for changes of ``op_kind`` under ``xpath``.

        Returns None when the path is too shallow; the caller then reports
        the change inline. ``anchor_text`` defaults to the serialization of
        the node at ``xpath`` in ``owner_document``.
        """
        key = change_key(op_kind, xpath)
        holder = self.table.get(key)
        if holder is not None:
            return holder

        if xpath_depth(xpath) < self.min_holder_depth:
            logger.debug("Not grouping %s changes under shallow path %s", op_kind, xpath)
            return None

        if anchor_text is None:
            anchor_text = node_to_string(find_node(owner_document, xpath))
        logger.debug("New change holder %s", key)
        return self.table.add(key, anchor_text)

    @staticmethod
    def record_added(holder: ChangeHolder, node_text: str) -> None:
        holder.added_node(node_text)

    @staticmethod
    def record_removed(holder: ChangeHolder, node_text: str) -> None:
        holder.removed_node(node_text)

    def __iter__(self) -> Iterator[tuple[str, ChangeHolder]]:
        return iter(self.table)

    def __len__(self) -> int:
        return len(self.table)
