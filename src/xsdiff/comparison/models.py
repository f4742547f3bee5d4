"""Data models for the comparison stream produced by the tree-diff engine.

A ``Comparison`` pairs a control-side and a test-side ``Detail``. The
report layer only reads these models; it never looks inside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ComparisonType(Enum):
    """Closed set of difference kinds reported by the engine.

    Anything the report does not handle specifically goes through the
    generic value-change branch.
    """

    LIST_ORDER_CHANGED = "list-order-changed"
    LIST_LENGTH_CHANGED = "list-length-changed"
    ATTRIBUTE_ADDED = "attribute-added"
    ATTRIBUTE_REMOVED = "attribute-removed"
    VALUE_CHANGED = "value-changed"
    NODE_ADDED = "node-added"
    NODE_REMOVED = "node-removed"
    GENERIC = "generic"


class ChangeKind(Enum):
    """Top-level classification of a comparison."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"


@dataclass(frozen=True)
class TextNode:
    """A text child of an element (lxml keeps text on the element itself)."""

    parent: Any
    value: str


@dataclass(frozen=True)
class AttributeNode:
    """A single attribute of an element."""

    owner: Any
    qname: str
    value: str


@dataclass(frozen=True)
class Detail:
    """One side of a comparison.

    Attributes:
        xpath: Location of the compared node in its document
        parent_xpath: Location of the node's parent
        target: lxml element, TextNode, AttributeNode, or None when the node
            does not exist on this side
        value: Kind-specific payload (child count, attribute name, text)
    """

    xpath: Optional[str]
    parent_xpath: Optional[str]
    target: Any = None
    value: Any = None


@dataclass(frozen=True)
class Comparison:
    """One unit of difference between the control and test trees."""

    type: ComparisonType
    control: Detail
    test: Detail
    subject: str = ""  # what was compared, e.g. "attribute value"

    def describe(self) -> str:
        """Render a one-line description of the difference."""
        label = self.subject or self.type.value
        return (
            f"Expected {label} '{_value_str(self.control.value)}' "
            f"but was '{_value_str(self.test.value)}' - comparing "
            f"{_target_str(self.control.target)} at {self.control.xpath} to "
            f"{_target_str(self.test.target)} at {self.test.xpath}"
        )


def _value_str(value: Any) -> str:
    if value is None:
        return "null"
    return str(value)


def _target_str(target: Any) -> str:
    # Deferred: serialization imports lxml-facing helpers
    from ..serialization import node_signature

    return node_signature(target)
