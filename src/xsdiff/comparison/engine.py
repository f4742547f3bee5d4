"""Schema-aware tree diff — produces the ordered Comparison stream.

Node matching is done by xmldiff's ``Differ``, tuned for schemas: two
elements can only match when they have the same qualified tag, and
elements carrying the identity attribute (``name`` by default) only match
an element with the same value. A renamed ``xs:element`` therefore shows
up as one removal plus one addition, not as a value change.

The engine then walks control and test trees together, depth first, and
reports differences in the order it meets them. For each pair of matched
elements it reports:

  1. Namespace and tag differences (generic, roots only).
  2. Attribute value changes, then removed and added attributes.
  3. A child list length change.
  4. For each matched child, in control order: an order change, then the
     child's own differences (recursively).
  5. Unmatched control children (node removed), then unmatched test
     children (node added).

An element that xmldiff pairs with a node under a different parent is
reported as removed here and added there. Text and comment children
match in order.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from xmldiff.diff import Differ

from ..config import DEFAULT_CONFIG, DiffConfig
from ..xpath import (
    attributes,
    child_nodes,
    is_comment,
    is_element,
    local_name,
    namespace_of,
    root_element,
)
from .models import AttributeNode, Comparison, ComparisonType, Detail, TextNode

logger = logging.getLogger(__name__)

# xmldiff's default match threshold
MATCH_THRESHOLD = 0.5


class SchemaDiffer(Differ):
    """xmldiff ``Differ`` that only pairs components of the same kind."""

    def __init__(self, match_attribute: str = "name", threshold: float = MATCH_THRESHOLD):
        super().__init__(F=threshold)
        self.match_attribute = match_attribute
        self.threshold = threshold

    def node_ratio(self, left, right):
        if not (is_element(left) and is_element(right)):
            return super().node_ratio(left, right)
        if left.tag != right.tag:
            return 0
        left_id = left.get(self.match_attribute)
        right_id = right.get(self.match_attribute)
        if left_id is not None or right_id is not None:
            return 1.0 if left_id == right_id else 0
        # Same kind without identity: always a candidate, the best ratio wins
        return max(super().node_ratio(left, right), self.threshold)

    def partners(self, control_root: Any, test_root: Any) -> dict:
        """Map each matched control element to its test element."""
        matches = self.match(control_root, test_root)
        # Differ may work on a copy of the left tree, map back through it
        left_nodes = dict(zip(self.left.iter(), control_root.iter()))
        right_nodes = dict(zip(self.right.iter(), test_root.iter()))

        partners = {}
        for match in matches:
            control = left_nodes.get(match[0])
            test = right_nodes.get(match[1])
            if is_element(control) and is_element(test):
                partners[control] = test
        return partners


class SchemaDiffEngine:
    """Compares two XML trees.

    Usage::

        engine = SchemaDiffEngine(config)
        for comparison in engine.compare(control_tree, test_tree):
            ...
    """

    def __init__(self, config: Optional[DiffConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._partners: dict = {}

    def compare(self, control: Any, test: Any) -> list[Comparison]:
        """Return every difference between ``control`` and ``test``."""
        control_root = root_element(control)
        test_root = root_element(test)
        out: list[Comparison] = []

        differ = SchemaDiffer(self.config.match_attribute)
        self._partners = differ.partners(control_root, test_root)
        logger.debug("xmldiff matched %d element pair(s)", len(self._partners))

        self._compare_elements(
            control_root,
            test_root,
            f"/{local_name(control_root)}[1]",
            f"/{local_name(test_root)}[1]",
            "/",
            "/",
            out,
        )
        self._partners = {}
        logger.debug("Tree diff produced %d comparison(s)", len(out))
        return out

    # ── Element level ────────────────────────────────────────────────────

    def _compare_elements(
        self,
        control: Any,
        test: Any,
        control_xpath: str,
        test_xpath: str,
        control_parent: str,
        test_parent: str,
        out: list[Comparison],
    ) -> None:
        control_ns, test_ns = namespace_of(control), namespace_of(test)
        if control_ns != test_ns:
            out.append(
                Comparison(
                    ComparisonType.GENERIC,
                    Detail(control_xpath, control_parent, control, control_ns),
                    Detail(test_xpath, test_parent, test, test_ns),
                    subject="namespace URI",
                )
            )

        control_name, test_name = local_name(control), local_name(test)
        if control_name != test_name:
            out.append(
                Comparison(
                    ComparisonType.GENERIC,
                    Detail(control_xpath, control_parent, control, control_name),
                    Detail(test_xpath, test_parent, test, test_name),
                    subject="element tag name",
                )
            )

        self._compare_attributes(
            control, test, control_xpath, test_xpath, control_parent, test_parent, out
        )
        self._compare_children(
            control, test, control_xpath, test_xpath, control_parent, test_parent, out
        )

    def _compare_attributes(
        self,
        control: Any,
        test: Any,
        control_xpath: str,
        test_xpath: str,
        control_parent: str,
        test_parent: str,
        out: list[Comparison],
    ) -> None:
        control_attrs = attributes(control)
        test_attrs = attributes(test)

        for name, control_value in control_attrs.items():
            if name not in test_attrs:
                continue
            test_value = test_attrs[name]
            if self._normalize(control_value) != self._normalize(test_value):
                out.append(
                    Comparison(
                        ComparisonType.VALUE_CHANGED,
                        Detail(
                            f"{control_xpath}/@{name}",
                            control_xpath,
                            AttributeNode(control, name, control_value),
                            control_value,
                        ),
                        Detail(
                            f"{test_xpath}/@{name}",
                            test_xpath,
                            AttributeNode(test, name, test_value),
                            test_value,
                        ),
                        subject="attribute value",
                    )
                )

        for name in control_attrs:
            if name not in test_attrs:
                out.append(
                    Comparison(
                        ComparisonType.ATTRIBUTE_REMOVED,
                        Detail(control_xpath, control_parent, control, name),
                        Detail(test_xpath, test_parent, test, None),
                        subject="attribute",
                    )
                )

        for name in test_attrs:
            if name not in control_attrs:
                out.append(
                    Comparison(
                        ComparisonType.ATTRIBUTE_ADDED,
                        Detail(control_xpath, control_parent, control, None),
                        Detail(test_xpath, test_parent, test, name),
                        subject="attribute",
                    )
                )

    # ── Child level ──────────────────────────────────────────────────────

    def _compare_children(
        self,
        control: Any,
        test: Any,
        control_xpath: str,
        test_xpath: str,
        control_parent: str,
        test_parent: str,
        out: list[Comparison],
    ) -> None:
        include_comments = not self.config.ignore_comments
        control_children = list(child_nodes(control, include_comments))
        test_children = list(child_nodes(test, include_comments))

        if len(control_children) != len(test_children):
            out.append(
                Comparison(
                    ComparisonType.LIST_LENGTH_CHANGED,
                    Detail(control_xpath, control_parent, control, len(control_children)),
                    Detail(test_xpath, test_parent, test, len(test_children)),
                    subject="child node list length",
                )
            )

        pairs = self._match(control_children, test_children)
        matched_test = {j for _, j in pairs}
        matched_control = {i for i, _ in pairs}

        # Order is judged among matched children only, so one insertion
        # does not make every later sibling look moved
        test_rank = {j: rank for rank, j in enumerate(sorted(matched_test))}

        for control_rank, (i, j) in enumerate(pairs):
            control_node, control_step = control_children[i]
            test_node, test_step = test_children[j]
            child_control_xpath = f"{control_xpath}/{control_step}"
            child_test_xpath = f"{test_xpath}/{test_step}"

            if test_rank[j] != control_rank:
                out.append(
                    Comparison(
                        ComparisonType.LIST_ORDER_CHANGED,
                        Detail(child_control_xpath, control_xpath, control_node, control_rank),
                        Detail(child_test_xpath, test_xpath, test_node, test_rank[j]),
                        subject="child node order",
                    )
                )

            self._compare_child(
                control_node,
                test_node,
                child_control_xpath,
                child_test_xpath,
                control_xpath,
                test_xpath,
                out,
            )

        for i, (control_node, control_step) in enumerate(control_children):
            if i in matched_control:
                continue
            out.append(
                Comparison(
                    ComparisonType.NODE_REMOVED,
                    Detail(
                        f"{control_xpath}/{control_step}",
                        control_xpath,
                        control_node,
                        _node_name(control_node),
                    ),
                    Detail(None, test_xpath, None, None),
                    subject="child node",
                )
            )

        for j, (test_node, test_step) in enumerate(test_children):
            if j in matched_test:
                continue
            out.append(
                Comparison(
                    ComparisonType.NODE_ADDED,
                    Detail(None, control_xpath, None, None),
                    Detail(
                        f"{test_xpath}/{test_step}",
                        test_xpath,
                        test_node,
                        _node_name(test_node),
                    ),
                    subject="child node",
                )
            )

    def _compare_child(
        self,
        control: Any,
        test: Any,
        control_xpath: str,
        test_xpath: str,
        control_parent: str,
        test_parent: str,
        out: list[Comparison],
    ) -> None:
        if is_element(control):
            self._compare_elements(
                control, test, control_xpath, test_xpath, control_parent, test_parent, out
            )
            return

        if isinstance(control, TextNode):
            control_value, test_value, subject = control.value, test.value, "text value"
        else:
            control_value, test_value, subject = control.text or "", test.text or "", "comment"

        if self._normalize(control_value) != self._normalize(test_value):
            out.append(
                Comparison(
                    ComparisonType.VALUE_CHANGED,
                    Detail(control_xpath, control_parent, control, control_value),
                    Detail(test_xpath, test_parent, test, test_value),
                    subject=subject,
                )
            )

    def _match(self, control_children: list, test_children: list) -> list[tuple[int, int]]:
        """Pair control and test children, in control order."""
        element_index = {
            node: j for j, (node, _) in enumerate(test_children) if is_element(node)
        }
        pending = {
            kind: [j for j, (node, _) in enumerate(test_children) if _node_kind(node) == kind]
            for kind in ("#text", "#comment")
        }

        pairs: list[tuple[int, int]] = []
        for i, (node, _) in enumerate(control_children):
            if is_element(node):
                j = element_index.get(self._partners.get(node))
            else:
                queue = pending[_node_kind(node)]
                j = queue.pop(0) if queue else None
            if j is not None:
                pairs.append((i, j))
        return pairs

    def _normalize(self, value: str) -> str:
        if self.config.ignore_whitespace:
            return " ".join(value.split())
        return value


def _node_kind(node: Any) -> Optional[str]:
    if isinstance(node, TextNode):
        return "#text"
    if is_comment(node):
        return "#comment"
    return None


def _node_name(node: Any) -> str:
    return _node_kind(node) or local_name(node)
