"""XML Schema (XSD) difference report.

``XmlSchemaDiffReport`` consumes the comparison stream of one control/test
document pair and writes a two-part report:

1. One entry per difference, in stream order. Each comparison is
   classified as added, deleted or modified; modifications are routed by
   kind (order change, list length change, new/removed attribute, value
   change) to a formatter that decides how much context to show.
2. After the stream, the "adds / removes" section: additions and removals
   grouped per structural parent, in the order the groups were first seen.

Changes directly under the document root are never grouped, and paths
deeper than ``context_depth`` are shown through their parent node.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .changes import OP_ADDED, OP_REMOVED, ChangeAggregator, ChangeHolder
from .comparison.engine import SchemaDiffEngine
from .comparison.models import ChangeKind, Comparison, ComparisonType, Detail
from .config import DEFAULT_CONFIG, DiffConfig
from .exceptions import ReportStateError
from .formatters.base import CHANGES_HEADER, DIFF_DELIMITER, REPORT_HEADER, ReportOutput
from .serialization import attr_to_string, node_signature, node_to_string, node_with_parent_info
from .textdiff import TextDiffAdapter
from .xpath import find_node, xpath_depth

logger = logging.getLogger(__name__)


def is_added(comparison: Comparison) -> bool:
    return comparison.control.target is None


def is_deleted(comparison: Comparison) -> bool:
    return comparison.test.target is None


def classify(comparison: Comparison) -> ChangeKind:
    """Added if the control side is missing, deleted if the test side is, else modified."""
    if is_added(comparison):
        return ChangeKind.ADDED
    if is_deleted(comparison):
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


class XmlSchemaDiffReport:
    """Generates the difference report for one pair of documents.

    An instance holds the change table of a single run; create a new one
    for every pair.

    Usage::

        output = TextReportOutput()
        XmlSchemaDiffReport(output).run_diff(control_tree, test_tree)
        print(output.render())
    """

    def __init__(
        self,
        output: ReportOutput,
        config: Optional[DiffConfig] = None,
        engine: Optional[SchemaDiffEngine] = None,
        text_diff: Optional[TextDiffAdapter] = None,
    ):
        self.output = output
        self.config = config or DEFAULT_CONFIG
        self.engine = engine or SchemaDiffEngine(self.config)
        self.text_diff = text_diff or TextDiffAdapter()
        self.changes = ChangeAggregator(min_holder_depth=self.config.min_holder_depth)
        self._used = False

    def run_diff(self, control_doc: Any, test_doc: Any) -> None:
        """Compare the documents and write the whole report to the output."""
        if self._used:
            raise ReportStateError("XmlSchemaDiffReport instances report a single document pair")
        self._used = True

        comparisons = self.engine.compare(control_doc, test_doc)
        logger.info("Reporting %d difference(s)", len(comparisons))

        self.output.write(REPORT_HEADER)
        for comparison in comparisons:
            self.report_comparison(comparison, control_doc, test_doc)

        self.output.write(CHANGES_HEADER)
        self.print_adds_and_removes()

    def report_comparison(self, comparison: Comparison, control_doc: Any, test_doc: Any) -> None:
        kind = classify(comparison)
        if kind is ChangeKind.ADDED:
            self.print_added_node(test_doc, comparison)
        elif kind is ChangeKind.DELETED:
            self.print_deleted_node(control_doc, comparison)
        else:
            self.print_modified_node(test_doc, control_doc, comparison)

    def print_adds_and_removes(self) -> None:
        for key, holder in self.changes:
            self.output.mark_changes(key, holder)

    # ── Added / deleted nodes ────────────────────────────────────────────

    def print_added_node(self, test_doc: Any, comparison: Comparison) -> None:
        details = comparison.test
        parent_node = find_node(test_doc, details.parent_xpath)
        self.output.write(
            f"ADDED <!-- xpath: {details.xpath} (parent node: "
            f"{node_signature(parent_node)} - {details.parent_xpath} ) -->"
        )

        node_text = node_to_string(find_node(test_doc, details.xpath))
        self.output.add_added_part(node_text)
        self.output.newline()

        if not self.mark_node_added(details.parent_xpath, node_text, test_doc):
            self.output.write(f"! holder for {details.parent_xpath} did not exist(?)")
            parent_text = node_with_parent_info(parent_node, details.parent_xpath)
            self.output.write_long(parent_text)
            self.output.mark_part_added(parent_text, [node_text])

    def print_deleted_node(self, control_doc: Any, comparison: Comparison) -> None:
        details = comparison.control
        parent_node = find_node(control_doc, details.parent_xpath)
        self.output.write(
            f"DELETED <!-- xpath: {details.xpath} (parent node: "
            f"{node_signature(parent_node)} - {details.parent_xpath} ) -->"
        )

        node_text = node_to_string(find_node(control_doc, details.xpath))
        self.output.add_removed_part(node_text)
        self.output.newline()

        if not self.mark_node_removed(details.parent_xpath, node_text, control_doc):
            self.output.write(f"! holder for {details.parent_xpath} did not exist(?)")
            parent_text = node_with_parent_info(parent_node, details.parent_xpath)
            self.output.write_long(parent_text)
            self.output.mark_part_removed(parent_text, [node_text])

    def mark_node_added(self, parent_xpath: str, node_text: str, parent_doc: Any) -> bool:
        """Record an addition; False means the parent is too shallow to group under."""
        holder = self.changes.get_or_create(parent_xpath, parent_doc, OP_ADDED)
        if holder is None:
            return False
        self.changes.record_added(holder, node_text)
        return True

    def mark_node_removed(self, parent_xpath: str, node_text: str, parent_doc: Any) -> bool:
        """Record a removal; False means the parent is too shallow to group under."""
        holder = self.changes.get_or_create(parent_xpath, parent_doc, OP_REMOVED)
        if holder is None:
            return False
        self.changes.record_removed(holder, node_text)
        return True

    # ── Modified nodes ───────────────────────────────────────────────────

    def print_modified_node(self, test_doc: Any, control_doc: Any, comparison: Comparison) -> None:
        details = comparison.control
        if xpath_depth(details.xpath) == 1:
            self.output.write(f"MODIFIED ; {details.xpath}.")
            return

        if comparison.type is ComparisonType.LIST_ORDER_CHANGED:
            self.output.write(f". node order different: {comparison.test.xpath}")
        elif comparison.type is ComparisonType.LIST_LENGTH_CHANGED:
            self.print_child_count_change(test_doc, control_doc, comparison)
        elif comparison.type is ComparisonType.ATTRIBUTE_ADDED:
            self.print_new_attr(comparison.test)
        elif comparison.type is ComparisonType.ATTRIBUTE_REMOVED:
            self.print_removed_attr(comparison.control)
        else:
            self.print_node_diff(test_doc, comparison)

    def print_child_count_change(
        self, test_doc: Any, control_doc: Any, comparison: Comparison
    ) -> Optional[ChangeHolder]:
        control, test = comparison.control, comparison.test
        delta = int(test.value) - int(control.value)

        if delta > 0:
            self.output.write(
                f". {delta} node(s) added: {node_signature(test.target)} <!-- {test.xpath} -->"
            )
            holder = self.changes.get_or_create(
                test.xpath, test_doc, OP_ADDED, anchor_text=self.holder_node_text(test_doc, test)
            )
        else:
            self.output.write(
                f". {-delta} node(s) removed: {node_signature(test.target)} <!-- {test.xpath} -->"
            )
            holder = self.changes.get_or_create(
                control.xpath,
                control_doc,
                OP_REMOVED,
                anchor_text=self.holder_node_text(control_doc, control),
            )

        if self.should_take_parent(control.xpath):
            old_text = node_to_string(find_node(control_doc, control.parent_xpath))
            new_text = node_to_string(find_node(test_doc, test.parent_xpath))
            self.write_text_diff(old_text, new_text)

        return holder

    def should_take_parent(self, xpath: Optional[str]) -> bool:
        """Deep paths are shown through their parent for context."""
        return xpath_depth(xpath) > self.config.context_depth

    def holder_node_text(self, doc: Any, details: Detail) -> str:
        """Serialize the node, or its parent when the node is nested deeply."""
        xpath = details.parent_xpath if self.should_take_parent(details.xpath) else details.xpath
        return node_to_string(find_node(doc, xpath))

    def print_new_attr(self, detail: Detail) -> None:
        self.output.write(
            f"MODIFIED ; new attribute [{attr_to_string(detail.target, detail.value)}] "
            f"<!-- xpath: {detail.xpath} -->"
        )

    def print_removed_attr(self, detail: Detail) -> None:
        self.output.write(
            f"MODIFIED ; removed attribute [{attr_to_string(detail.target, detail.value)}] "
            f"<!-- xpath: {detail.xpath} -->"
        )

    def print_node_diff(self, test_doc: Any, comparison: Comparison) -> None:
        self.output.write(f"MODIFIED ; {comparison.describe()}")
        self.output.newline()

        old_text = node_to_string(comparison.control.target)
        new_text = node_to_string(comparison.test.target)
        self.output.write(f"- {old_text}")
        self.output.write(f"+ {new_text}")

        self.write_text_diff(old_text, new_text)

        parent_xpath = comparison.test.parent_xpath
        parent_node = find_node(test_doc, parent_xpath)
        self.output.write_long(node_with_parent_info(parent_node, parent_xpath))

    def write_text_diff(self, old_text: str, new_text: str) -> None:
        """Write a text diff between ``~`` lines, or a failure notice."""
        self.output.write(DIFF_DELIMITER)
        result = self.text_diff.diff_into(old_text, new_text, self.output.handler)
        if not result.ok:
            self.output.write(result.failure_message)
        self.output.write(DIFF_DELIMITER)
