"""Node serialization — turning nodes into the text shown in reports.

Four views of a node are used:

- ``node_to_string``: the full subtree, pretty printed
- ``node_signature``: a short one-line identity (tag plus ``name``)
- ``node_with_parent_info``: the subtree preceded by its ancestor chain
- ``attr_to_string``: a single ``name="value"`` pair

All of them accept ``None`` so that a path that failed to resolve still
renders as something readable instead of aborting the report.
"""

from __future__ import annotations

import copy
import re
from typing import Any, Optional

from lxml import etree

from .comparison.models import AttributeNode, TextNode
from .xpath import find_attribute, is_comment, is_element

MISSING_SIGNATURE = "(none)"

_XMLNS_RE = re.compile(r'\s+xmlns(?::[\w.-]+)?="[^"]*"')
_SIGNATURE_TEXT_LIMIT = 40


def node_to_string(node: Any) -> str:
    """Serialize a node and its subtree (no namespace declarations)."""
    if node is None:
        return ""
    if isinstance(node, TextNode):
        return node.value
    if isinstance(node, AttributeNode):
        return f'{node.qname}="{node.value}"'
    if isinstance(node, etree._ElementTree):
        node = node.getroot()

    # tostring() on a child would drag its tail text along
    detached = copy.copy(node)
    detached.tail = None
    text = etree.tostring(detached, encoding="unicode", pretty_print=True, with_tail=False)
    return _XMLNS_RE.sub("", text).rstrip("\n")


def node_signature(node: Any) -> str:
    """Short identity of a node, e.g. ``<xs:element name="order">``."""
    if node is None:
        return MISSING_SIGNATURE
    if isinstance(node, TextNode):
        value = " ".join(node.value.split())
        if len(value) > _SIGNATURE_TEXT_LIMIT:
            value = value[: _SIGNATURE_TEXT_LIMIT - 3] + "..."
        return f'text "{value}"'
    if isinstance(node, AttributeNode):
        return f"@{node.qname}"
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    if is_comment(node):
        return "<!-- comment -->"
    if not is_element(node):
        return MISSING_SIGNATURE

    qname = etree.QName(node)
    tag = f"{node.prefix}:{qname.localname}" if node.prefix else qname.localname
    name = node.get("name")
    if name is not None:
        return f'<{tag} name="{name}">'
    return f"<{tag}>"


def node_with_parent_info(node: Any, xpath: Optional[str]) -> str:
    """Serialize a node preceded by comments naming its location and ancestors."""
    if node is None:
        return f"<!-- {xpath}: node not found -->"

    element = node
    if isinstance(node, TextNode):
        element = node.parent
    elif isinstance(node, AttributeNode):
        element = node.owner

    ancestors = [node_signature(a) for a in reversed(list(element.iterancestors()))]
    if element is not node:
        ancestors.append(node_signature(element))

    lines = [f"<!-- xpath: {xpath} -->"]
    if ancestors:
        lines.append(f"<!-- in: {' / '.join(ancestors)} -->")
    lines.append(node_to_string(node))
    return "\n".join(lines)


def attr_to_string(node: Any, qname: Optional[str]) -> str:
    """Render one attribute of an element as ``name="value"``."""
    if node is None or qname is None:
        return f"{qname}=?"
    value = find_attribute(node, qname)
    if value is None:
        return f"{qname}=?"
    return f'{qname}="{value}"'
