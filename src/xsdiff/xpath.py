"""Path utilities — building, resolving and measuring node locations.

Locations are simple absolute XPath expressions made of local names with
1-based positional predicates, e.g.::

    /schema[1]/complexType[2]/sequence[1]/element[3]
    /schema[1]/element[1]/@type
    /schema[1]/annotation[1]/documentation[1]/text()[1]

Namespace prefixes are left out so that paths stay readable and stable
when two schema versions bind the same namespace to different prefixes.
Both the comparison engine and ``find_node`` enumerate children through
``child_nodes``, so every path the engine reports can be resolved back.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, Optional

from lxml import etree

from .comparison.models import AttributeNode, TextNode

logger = logging.getLogger(__name__)

_STEP_RE = re.compile(r"^(?P<name>[^\[\]]+)\[(?P<index>\d+)\]$")


def local_name(element: Any) -> str:
    """Local part of an element's tag."""
    return etree.QName(element).localname


def namespace_of(element: Any) -> Optional[str]:
    return etree.QName(element).namespace


def is_element(node: Any) -> bool:
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def is_comment(node: Any) -> bool:
    return isinstance(node, etree._Comment)


def attribute_name(element: Any, key: str) -> str:
    """Display name of an attribute key (``{ns}local`` becomes ``prefix:local``)."""
    if not key.startswith("{"):
        return key
    qname = etree.QName(key)
    if qname.namespace == "http://www.w3.org/XML/1998/namespace":
        return f"xml:{qname.localname}"
    for prefix, uri in (element.nsmap or {}).items():
        if uri == qname.namespace and prefix:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def attributes(element: Any) -> dict[str, str]:
    """Attributes of an element keyed by display name, in document order."""
    return {attribute_name(element, key): value for key, value in element.attrib.items()}


def find_attribute(element: Any, name: str) -> Optional[str]:
    """Value of an attribute looked up by display name or Clark key."""
    value = element.get(name)
    if value is not None:
        return value
    return attributes(element).get(name)


def child_nodes(element: Any, include_comments: bool = False) -> Iterator[tuple[Any, str]]:
    """Yield ``(node, step)`` for the children that take part in comparison.

    Elements, non-blank text segments and (optionally) comments are
    yielded in document order. Blank text between elements is formatting
    and never counts. Steps are numbered per node kind, as in XPath.
    """
    element_counts: dict[str, int] = {}
    text_count = 0
    comment_count = 0

    if element.text is not None and element.text.strip():
        text_count += 1
        yield TextNode(element, element.text), f"text()[{text_count}]"

    for child in element:
        if is_element(child):
            name = local_name(child)
            element_counts[name] = element_counts.get(name, 0) + 1
            yield child, f"{name}[{element_counts[name]}]"
        elif is_comment(child):
            comment_count += 1
            if include_comments:
                yield child, f"comment()[{comment_count}]"

        if child.tail is not None and child.tail.strip():
            text_count += 1
            yield TextNode(element, child.tail), f"text()[{text_count}]"


def root_element(document: Any) -> Any:
    """Root element of an ElementTree (or the element itself)."""
    if isinstance(document, etree._ElementTree):
        return document.getroot()
    return document


def root_xpath(document: Any) -> str:
    return f"/{local_name(root_element(document))}[1]"


def xpath_depth(xpath: Optional[str]) -> int:
    """Number of location steps in a path; ``/a[1]/b[1]`` has depth 2."""
    if not xpath:
        return 0
    return len([segment for segment in xpath.split("/") if segment])


def parent_xpath(xpath: str) -> str:
    """Path of the parent location; the root's parent is ``/``."""
    head, _, _ = xpath.rstrip("/").rpartition("/")
    return head or "/"


def find_node(document: Any, xpath: Optional[str]) -> Any:
    """Resolve a path to an element, TextNode or AttributeNode.

    ``/`` resolves to the root element. A path that does not resolve
    returns None.
    """
    if document is None or not xpath:
        return None

    root = root_element(document)
    if xpath == "/":
        return root

    steps = [segment for segment in xpath.split("/") if segment]
    first = _STEP_RE.match(steps[0])
    if first is None or first.group("name") != local_name(root) or first.group("index") != "1":
        logger.debug("Path %s does not start at root <%s>", xpath, local_name(root))
        return None

    node: Any = root
    for step in steps[1:]:
        if not is_element(node):
            logger.debug("Path %s descends below a non-element at %s", xpath, step)
            return None

        if step.startswith("@"):
            value = find_attribute(node, step[1:])
            if value is None:
                logger.debug("No attribute %s for path %s", step, xpath)
                return None
            node = AttributeNode(node, step[1:], value)
            continue

        node = _child_by_step(node, step)
        if node is None:
            logger.debug("Path %s not found (step %s)", xpath, step)
            return None

    return node


def _child_by_step(element: Any, step: str) -> Any:
    for child, child_step in child_nodes(element, include_comments=True):
        if child_step == step:
            return child
    return None
