"""Tests for path building, resolution and depth."""

import pytest

from xsdiff.comparison.models import AttributeNode, TextNode
from xsdiff.xpath import (
    attribute_name,
    child_nodes,
    find_node,
    local_name,
    parent_xpath,
    root_xpath,
    xpath_depth,
)


class TestXpathDepth:
    @pytest.mark.parametrize(
        "xpath, depth",
        [
            ("/a[1]", 1),
            ("/a[1]/b[1]", 2),
            ("/a[1]/b[1]/c[2]", 3),
            ("/a[1]/b[1]/@name", 3),
            ("/", 0),
            ("", 0),
            (None, 0),
        ],
    )
    def test_counts_steps(self, xpath, depth):
        assert xpath_depth(xpath) == depth


class TestParentXpath:
    def test_drops_last_step(self):
        assert parent_xpath("/a[1]/b[1]/c[2]") == "/a[1]/b[1]"

    def test_root_parent_is_slash(self):
        assert parent_xpath("/a[1]") == "/"


class TestChildNodes:
    def test_mixed_content_steps(self, parse_xml):
        doc = parse_xml("<p>one<b/>two<b/><i/></p>")
        steps = [step for _, step in child_nodes(doc.getroot())]
        assert steps == ["text()[1]", "b[1]", "text()[2]", "b[2]", "i[1]"]

    def test_blank_text_is_not_a_child(self, parse_xml):
        doc = parse_xml("<p>\n  <b/>\n  <b/>\n</p>")
        steps = [step for _, step in child_nodes(doc.getroot())]
        assert steps == ["b[1]", "b[2]"]

    def test_comments_only_when_requested(self, parse_xml):
        from xsdiff.config import DiffConfig

        doc = parse_xml("<p><!-- note --><b/></p>", DiffConfig(ignore_comments=False))
        assert [s for _, s in child_nodes(doc.getroot())] == ["b[1]"]
        assert [s for _, s in child_nodes(doc.getroot(), include_comments=True)] == [
            "comment()[1]",
            "b[1]",
        ]


class TestFindNode:
    def test_root(self, parse_xml):
        doc = parse_xml("<a><b/></a>")
        assert find_node(doc, "/a[1]") is doc.getroot()
        assert find_node(doc, "/") is doc.getroot()
        assert root_xpath(doc) == "/a[1]"

    def test_nested_element_by_position(self, parse_xml):
        doc = parse_xml('<a><b id="1"/><c/><b id="2"/></a>')
        node = find_node(doc, "/a[1]/b[2]")
        assert node.get("id") == "2"

    def test_namespaced_elements_resolve_by_local_name(self, parse_xml, order_v1):
        doc = parse_xml(order_v1)
        node = find_node(doc, "/schema[1]/complexType[1]/sequence[1]/element[2]")
        assert local_name(node) == "element"
        assert node.get("name") == "amount"

    def test_attribute(self, parse_xml):
        doc = parse_xml('<a><b type="int"/></a>')
        node = find_node(doc, "/a[1]/b[1]/@type")
        assert isinstance(node, AttributeNode)
        assert node.qname == "type"
        assert node.value == "int"

    def test_text(self, parse_xml):
        doc = parse_xml("<a><b>hello</b></a>")
        node = find_node(doc, "/a[1]/b[1]/text()[1]")
        assert isinstance(node, TextNode)
        assert node.value == "hello"

    @pytest.mark.parametrize(
        "xpath",
        ["/a[1]/c[1]", "/a[1]/b[2]", "/x[1]/b[1]", "/a[1]/b[1]/@missing", "/a[1]/b[1]/@type/c[1]", None],
    )
    def test_miss_returns_none(self, parse_xml, xpath):
        doc = parse_xml('<a><b type="int"/></a>')
        assert find_node(doc, xpath) is None


class TestAttributeName:
    def test_plain_and_xml_namespace(self, parse_xml):
        doc = parse_xml('<a xml:lang="en" b="1"/>')
        root = doc.getroot()
        names = [attribute_name(root, key) for key in root.attrib]
        assert names == ["xml:lang", "b"]
