"""Tests for the report outputs."""

import io

import pytest
from rich.console import Console

from xsdiff.changes import ChangeHolder
from xsdiff.formatters import (
    HtmlReportOutput,
    RichReportOutput,
    TextReportOutput,
    get_output,
)
from xsdiff.formatters.base import find_part_lines

PARENT = "<!-- xpath: /a[1]/b[1] -->\n<b>\n  <c/>\n  <d>\n    <e/>\n  </d>\n</b>"


def _holder():
    holder = ChangeHolder("<b>\n  <c/>\n</b>")
    holder.added_node("<c/>")
    holder.removed_node("<x/>")
    return holder


def _rich_output():
    console = Console(file=io.StringIO(), record=True, width=100)
    return RichReportOutput(console=console)


class TestFindPartLines:
    def test_matches_ignoring_indentation(self):
        assert list(find_part_lines(PARENT, "<d>\n  <e/>\n</d>")) == [3, 4, 5]

    def test_single_line(self):
        assert list(find_part_lines(PARENT, "<c/>")) == [2]

    def test_no_match(self):
        assert list(find_part_lines(PARENT, "<z/>")) == []
        assert list(find_part_lines(PARENT, "")) == []


class TestTextReportOutput:
    def test_parts_are_prefixed(self):
        output = TextReportOutput()
        output.add_added_part("<c>\n  <e/>\n</c>")
        output.add_removed_part("<x/>")
        assert output.lines == ["+ <c>", "+   <e/>", "+ </c>", "- <x/>"]

    def test_mark_part_added(self):
        output = TextReportOutput()
        output.mark_part_added(PARENT, ["<c/>"])
        assert output.lines == [
            "  <!-- xpath: /a[1]/b[1] -->",
            "  <b>",
            "+   <c/>",
            "    <d>",
            "      <e/>",
            "    </d>",
            "  </b>",
        ]

    def test_unmatched_part_is_appended(self):
        output = TextReportOutput()
        output.mark_part_removed("<b/>", ["<zz/>"])
        assert output.lines == ["  <b/>", "- <zz/>"]

    def test_fragments_flush_before_next_line(self):
        output = TextReportOutput()
        output.write("~")
        output.handler.equal("type ")
        output.handler.delete("int")
        output.handler.insert("long")
        output.write("~")
        assert output.lines == ["~", "type [-int-]{+long+}", "~"]

    def test_mark_changes(self):
        output = TextReportOutput()
        output.mark_changes("added-/a[1]/b[1]", _holder())
        assert output.lines == [
            "== added-/a[1]/b[1]",
            "  <b>",
            "    <c/>",
            "  </b>",
            "+ <c/>",
            "- <x/>",
        ]

    def test_render_ends_with_newline(self):
        output = TextReportOutput()
        output.write("one")
        output.newline()
        assert output.render() == "one\n\n"


class TestHtmlReportOutput:
    def test_escapes_markup(self):
        output = HtmlReportOutput()
        output.write('MODIFIED ; new attribute [use="x"] <!-- xpath: /a[1] -->')
        page = output.render()
        assert page.startswith("<!DOCTYPE html>")
        assert "&lt;!-- xpath: /a[1] --&gt;" in page
        assert "<!-- xpath" not in page

    def test_text_diff_fragments(self):
        output = HtmlReportOutput()
        output.handler.equal("type ")
        output.handler.delete("int")
        output.handler.insert("long")
        output.write("~")
        page = output.render()
        assert '<pre class="diff">type <del>int</del><ins>long</ins></pre>' in page

    def test_highlighted_parent(self):
        output = HtmlReportOutput()
        output.mark_part_added(PARENT, ["<c/>"])
        assert '<span class="added">  &lt;c/&gt;</span>' in output.render()

    def test_mark_changes(self):
        output = HtmlReportOutput(title="order.xsd")
        output.mark_changes("added-/a[1]/b[1]", _holder())
        page = output.render()
        assert "<title>order.xsd</title>" in page
        assert "<h3>added-/a[1]/b[1]</h3>" in page
        assert '<pre class="added">&lt;c/&gt;</pre>' in page
        assert '<pre class="removed">&lt;x/&gt;</pre>' in page


class TestRichReportOutput:
    def test_records_plain_text(self):
        output = _rich_output()
        output.write("MODIFIED ; new attribute [use] <!-- xpath: /a[1] -->")
        output.add_added_part("<c/>")
        text = output.render()
        assert "MODIFIED ; new attribute [use] <!-- xpath: /a[1] -->" in text
        assert "<c/>" in text

    def test_render_clears_recording(self):
        output = _rich_output()
        output.write("first")
        assert "first" in output.render()
        output.write("second")
        text = output.render()
        assert "second" in text
        assert "first" not in text

    def test_long_lines_are_not_wrapped(self):
        output = RichReportOutput(console=Console(file=io.StringIO(), record=True, width=40))
        line = (
            "DELETED <!-- xpath: /schema[1]/complexType[1]/sequence[1]/element[3] --> "
            '<xs:element name="currency" type="xs:string"/>'
        )
        output.write(line)
        output.handler.equal("type ")
        output.handler.delete("xs:decimal-with-a-rather-long-name")
        output.handler.insert("xs:double-with-a-rather-long-name")
        output.write("~")

        lines = output.render().splitlines()
        assert lines[0] == line
        assert lines[1] == (
            "type xs:decimal-with-a-rather-long-namexs:double-with-a-rather-long-name"
        )

    def test_text_diff_and_changes(self):
        output = _rich_output()
        output.handler.equal("type ")
        output.handler.delete("int")
        output.handler.insert("long")
        output.mark_changes("added-/a[1]/b[1]", _holder())
        text = output.render()
        assert "type intlong" in text
        assert "added-/a[1]/b[1]" in text


class TestGetOutput:
    @pytest.mark.parametrize(
        "name, cls",
        [("text", TextReportOutput), ("html", HtmlReportOutput), ("rich", RichReportOutput)],
    )
    def test_by_name(self, name, cls):
        assert isinstance(get_output(name), cls)

    def test_fresh_instance_each_call(self):
        assert get_output("text") is not get_output("text")

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown report format"):
            get_output("pdf")
