"""Tests for the public API: documents, files and folders."""

import io

import pytest
from rich.console import Console

from xsdiff import diff_documents, diff_files, diff_folders
from xsdiff.config import DiffConfig
from xsdiff.documents import document_from_string, load_document
from xsdiff.exceptions import DocumentParseError, InvalidPathError
from xsdiff.formatters import CHANGES_HEADER, REPORT_HEADER, HtmlReportOutput, TextReportOutput


@pytest.fixture
def schema_pair(tmp_path, order_v1, order_v2):
    control = tmp_path / "v1.xsd"
    test = tmp_path / "v2.xsd"
    control.write_text(order_v1, encoding="utf-8")
    test.write_text(order_v2, encoding="utf-8")
    return control, test


@pytest.fixture
def schema_folders(tmp_path, order_v1, order_v2):
    control = tmp_path / "old"
    test = tmp_path / "new"
    (control / "common").mkdir(parents=True)
    (test / "common").mkdir(parents=True)

    (control / "order.xsd").write_text(order_v1, encoding="utf-8")
    (test / "order.xsd").write_text(order_v2, encoding="utf-8")
    (control / "common" / "types.xsd").write_text(order_v1, encoding="utf-8")
    (test / "common" / "types.xsd").write_text(order_v1, encoding="utf-8")
    (control / "legacy.xsd").write_text(order_v1, encoding="utf-8")
    (test / "invoice.xsd").write_text(order_v2, encoding="utf-8")
    (test / "notes.txt").write_text("not a schema", encoding="utf-8")
    return control, test


class TestDocuments:
    def test_load_document(self, schema_pair):
        control, _ = schema_pair
        tree = load_document(control)
        assert tree.getroot().get("elementFormDefault") == "qualified"

    def test_malformed_string(self):
        with pytest.raises(DocumentParseError) as exc_info:
            document_from_string("<a><b></a>")
        assert exc_info.value.details["filepath"] == "<string>"

    def test_malformed_file(self, tmp_path):
        broken = tmp_path / "broken.xsd"
        broken.write_text("<schema>", encoding="utf-8")
        with pytest.raises(DocumentParseError) as exc_info:
            load_document(broken)
        assert exc_info.value.filepath == broken

    def test_comments_kept_when_configured(self):
        tree = document_from_string("<a><!-- c --></a>", DiffConfig(ignore_comments=False))
        assert len(tree.getroot()) == 1
        assert len(document_from_string("<a><!-- c --></a>").getroot()) == 0


class TestDiffDocuments:
    def test_default_output_follows_config(self, order_v1, order_v2):
        output = diff_documents(
            document_from_string(order_v1),
            document_from_string(order_v2),
            config=DiffConfig(report_format="html"),
        )
        assert isinstance(output, HtmlReportOutput)

    def test_given_output_is_filled(self, order_v1):
        output = TextReportOutput()
        returned = diff_documents(
            document_from_string(order_v1), document_from_string(order_v1), output=output
        )
        assert returned is output
        assert output.lines == [REPORT_HEADER, CHANGES_HEADER]


class TestDiffFiles:
    def test_text_report(self, schema_pair):
        report = diff_files(*schema_pair)
        assert report.startswith(REPORT_HEADER + "\n")
        assert CHANGES_HEADER in report
        assert "== added-/schema[1]/complexType[1]/sequence[1]" in report

    def test_html_report(self, schema_pair):
        report = diff_files(*schema_pair, config=DiffConfig(report_format="html"))
        assert report.startswith("<!DOCTYPE html>")

    def test_rich_report_to_recording_console(self, schema_pair):
        console = Console(file=io.StringIO(), record=True, width=120)
        report = diff_files(*schema_pair, config=DiffConfig(report_format="rich"), console=console)
        assert REPORT_HEADER in report

    def test_missing_file(self, tmp_path, schema_pair):
        control, _ = schema_pair
        with pytest.raises(InvalidPathError) as exc_info:
            diff_files(control, tmp_path / "missing.xsd")
        assert exc_info.value.reason == "not a file"

    def test_directory_is_not_a_file(self, tmp_path, schema_pair):
        control, _ = schema_pair
        with pytest.raises(InvalidPathError):
            diff_files(control, tmp_path)


class TestDiffFolders:
    def test_pairs_by_relative_path(self, schema_folders):
        reports = diff_folders(*schema_folders)

        assert list(reports) == ["common/types.xsd", "invoice.xsd", "legacy.xsd", "order.xsd"]
        assert reports["invoice.xsd"] == "ADDED schema invoice.xsd\n"
        assert reports["legacy.xsd"] == "DELETED schema legacy.xsd\n"
        assert reports["common/types.xsd"] == f"{REPORT_HEADER}\n{CHANGES_HEADER}\n"
        assert "ADDED <!-- xpath: /schema[1]/complexType[1]/sequence[1]/element[3]" in (
            reports["order.xsd"]
        )

    def test_pattern(self, schema_folders):
        reports = diff_folders(*schema_folders, pattern="*.txt")
        assert reports == {"notes.txt": "ADDED schema notes.txt\n"}

    def test_not_a_directory(self, schema_pair):
        control, test = schema_pair
        with pytest.raises(InvalidPathError) as exc_info:
            diff_folders(control, test)
        assert exc_info.value.reason == "not a directory"
