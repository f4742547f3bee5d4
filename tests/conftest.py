"""Shared test fixtures for xsdiff tests."""

import logging
import os

import pytest

from xsdiff.config import DiffConfig
from xsdiff.documents import document_from_string
from xsdiff.formatters import TextReportOutput
from xsdiff.report import XmlSchemaDiffReport

XS = "http://www.w3.org/2001/XMLSchema"

ORDER_V1 = f"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="{XS}" elementFormDefault="qualified">
  <xs:element name="order" type="OrderType"/>
  <xs:complexType name="OrderType">
    <xs:sequence>
      <xs:element name="id" type="xs:string"/>
      <xs:element name="amount" type="xs:decimal"/>
    </xs:sequence>
  </xs:complexType>
</xs:schema>
"""

ORDER_V2 = f"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="{XS}" elementFormDefault="qualified">
  <xs:element name="order" type="OrderType"/>
  <xs:complexType name="OrderType">
    <xs:sequence>
      <xs:element name="id" type="xs:string"/>
      <xs:element name="amount" type="xs:double"/>
      <xs:element name="currency" type="xs:string"/>
    </xs:sequence>
  </xs:complexType>
</xs:schema>
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep user/project config files and XSDIFF_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("XSDIFF_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop the handlers the CLI installs on the package logger."""
    yield
    logger = logging.getLogger("xsdiff")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def parse(text, config=None):
    return document_from_string(text, config)


def run_report(control_xml, test_xml, config=None, text_diff=None):
    """Run a full report over two XML strings and return the text output."""
    config = config or DiffConfig()
    output = TextReportOutput()
    report = XmlSchemaDiffReport(output, config=config, text_diff=text_diff)
    report.run_diff(parse(control_xml, config), parse(test_xml, config))
    return output, report


@pytest.fixture
def order_v1():
    return ORDER_V1


@pytest.fixture
def order_v2():
    return ORDER_V2


@pytest.fixture
def parse_xml():
    return parse


@pytest.fixture
def report_runner():
    return run_report
