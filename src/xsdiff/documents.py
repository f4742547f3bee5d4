"""Loading XML documents for comparison."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from lxml import etree

from .config import DEFAULT_CONFIG, DiffConfig
from .exceptions import DocumentParseError

logger = logging.getLogger(__name__)


def _parser(config: DiffConfig) -> etree.XMLParser:
    # Blank text is layout only; dropping it lets serialized nodes be
    # pretty printed consistently
    return etree.XMLParser(
        remove_blank_text=True,
        remove_comments=config.ignore_comments,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


def load_document(path: Union[str, Path], config: Optional[DiffConfig] = None) -> etree._ElementTree:
    """Parse an XML file.

    Raises:
        DocumentParseError: If the file cannot be read or is not well formed
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    logger.debug("Parsing %s", path)
    try:
        return etree.parse(str(path), _parser(config))
    except (OSError, etree.XMLSyntaxError) as e:
        raise DocumentParseError(path, str(e)) from e


def document_from_string(
    text: Union[str, bytes], config: Optional[DiffConfig] = None
) -> etree._ElementTree:
    """Parse XML from a string.

    Raises:
        DocumentParseError: If the text is not well formed
    """
    config = config or DEFAULT_CONFIG
    if isinstance(text, str):
        text = text.encode("utf-8")
    try:
        root = etree.fromstring(text, _parser(config))
    except etree.XMLSyntaxError as e:
        raise DocumentParseError(Path("<string>"), str(e)) from e
    return etree.ElementTree(root)
