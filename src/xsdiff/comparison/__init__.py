"""Comparison stream models.

The engine lives in ``xsdiff.comparison.engine``; it depends on the path
helpers, which depend on these models, so it is not imported here.
"""

from .models import (
    AttributeNode,
    ChangeKind,
    Comparison,
    ComparisonType,
    Detail,
    TextNode,
)

__all__ = [
    "AttributeNode",
    "ChangeKind",
    "Comparison",
    "ComparisonType",
    "Detail",
    "TextNode",
]
