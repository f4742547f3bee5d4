"""
xsdiff - XML schema difference reports

Compares two versions of an XML schema and writes a readable change
report: every difference in document order, followed by additions and
removals grouped under their parent component.
"""

__version__ = "1.1.0"

from .api import diff_documents, diff_files, diff_folders
from .changes import ChangeHolder, ChangeTable
from .comparison.engine import SchemaDiffEngine
from .comparison.models import ChangeKind, Comparison, ComparisonType
from .config import DiffConfig, load_config
from .report import XmlSchemaDiffReport, classify

__all__ = [
    "diff_files",  # Main entry point
    "diff_folders",
    "diff_documents",
    "XmlSchemaDiffReport",  # Advanced usage (custom outputs and engines)
    "SchemaDiffEngine",
    "classify",
    "ChangeHolder",
    "ChangeTable",
    "ChangeKind",
    "Comparison",
    "ComparisonType",
    "DiffConfig",
    "load_config",
]
