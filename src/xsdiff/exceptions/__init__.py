"""Exception hierarchy for xsdiff."""

from .base import XsDiffError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .report import (
    DocumentError,
    DocumentParseError,
    ReportStateError,
    TextDiffError,
)

__all__ = [
    "XsDiffError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "DocumentError",
    "DocumentParseError",
    "TextDiffError",
    "ReportStateError",
]
