"""Document and report exceptions: parsing, text diffing, report lifecycle."""

from pathlib import Path

from .base import XsDiffError


class DocumentError(XsDiffError):
    """Base class for errors about the compared documents."""

    pass


class DocumentParseError(DocumentError):
    """Raised when a document cannot be read or parsed as XML."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to parse XML document: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class TextDiffError(XsDiffError):
    """Raised by ``word_diff`` or a custom text diff engine when it cannot diff two snapshots.

    The report never lets this escape; the text diff adapter turns it into
    an inline failure notice.
    """

    pass


class ReportStateError(XsDiffError):
    """Raised when a report instance is reused for a second run."""

    pass
