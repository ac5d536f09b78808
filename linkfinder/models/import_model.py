from dataclasses import dataclass, field
from typing import Any

from linkfinder.models.link_model import LinkModel


@dataclass(frozen=True)
class RowError:
    """A data row rejected during bulk import (row numbers are 1-based, header is row 1)."""

    row: int
    message: str


@dataclass
class ImportReport:
    """Aggregate outcome of a bulk import.

    Every non-blank data row ends up in exactly one bucket, so
    `parsed == saved + skipped_duplicate + rejected_malformed` always holds.

    Attributes:
        parsed (int):
            Non-blank data rows read from the document (header excluded).
        saved_links (list[LinkModel]):
            Links persisted by this import, in document order.
        skipped_duplicate (int):
            Rows whose reference code already existed (in the store or earlier in the batch).
        errors (list[RowError]):
            Rows rejected as malformed, with the reason.
    """

    parsed: int = 0
    saved_links: list[LinkModel] = field(default_factory=list)
    skipped_duplicate: int = 0
    errors: list[RowError] = field(default_factory=list)

    @property
    def saved(self) -> int:
        return len(self.saved_links)

    @property
    def rejected_malformed(self) -> int:
        return self.parsed - self.saved - self.skipped_duplicate

    def to_dict(self) -> dict[str, Any]:
        return {
            'totalRows': self.parsed,
            'savedRows': self.saved,
            'skippedRows': self.skipped_duplicate,
            'rejectedRows': self.rejected_malformed,
            'errors': [{'row': error.row, 'message': error.message} for error in self.errors],
            'data': [link.to_dict() for link in self.saved_links],
        }
