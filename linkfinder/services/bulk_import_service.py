"""Bulk import of links from spreadsheets (.xlsx) and CSV files.

Document layout: the first row is a header and is skipped; in every following
row column A holds the reference code and column B the full URL. Rows with no
cells at all (an empty CSV line, a sheet row where every cell is unset) are
ignored. Any other row counts, so a row of blank cells is malformed.

Processing happens in two phases:
    1. Parse: each row is validated on its own. A malformed row is recorded
       with its reason and never aborts the batch.
    2. Save: valid rows go through LinkService.create() one at a time, in
       document order. A row whose reference code already exists (in the
       store, or earlier in the same file) is counted as a skipped duplicate.
       Sequential insertion is what makes the first occurrence in a file win.

The returned ImportReport always satisfies
`parsed == saved + skipped_duplicate + rejected_malformed`.

Example:
    >>> service = BulkImportService(LinkService(dao))
    >>> report = service.import_document(b'code,url\\nPI-1,https://example.com\\n', created_by='alice')
    >>> report.saved, report.skipped_duplicate, report.rejected_malformed
    (1, 0, 0)
"""

import io
import csv
import logging
import zipfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from beartype import beartype

from linkfinder.dao.exceptions import DAOError
from linkfinder.exceptions import DuplicateReferenceCodeError, ValidationError
from linkfinder.models import ImportReport, LinkRequest, RowError
from linkfinder.services.link_service import LinkService
from linkfinder.services.validation import normalize_full_url, normalize_reference_code


logger = logging.getLogger(__name__)

IMPORT_COMPLETED = 'IMPORT_COMPLETED'
IMPORT_ROW_FAILED = 'IMPORT_ROW_FAILED'

XLSX_MAGIC = b'PK\x03\x04'
XLS_MAGIC = b'\xd0\xcf\x11\xe0'

TEMPLATE_COLUMNS = ['Reference Code', 'Full URL']
TEMPLATE_SAMPLE_DATA = [
    ('PI-31001', 'https://example.com/doc1.pdf'),
    ('PI-31002', 'https://example.com/doc2.pdf'),
    ('PI-32001', 'https://example.com/doc3.pdf'),
    ('PI-33001', 'https://example.com/doc4.pdf'),
    ('PI-34001', 'https://example.com/doc5.pdf'),
    ('PI-35001', 'https://example.com/doc6.pdf'),
]


@dataclass(frozen=True)
class ParsedRow:
    row: int
    request: LinkRequest


@dataclass(frozen=True)
class UnreadableRow:
    """A record the document reader could not decode (e.g. an oversized CSV field)."""

    reason: str


def cell_to_text(value: Any) -> str:
    """Render a spreadsheet cell as text.

    Numbers are truncated to integers (codes typed as numbers arrive as floats),
    booleans become 'true'/'false' and anything else that is not text is
    treated as blank.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return ''


def _read_xlsx(content: bytes) -> Iterator[tuple]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ValidationError('Invalid spreadsheet file') from e

    try:
        yield from workbook.active.iter_rows(values_only=True)
    finally:
        workbook.close()


def _read_csv(content: bytes) -> Iterator[list[str] | UnreadableRow]:
    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise ValidationError('CSV file must be UTF-8 encoded') from e

    # The reader resets its state on every record, so reading resumes on the next line after an error
    reader = csv.reader(io.StringIO(text))
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.info('Unreadable CSV record.', extra={'event': IMPORT_ROW_FAILED, 'line': reader.line_num, 'reason': str(e)})
            yield UnreadableRow(reason='Row could not be read as CSV')
        else:
            yield row


def read_rows(content: bytes) -> Iterator[Iterable[Any] | UnreadableRow]:
    """Yield raw rows (header included) from an .xlsx or CSV document.

    A CSV record that cannot be decoded is yielded as an UnreadableRow so the
    rest of the document is still read.
    """
    if content.startswith(XLSX_MAGIC):
        return _read_xlsx(content)
    if content.startswith(XLS_MAGIC):
        raise ValidationError('Legacy .xls files are not supported, save the file as .xlsx or .csv')
    return _read_csv(content)


class BulkImportService:
    def __init__(self, link_service: LinkService):
        self.link_service = link_service

    def parse(self, rows: Iterable[Iterable[Any] | UnreadableRow], report: ImportReport) -> list[ParsedRow]:
        """Validate data rows, recording malformed ones in `report`.

        Row numbers are 1-based and count the header, matching what users see
        in their spreadsheet application.
        """
        parsed = []
        for row_number, row in enumerate(rows, start=1):
            if row_number == 1:
                continue

            if isinstance(row, UnreadableRow):
                report.parsed += 1
                report.errors.append(RowError(row=row_number, message=row.reason))
                continue

            values = list(row)
            if all(value is None for value in values):  # no cells at all, e.g. an empty CSV line or an unused sheet row
                continue
            cells = [cell_to_text(value) for value in values]
            cells += [''] * (2 - len(cells))

            report.parsed += 1
            try:
                request = LinkRequest(
                    reference_code=normalize_reference_code(cells[0]),
                    full_url=normalize_full_url(cells[1]),
                )
            except ValidationError as e:
                report.errors.append(RowError(row=row_number, message=e.message))
            else:
                parsed.append(ParsedRow(row=row_number, request=request))
        return parsed

    @beartype
    def import_document(self, content: bytes, created_by: Optional[str] = None) -> ImportReport:
        """Import every row of an .xlsx or CSV document.

        Raises:
            ValidationError:
                If the document cannot be read or contains no data rows.
        """
        report = ImportReport()
        candidates = self.parse(read_rows(content), report)
        if report.parsed == 0:
            raise ValidationError('No valid data found in file')

        for candidate in candidates:
            code = candidate.request.reference_code
            try:
                if self.link_service.exists(code):
                    report.skipped_duplicate += 1
                    continue
                link = self.link_service.create(candidate.request, created_by=created_by)
            except DuplicateReferenceCodeError:
                report.skipped_duplicate += 1
            except ValidationError as e:
                report.errors.append(RowError(row=candidate.row, message=e.message))
            except DAOError:
                logger.exception('Failed to save imported row.', extra={'event': IMPORT_ROW_FAILED, 'row': candidate.row, 'referenceCode': code})
                report.errors.append(RowError(row=candidate.row, message='Failed to save row'))
            else:
                report.saved_links.append(link)

        logger.info(
            'Bulk import completed.',
            extra={
                'event': IMPORT_COMPLETED,
                'parsed': report.parsed,
                'saved': report.saved,
                'skippedDuplicate': report.skipped_duplicate,
                'rejectedMalformed': report.rejected_malformed,
            },
        )
        return report

    @staticmethod
    def template() -> dict[str, Any]:
        return {
            'columns': TEMPLATE_COLUMNS,
            'sampleData': [{'referenceCode': code, 'fullUrl': url} for code, url in TEMPLATE_SAMPLE_DATA],
            'instructions': [
                'Row 1 is a header row and is skipped',
                'Column A: Reference Code (2-20 characters)',
                'Column B: Full URL (must start with http:// or https://)',
                'Existing reference codes are skipped',
            ],
        }
