"""Unit tests for BulkImportService.

Test coverage includes:
    1. Document reading
       - .xlsx via openpyxl, UTF-8 CSV (with BOM), rejection of legacy .xls and garbage.
    2. Row parsing
       - Header skipped, empty rows ignored, blank cells rejected, unreadable
         records counted, numeric cells, 1-based row errors.
    3. Import outcome
       - Duplicates skipped (store and in-file), idempotent re-import,
         store failures isolated per row, report buckets add up.
    4. Template
"""

import io
from unittest.mock import MagicMock

import openpyxl
import pytest

from linkfinder.dao.exceptions import DataStoreError
from linkfinder.exceptions import ValidationError
from linkfinder.models import ImportReport, LinkModel, LinkRequest
from linkfinder.services import BulkImportService, LinkService
from linkfinder.services.bulk_import_service import UnreadableRow, cell_to_text, read_rows


# -------------------------------
# Fixtures
# -------------------------------


def xlsx(rows) -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def link_service(link_dao):
    return LinkService(link_dao)


@pytest.fixture
def service(link_service):
    return BulkImportService(link_service)


def assert_buckets_add_up(report: ImportReport):
    assert report.parsed == report.saved + report.skipped_duplicate + report.rejected_malformed
    assert report.rejected_malformed == len(report.errors)


# -------------------------------
# 1. Document reading
# -------------------------------


def test_read_xlsx_rows():
    content = xlsx([('Reference Code', 'Full URL'), ('PI-1', 'https://example.com/1')])
    assert [tuple(row) for row in read_rows(content)] == [('Reference Code', 'Full URL'), ('PI-1', 'https://example.com/1')]


def test_read_csv_with_byte_order_mark():
    content = '\ufeffcode,url\r\nPI-1,https://example.com/1\r\n'.encode('utf-8')
    assert list(read_rows(content)) == [['code', 'url'], ['PI-1', 'https://example.com/1']]


def test_read_legacy_xls_is_rejected():
    with pytest.raises(ValidationError, match='Legacy .xls files are not supported'):
        read_rows(b'\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1' + b'\x00' * 64)


def test_read_corrupt_xlsx():
    with pytest.raises(ValidationError, match='Invalid spreadsheet file'):
        list(read_rows(b'PK\x03\x04 definitely not a zip archive'))


def test_read_csv_keeps_going_after_unreadable_record():
    content = ('code,url\nPI-1,' + 'x' * 200_000 + '\nPI-2,https://example.com/2\n').encode()

    rows = list(read_rows(content))

    assert rows == [['code', 'url'], UnreadableRow(reason='Row could not be read as CSV'), ['PI-2', 'https://example.com/2']]


def test_read_non_utf8_csv():
    with pytest.raises(ValidationError, match='CSV file must be UTF-8 encoded'):
        list(read_rows('code,url\nPI-ü,https://example.com\n'.encode('latin-1')))


@pytest.mark.parametrize(
    'value, expected',
    [
        (None, ''),
        ('  PI-1 ', 'PI-1'),
        (31001, '31001'),
        (31001.0, '31001'),
        (True, 'true'),
        (object(), ''),
    ],
)
def test_cell_to_text(value, expected):
    assert cell_to_text(value) == expected


# -------------------------------
# 2. Row parsing
# -------------------------------


def test_parse_skips_header_and_empty_rows(service):
    report = ImportReport()
    rows = [
        ('Reference Code', 'Full URL'),
        ('PI-1', 'https://example.com/1'),
        (None, None),
        ('', '   '),
        ('X', 'https://example.com/2'),
        ('PI-3',),
        [],
        (31001.0, 'http://example.com/3'),
    ]

    parsed = service.parse(rows, report)

    assert [candidate.row for candidate in parsed] == [2, 8]
    assert parsed[1].request == LinkRequest(reference_code='31001', full_url='http://example.com/3')
    assert report.parsed == 5
    assert [(error.row, error.message) for error in report.errors] == [
        (4, 'Reference Code is required'),
        (5, 'Reference Code must be between 2 and 20 characters'),
        (6, 'Full URL is required'),
    ]


def test_parse_records_unreadable_rows(service):
    report = ImportReport()
    rows = [('code', 'url'), UnreadableRow(reason='Row could not be read as CSV'), ('PI-1', 'https://example.com/1')]

    parsed = service.parse(rows, report)

    assert [candidate.row for candidate in parsed] == [3]
    assert report.parsed == 2
    assert [(error.row, error.message) for error in report.errors] == [(2, 'Row could not be read as CSV')]


# -------------------------------
# 3. Import outcome
# -------------------------------


def test_import_xlsx(service, link_service):
    link_service.create(LinkRequest(reference_code='PI-EXISTING', full_url='https://example.com/old'))
    content = xlsx(
        [
            ('Reference Code', 'Full URL'),
            ('PI-1', 'https://example.com/1'),
            ('pi-existing', 'https://example.com/new'),
            ('PI-2', 'ftp://example.com/2'),
            ('PI-1', 'https://example.com/again'),
            ('PI-3', 'https://example.com/3'),
        ]
    )

    report = service.import_document(content, created_by='alice')

    assert report.parsed == 5
    assert [link.reference_code for link in report.saved_links] == ['PI-1', 'PI-3']
    assert all(link.created_by == 'alice' for link in report.saved_links)
    assert report.skipped_duplicate == 2
    assert [(error.row, error.message) for error in report.errors] == [(4, 'Full URL must start with http:// or https://')]
    assert link_service.get_by_reference_code('PI-1').full_url == 'https://example.com/1'  # first occurrence wins
    assert link_service.get_by_reference_code('PI-EXISTING').full_url == 'https://example.com/old'
    assert_buckets_add_up(report)


def test_import_is_idempotent(service):
    content = b'code,url\nPI-1,https://example.com/1\nPI-2,https://example.com/2\n'

    first = service.import_document(content)
    second = service.import_document(content)

    assert first.saved == 2
    assert second.saved == 0
    assert second.skipped_duplicate == 2
    assert_buckets_add_up(second)


def test_import_isolates_store_failures():
    link_service = MagicMock(spec=LinkService)
    link_service.exists.return_value = False
    link_service.create.side_effect = [
        DataStoreError('down'),
        LinkModel(id=2, reference_code='PI-2', full_url='https://example.com/2'),
    ]

    report = BulkImportService(link_service).import_document(b'code,url\nPI-1,https://example.com/1\nPI-2,https://example.com/2\n')

    assert report.saved == 1
    assert [(error.row, error.message) for error in report.errors] == [(2, 'Failed to save row')]
    assert_buckets_add_up(report)


def test_import_all_rows_malformed(service):
    report = service.import_document(b'code,url\nX,https://example.com\n')

    assert report.saved == 0
    assert report.rejected_malformed == 1
    assert_buckets_add_up(report)


def test_import_counts_blank_row_as_malformed(service):
    content = b'code,url\nPI-1,https://example.com/1\n,\nPI-3,https://example.com/3\n'

    report = service.import_document(content)

    assert (report.parsed, report.saved, report.rejected_malformed) == (3, 2, 1)
    assert [(error.row, error.message) for error in report.errors] == [(3, 'Reference Code is required')]
    assert_buckets_add_up(report)


def test_import_survives_oversized_csv_field(service):
    oversized_url = 'https://example.com/' + 'a' * 200_000
    content = f'code,url\nPI-1,https://example.com/1\nPI-2,{oversized_url}\nPI-3,https://example.com/3\n'.encode()

    report = service.import_document(content)

    assert report.parsed == 3
    assert [link.reference_code for link in report.saved_links] == ['PI-1', 'PI-3']
    assert [(error.row, error.message) for error in report.errors] == [(3, 'Row could not be read as CSV')]
    assert_buckets_add_up(report)


@pytest.mark.parametrize('content', [b'', b'code,url\n', b'code,url\n\n\r\n'])
def test_import_without_data_rows(service, content):
    with pytest.raises(ValidationError, match='No valid data found in file'):
        service.import_document(content)


# -------------------------------
# 4. Template
# -------------------------------


def test_template():
    template = BulkImportService.template()

    assert template['columns'] == ['Reference Code', 'Full URL']
    assert template['sampleData'][0] == {'referenceCode': 'PI-31001', 'fullUrl': 'https://example.com/doc1.pdf'}
    assert len(template['sampleData']) == 6
    assert template['instructions']
