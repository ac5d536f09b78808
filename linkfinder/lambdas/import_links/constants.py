# Upload content types
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
XLS_CONTENT_TYPE = 'application/vnd.ms-excel'  # also sent by some browsers for .csv
CSV_CONTENT_TYPES = frozenset({'text/csv', 'application/csv'})

ACCEPTED_CONTENT_TYPES = frozenset({XLSX_CONTENT_TYPE, XLS_CONTENT_TYPE}) | CSV_CONTENT_TYPES

# Events
IMPORT_REQUESTED = 'IMPORT_REQUESTED'
