"""
Fixed ingestion and rendering rules.

These values are sentinels, not configuration: changing them changes the
generated repair scripts.
"""

JSON_MEDIA_TYPE = "application/json"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"
CSV_SUFFIX = ".csv"  # matched case-sensitively

# Every draft starts here, whatever the source file says.
DRAFT_STATUS = "PENDING"
DRAFT_STATUS_MESSAGE = "DECLINED-Manual"

ID_FIELD = "id"
EXTERNAL_IDENTIFIER_FIELD = "external_identifier"

# Rendered for every draft; the repair script re-reads the real value.
EXTERNAL_IDENTIFIER_LITERAL = "nil"
UNDEFINED_LITERAL = "undefined"  # id key absent from the source record
NULL_LITERAL = "null"  # id present but null
BLOCK_SEPARATOR = ",\n\n"

CSV_DELIMITERS = [",", ";", "\t", "|"]
CSV_SNIFF_BYTES = 4096
EMPTY_HEADER = "__EMPTY"
