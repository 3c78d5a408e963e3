"""
Per-format decoders.

Each decoder turns raw upload bytes into an ordered list of raw records
(plain dicts). Decoders know nothing about transactions; shaping records
into drafts is the normalizer's job.

Tabular formats (XLSX and CSV) share one rows -> records algorithm so a
sheet reads the same way whichever container it came in.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from charset_normalizer import from_bytes
from openpyxl import load_workbook

from .detect import FileFormat
from .errors import DecodeError, DecodeReason
from .rules import CSV_DELIMITERS, CSV_SNIFF_BYTES, EMPTY_HEADER

RawRecord = Dict[str, Any]


class Decoder(Protocol):
    label: str
    success_message: str
    failure_message: str

    def decode(self, content: bytes) -> List[Any]:
        ...


def decode_text(raw: bytes) -> str:
    """
    Decode upload bytes to text.

    UTF-8 (with or without BOM) is tried first; otherwise the best guess from
    charset-normalizer is used.

    Raises:
        DecodeError: not-a-binary-string if no encoding fits.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise DecodeError(DecodeReason.NOT_A_BINARY_STRING, "no text encoding matches the content")
    return str(match)


def _header_names(cells: Sequence[Any]) -> List[str]:
    names: List[str] = []
    seen: Dict[str, int] = {}
    for cell in cells:
        base = EMPTY_HEADER if _is_empty(cell) else str(cell)
        count = seen.get(base, 0)
        seen[base] = count + 1
        names.append(base if count == 0 else f"{base}_{count}")
    return names


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def rows_to_records(rows: Iterable[Sequence[Any]]) -> List[RawRecord]:
    """Turn sheet rows into records keyed by the header row.

    The first non-blank row is the header. Blank rows are skipped and empty
    cells are left out of their record. Cells past the header's width get
    generated column names.
    """
    header: Optional[List[Any]] = None
    names: List[str] = []
    records: List[RawRecord] = []

    for row in rows:
        cells = list(row)
        if all(_is_empty(c) for c in cells):
            continue
        if header is None:
            header = cells
            names = _header_names(header)
            continue

        if len(cells) > len(header):
            header = header + [None] * (len(cells) - len(header))
            names = _header_names(header)

        record = {name: value for name, value in zip(names, cells) if not _is_empty(value)}
        records.append(record)

    return records


class JsonDecoder:
    label = "JSON"
    success_message = "JSON file processed successfully"
    failure_message = "Error parsing JSON"

    def decode(self, content: bytes) -> List[Any]:
        text = decode_text(content)
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError) as ex:
            # JSONDecodeError, oversized integers, and too-deep nesting
            raise DecodeError(DecodeReason.MALFORMED_SYNTAX, str(ex)) from ex

        if not isinstance(payload, list):
            raise DecodeError(
                DecodeReason.MALFORMED_SYNTAX,
                f"expected a list of records at the top level, got {type(payload).__name__}",
            )
        return payload


class WorkbookDecoder:
    label = "Excel"
    success_message = "Excel file processed successfully"
    failure_message = "Error reading Excel"

    def decode(self, content: bytes) -> List[Any]:
        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as ex:
            raise DecodeError(DecodeReason.MALFORMED_WORKBOOK, str(ex)) from ex

        try:
            # First sheet by position, never by name.
            sheet = workbook.worksheets[0]
            return rows_to_records(sheet.iter_rows(values_only=True))
        except Exception as ex:
            raise DecodeError(DecodeReason.MALFORMED_WORKBOOK, str(ex)) from ex
        finally:
            workbook.close()


class DelimitedDecoder:
    label = "CSV"
    success_message = "CSV file processed successfully"
    failure_message = "Error reading CSV"

    def decode(self, content: bytes) -> List[Any]:
        text = decode_text(content)
        text = text.replace("\r\n", "\n").replace("\r", "\n")

        delimiter = ","
        try:
            dialect = csv.Sniffer().sniff(text[:CSV_SNIFF_BYTES], delimiters="".join(CSV_DELIMITERS))
            delimiter = dialect.delimiter
        except csv.Error:
            delimiter = ","  # default

        try:
            rows = list(csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True))
        except csv.Error as ex:
            raise DecodeError(DecodeReason.MALFORMED_WORKBOOK, str(ex)) from ex
        return rows_to_records(rows)


DECODERS: Dict[FileFormat, Decoder] = {
    FileFormat.STRUCTURED_TEXT: JsonDecoder(),
    FileFormat.SPREADSHEET: WorkbookDecoder(),
    FileFormat.DELIMITED_TEXT: DelimitedDecoder(),
}


def decoder_for(file_format: FileFormat) -> Optional[Decoder]:
    return DECODERS.get(file_format)
