from __future__ import annotations

from enum import Enum
from typing import Optional

from .rules import CSV_MEDIA_TYPE, CSV_SUFFIX, JSON_MEDIA_TYPE, XLSX_MEDIA_TYPE


class FileFormat(str, Enum):
    STRUCTURED_TEXT = "structured-text"
    SPREADSHEET = "spreadsheet"
    DELIMITED_TEXT = "delimited-text"
    UNSUPPORTED = "unsupported"


def detect_format(media_type: Optional[str], filename: Optional[str]) -> FileFormat:
    """
    Classify a file by its declared media type and name.

    Rules, first match wins:
    - exact JSON media type
    - exact XLSX media type
    - CSV media type, or a name ending in ".csv" (case-sensitive)
    """
    if media_type == JSON_MEDIA_TYPE:
        return FileFormat.STRUCTURED_TEXT
    if media_type == XLSX_MEDIA_TYPE:
        return FileFormat.SPREADSHEET
    if media_type == CSV_MEDIA_TYPE or (filename or "").endswith(CSV_SUFFIX):
        return FileFormat.DELIMITED_TEXT
    return FileFormat.UNSUPPORTED
