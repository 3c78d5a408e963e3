"""
Raw record -> transaction draft normalization.

Rules:
- `id` and `external_identifier` are copied verbatim (no trimming, no coercion)
- status and status message are always reset to the draft sentinels
- missing fields become None (and stay out of `model_fields_set`); no record is ever dropped
- no dedup against drafts accumulated earlier
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List

from .log import get_logger
from .models import TransactionDraft
from .rules import DRAFT_STATUS, DRAFT_STATUS_MESSAGE, EXTERNAL_IDENTIFIER_FIELD, ID_FIELD

logger = get_logger()


def normalize_record(record: Any) -> TransactionDraft:
    if not isinstance(record, Mapping):
        # Keep the slot so record order and counts still line up with the source.
        logger.warning(f"Record is not a field mapping ({type(record).__name__}); id left empty")
        record = {}

    # Absent keys are not passed, so the draft remembers "missing" apart from an explicit null.
    copied = {f: record[f] for f in (ID_FIELD, EXTERNAL_IDENTIFIER_FIELD) if f in record}
    return TransactionDraft(status=DRAFT_STATUS, status_message=DRAFT_STATUS_MESSAGE, **copied)


def normalize_records(records: Iterable[Any]) -> List[TransactionDraft]:
    """Normalize decoded records, in order. Never raises on record shape."""
    return [normalize_record(r) for r in records]
