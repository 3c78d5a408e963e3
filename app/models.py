from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .detect import FileFormat
from .errors import DecodeReason
from .rules import DRAFT_STATUS, DRAFT_STATUS_MESSAGE


class TransactionStatus(str, Enum):
    DECLINED = "DECLINED"
    ERROR = "ERROR"
    APPROVED = "APPROVED"


class NotificationKind(str, Enum):
    DECODE_SUCCESS = "decode-success"
    DECODE_ERROR = "decode-error"
    UNSUPPORTED_TYPE = "unsupported-type"
    GENERATION_SUCCESS = "generation-success"


class TransactionDraft(BaseModel):
    """A normalized transaction waiting to be rendered into a repair script.

    `id` and `external_identifier` are whatever the source file held, with no
    coercion; they are None when the source lacked them.
    """

    model_config = ConfigDict(frozen=True)

    id: Any = None
    external_identifier: Any = None
    status: str = DRAFT_STATUS
    status_message: str = DRAFT_STATUS_MESSAGE


class RenderPair(BaseModel):
    id: str
    external_identifier: str


class Notification(BaseModel):
    kind: NotificationKind
    message: str


class FileReport(BaseModel):
    filename: str
    media_type: Optional[str] = None
    format: FileFormat
    ok: bool
    records: int = 0
    reason: Optional[str] = Field(default=None, examples=[DecodeReason.MALFORMED_SYNTAX.value])
    message: str


class IngestResponse(BaseModel):
    files: List[FileReport] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
    total_transactions: int = 0


class TransactionsResponse(BaseModel):
    transactions: List[TransactionDraft] = Field(default_factory=list)


class ClearResponse(BaseModel):
    removed: int


class ArtifactRequest(BaseModel):
    selected_status: Optional[TransactionStatus] = None


class ArtifactResponse(BaseModel):
    selected_status: TransactionStatus
    text: str
    transactions: List[RenderPair] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)


class StatusesResponse(BaseModel):
    statuses: List[TransactionStatus]
    default: TransactionStatus


class HealthResponse(BaseModel):
    ok: bool = True
