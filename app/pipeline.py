"""
Ingestion pipeline.

Pipeline shape, per file:
- detect format from media type / filename
- read content (async)
- decode -> raw records
- normalize -> drafts

Files in a batch are read concurrently. A failing file is reported and
skipped; it never stops the rest of the batch and never leaves partial
drafts behind. Drafts reach the store after the whole batch has settled,
in the order the files were submitted.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Tuple

from .artifact import Artifact, generate
from .decoders import decoder_for
from .detect import FileFormat, detect_format
from .errors import DecodeError, ReadAbortedError, ReadError, ReadFailedError, UnsupportedFormatError
from .log import get_logger
from .models import FileReport, NotificationKind, TransactionDraft, TransactionStatus
from .normalize import normalize_records
from .notify import NotificationSink
from .store import DraftStore

logger = get_logger()

UNSUPPORTED_MESSAGE = "Unsupported file type"
READ_ABORTED_MESSAGE = "File reading was aborted"
READ_FAILED_MESSAGE = "File reading has failed"
GENERATED_MESSAGE = "Transaction information copied to clipboard"

READ_ABORTED_REASON = "read-aborted"
READ_FAILED_REASON = "read-failed"


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file: name, declared media type and a way to read it."""

    filename: str
    media_type: Optional[str]
    read: Callable[[], Awaitable[bytes]]

    @classmethod
    def from_bytes(cls, filename: str, media_type: Optional[str], content: bytes) -> "IncomingFile":
        async def _read() -> bytes:
            return content

        return cls(filename=filename, media_type=media_type, read=_read)

    @classmethod
    def from_upload(cls, upload) -> "IncomingFile":
        """Wrap a Starlette/FastAPI UploadFile."""
        return cls(filename=upload.filename or "", media_type=upload.content_type, read=upload.read)


class ArtifactSink(Protocol):
    """Receives the generated script (clipboard, console, HTTP response...)."""

    def deliver(self, text: str) -> None:
        ...


class IngestionPipeline:
    def __init__(self, store: DraftStore, sink: NotificationSink) -> None:
        self.store = store
        self.sink = sink

    async def ingest(self, files: Sequence[IncomingFile]) -> List[FileReport]:
        """Ingest one batch of files into the store.

        Returns:
            One report per file, in submission order.
        """
        results = await asyncio.gather(*(self._process(f) for f in files))

        for _, drafts in results:
            self.store.append(drafts)

        accepted = sum(len(d) for _, d in results)
        logger.info(
            f"Batch ingested - files: {len(files)}, drafts added: {accepted}, "
            f"drafts held: {len(self.store)}"
        )
        return [report for report, _ in results]

    async def _process(self, file: IncomingFile) -> Tuple[FileReport, List[TransactionDraft]]:
        file_format = detect_format(file.media_type, file.filename)
        decoder = decoder_for(file_format)

        if decoder is None:
            err = UnsupportedFormatError(file.filename, file.media_type)
            logger.warning(f"Skipping file: {err}")
            self.sink.notify(NotificationKind.UNSUPPORTED_TYPE, UNSUPPORTED_MESSAGE)
            return self._failed(file, file_format, FileFormat.UNSUPPORTED.value, UNSUPPORTED_MESSAGE), []

        try:
            content = await self._read(file)
        except ReadError as ex:
            if isinstance(ex, ReadAbortedError):
                reason, message = READ_ABORTED_REASON, READ_ABORTED_MESSAGE
            else:
                reason, message = READ_FAILED_REASON, READ_FAILED_MESSAGE
            logger.error(f"Read failed for {file.filename}: {ex}")
            self.sink.notify(NotificationKind.DECODE_ERROR, message)
            return self._failed(file, file_format, reason, message), []

        try:
            records = decoder.decode(content)
        except DecodeError as ex:
            logger.error(f"{decoder.label} decode failed for {file.filename}: {ex}")
            self.sink.notify(NotificationKind.DECODE_ERROR, decoder.failure_message)
            return self._failed(file, file_format, ex.reason.value, decoder.failure_message), []

        drafts = normalize_records(records)
        logger.info(f"{decoder.label} file decoded: {file.filename} ({len(drafts)} records)")
        self.sink.notify(NotificationKind.DECODE_SUCCESS, decoder.success_message)

        report = FileReport(
            filename=file.filename,
            media_type=file.media_type,
            format=file_format,
            ok=True,
            records=len(drafts),
            message=decoder.success_message,
        )
        return report, drafts

    @staticmethod
    async def _read(file: IncomingFile) -> bytes:
        try:
            return await file.read()
        except ReadError:
            raise
        except asyncio.IncompleteReadError as ex:
            raise ReadAbortedError(f"{file.filename}: stream ended after {len(ex.partial)} bytes") from ex
        except (OSError, RuntimeError, ValueError) as ex:
            raise ReadFailedError(f"{file.filename}: {ex}") from ex

    @staticmethod
    def _failed(file: IncomingFile, file_format: FileFormat, reason: str, message: str) -> FileReport:
        return FileReport(
            filename=file.filename,
            media_type=file.media_type,
            format=file_format,
            ok=False,
            reason=reason,
            message=message,
        )

    def generate(self, status: TransactionStatus, sink: Optional[ArtifactSink] = None) -> Artifact:
        """Render the repair script for every draft held right now."""
        artifact = generate(self.store.snapshot(), status)
        if sink is not None:
            sink.deliver(artifact.text)

        logger.info(f"Repair script generated - drafts: {len(artifact.pairs)}, status: {status.value}")
        self.sink.notify(NotificationKind.GENERATION_SUCCESS, GENERATED_MESSAGE)
        return artifact
