from typing import List

from fastapi import Depends, FastAPI, File, Request, UploadFile

from .config import settings
from .log import setup_logger
from .models import (
    ArtifactRequest,
    ArtifactResponse,
    ClearResponse,
    HealthResponse,
    IngestResponse,
    StatusesResponse,
    TransactionsResponse,
    TransactionStatus,
)
from .notify import CollectingSink
from .pipeline import IncomingFile, IngestionPipeline
from .store import DraftStore

logger = setup_logger(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Turns transaction exports (JSON, Excel, CSV) into a repair script",
    version="0.1.0",
)

# One store per process: drafts accumulate across uploads until cleared.
app.state.store = DraftStore()


def get_store(request: Request) -> DraftStore:
    return request.app.state.store


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/transactions/upload", response_model=IngestResponse)
async def upload_transactions(
    files: List[UploadFile] = File(...),
    store: DraftStore = Depends(get_store),
):
    collected = CollectingSink()
    pipeline = IngestionPipeline(store, collected)

    reports = await pipeline.ingest([IncomingFile.from_upload(f) for f in files])
    return IngestResponse(
        files=reports,
        notifications=collected.notifications,
        total_transactions=len(store),
    )


@app.get("/transactions", response_model=TransactionsResponse)
def list_transactions(store: DraftStore = Depends(get_store)):
    return TransactionsResponse(transactions=list(store.snapshot()))


@app.delete("/transactions", response_model=ClearResponse)
def clear_transactions(store: DraftStore = Depends(get_store)):
    removed = store.clear()
    logger.info(f"Cleared {removed} drafts")
    return ClearResponse(removed=removed)


@app.get("/transactions/statuses", response_model=StatusesResponse)
def list_statuses():
    return StatusesResponse(statuses=list(TransactionStatus), default=settings.DEFAULT_SELECTED_STATUS)


@app.post("/transactions/artifact", response_model=ArtifactResponse)
def generate_artifact(body: ArtifactRequest, store: DraftStore = Depends(get_store)):
    status = body.selected_status or settings.DEFAULT_SELECTED_STATUS

    collected = CollectingSink()
    pipeline = IngestionPipeline(store, collected)
    artifact = pipeline.generate(status)

    return ArtifactResponse(
        selected_status=status,
        text=artifact.text,
        transactions=artifact.pairs,
        notifications=collected.notifications,
    )
