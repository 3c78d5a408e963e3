import io
import json
import logging

from fastapi.testclient import TestClient
from openpyxl import Workbook

from app.main import app

client = TestClient(app)

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _xlsx(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _reset():
    r = client.delete("/transactions")
    assert r.status_code == 200


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_upload_json_accumulates_drafts():
    _reset()
    raw = json.dumps([{"id": "t1", "external_identifier": "e1", "status": "APPROVED"}]).encode()

    r = client.post("/transactions/upload", files=[("files", ("txns.json", raw, "application/json"))])
    assert r.status_code == 200

    data = r.json()
    assert data["total_transactions"] == 1
    assert data["files"][0]["ok"] is True
    assert data["files"][0]["format"] == "structured-text"
    assert data["notifications"] == [
        {"kind": "decode-success", "message": "JSON file processed successfully"}
    ]

    r = client.get("/transactions")
    assert r.json()["transactions"] == [
        {
            "id": "t1",
            "external_identifier": "e1",
            "status": "PENDING",
            "status_message": "DECLINED-Manual",
        }
    ]


def test_upload_mixed_batch_reports_each_file():
    _reset()
    files = [
        ("files", ("good.json", b'[{"id": "t1"}]', "application/json")),
        ("files", ("bad.json", b'[{"id": ', "application/json")),
        ("files", ("sheet.xlsx", _xlsx([["id", "external_identifier"], ["t2", "e2"]]), XLSX)),
        ("files", ("notes.CSV", b"id\nt9\n", "application/octet-stream")),
    ]

    r = client.post("/transactions/upload", files=files)
    assert r.status_code == 200

    data = r.json()
    assert [f["ok"] for f in data["files"]] == [True, False, True, False]
    assert data["files"][1]["reason"] == "malformed-syntax"
    assert data["files"][3]["format"] == "unsupported"
    assert data["total_transactions"] == 2

    kinds = sorted(n["kind"] for n in data["notifications"])
    assert kinds == ["decode-error", "decode-success", "decode-success", "unsupported-type"]

    ids = [t["id"] for t in client.get("/transactions").json()["transactions"]]
    assert ids == ["t1", "t2"]


def test_failed_file_is_logged_once(caplog):
    _reset()
    caplog.set_level(logging.INFO, logger="txn_repair")

    client.post("/transactions/upload", files=[("files", ("bad.json", b"[", "application/json"))])

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "bad.json" in errors[0].getMessage()


def test_upload_requires_files():
    r = client.post("/transactions/upload")
    assert r.status_code == 422


def test_artifact_uses_selected_status():
    _reset()
    raw = b"id,external_identifier\nt1,e1\nt2,e2\n"
    client.post("/transactions/upload", files=[("files", ("txns.csv", raw, "text/csv"))])

    r = client.post("/transactions/artifact", json={"selected_status": "APPROVED"})
    assert r.status_code == 200

    data = r.json()
    assert data["selected_status"] == "APPROVED"
    assert data["transactions"] == [
        {"id": '"t1"', "external_identifier": "nil"},
        {"id": '"t2"', "external_identifier": "nil"},
    ]
    assert 'id: "t2"' in data["text"]
    assert data["text"].count("TransactionStatuses::APPROVED") == 1
    assert data["notifications"] == [
        {"kind": "generation-success", "message": "Transaction information copied to clipboard"}
    ]

    again = client.post("/transactions/artifact", json={"selected_status": "APPROVED"})
    assert again.json()["text"] == data["text"]


def test_artifact_defaults_and_rejects_unknown_status():
    _reset()
    r = client.post("/transactions/artifact", json={})
    assert r.status_code == 200
    assert r.json()["selected_status"] == "DECLINED"

    r = client.post("/transactions/artifact", json={"selected_status": "PENDING"})
    assert r.status_code == 422


def test_statuses():
    r = client.get("/transactions/statuses")
    assert r.json() == {"statuses": ["DECLINED", "ERROR", "APPROVED"], "default": "DECLINED"}


def test_clear_reports_removed_count():
    _reset()
    client.post(
        "/transactions/upload",
        files=[("files", ("a.json", b'[{"id": "a"}, {"id": "b"}]', "application/json"))],
    )
    r = client.delete("/transactions")
    assert r.json() == {"removed": 2}
    assert client.get("/transactions").json() == {"transactions": []}
