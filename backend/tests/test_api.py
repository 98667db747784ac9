"""Tests for the HTTP surface."""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from backend.config import settings
from backend.main import app, get_pipeline
from backend.parsers.extractor import TextExtractor
from backend.parsers.llm_client import Completion
from backend.services.pipeline import StatementPipeline

STUB_RECORD = {
    "metadata": {"ownerName": "Jane Doe", "bankName": "Acme Bank", "totalCountOfDepositsAsReported": None},
    "transactions": [
        {
            "date": "2024-01-01",
            "description": "Coffee",
            "amount": 4.5,
            "depositOrWithdrawal": "withdrawal",
            "transactionCategory": "Food",
        }
    ],
}


@pytest.fixture
def completion_backend():
    backend = AsyncMock()
    backend.complete.return_value = Completion(content=json.dumps(STUB_RECORD), finish_reason="stop")
    return backend


@pytest.fixture
def client(tmp_path, monkeypatch, completion_backend):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    pipeline = StatementPipeline(extractor=TextExtractor(ocr_backend=None), completion_backend=completion_backend)
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def _text_file(name: str = "statement.txt", body: bytes = b"Date: 2024-01-01 Desc: Coffee Amount: -4.50"):
    return ("files", (name, body, "text/plain"))


class TestProcessFiles:
    """Test POST /processFiles."""

    def test_success(self, client, tmp_path):
        response = client.post("/processFiles", files=[_text_file()])

        assert response.status_code == 200
        assert response.json() == {"success": True, "result": STUB_RECORD}
        # Temporary uploads are cleaned up
        assert list((tmp_path / "uploads").iterdir()) == []

    def test_no_files(self, client, completion_backend):
        response = client.post("/processFiles")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "No files uploaded."}
        completion_backend.complete.assert_not_called()

    def test_too_many_files(self, client, completion_backend):
        response = client.post("/processFiles", files=[_text_file(f"{i}.txt") for i in range(13)])

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "maximum 12" in response.json()["error"]
        completion_backend.complete.assert_not_called()

    def test_malformed_output(self, client, completion_backend):
        completion_backend.complete.return_value = Completion(content='{"metadata": {', finish_reason="length")

        response = client.post("/processFiles", files=[_text_file()])

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]
        assert body["raw"] == '{"metadata": {'

    def test_backend_failure(self, client, completion_backend):
        completion_backend.complete.side_effect = RuntimeError("boom")

        response = client.post("/processFiles", files=[_text_file()])

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "boom" in body["error"]
        assert "raw" not in body

    def test_multiple_files_in_order(self, client, completion_backend):
        response = client.post(
            "/processFiles",
            files=[_text_file("a.txt", b"AAA"), _text_file("b.txt", b"BBB")],
        )

        assert response.status_code == 200
        prompt = completion_backend.complete.await_args.args[0]
        assert '"""\n\nAAA\n\nBBB"""' in prompt


class TestHealth:
    """Test GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "ocr_configured" in response.json()


class TestLifecycle:
    """Test startup and shutdown hooks."""

    def test_shutdown_closes_ocr_client(self, tmp_path, monkeypatch, completion_backend):
        ocr_backend = AsyncMock()
        pipeline = StatementPipeline(extractor=TextExtractor(ocr_backend=ocr_backend), completion_backend=completion_backend)
        monkeypatch.setattr(settings, "data_dir", tmp_path)
        monkeypatch.setattr(StatementPipeline, "from_settings", classmethod(lambda cls, s: pipeline))

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            ocr_backend.close.assert_not_awaited()

        ocr_backend.close.assert_awaited_once()
