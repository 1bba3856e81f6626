from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from receiptpoints.config import Settings
from receiptpoints.engine import PointsEngine
from receiptpoints.ids import is_receipt_id
from receiptpoints.services.points_service.app import create_app
from receiptpoints.storage import InMemoryScoreStore


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(PointsEngine(InMemoryScoreStore())))


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_process_then_lookup(client: TestClient, target_document: dict, corner_market_document: dict) -> None:
    target = client.post("/receipts/process", json=target_document)
    corner = client.post("/receipts/process", json=corner_market_document)

    assert target.status_code == 200
    assert corner.status_code == 200
    target_id = target.json()["id"]
    assert is_receipt_id(target_id)
    assert target.json() == {"id": target_id}

    assert client.get(f"/receipts/{target_id}/points").json() == {"points": 28}
    assert client.get(f"/receipts/{corner.json()['id']}/points").json() == {"points": 109}


def test_identical_submissions_get_distinct_ids(client: TestClient, target_document: dict) -> None:
    first = client.post("/receipts/process", json=target_document).json()["id"]
    second = client.post("/receipts/process", json=target_document).json()["id"]

    assert first != second


def test_invalid_receipt_is_a_client_error(client: TestClient, target_document: dict) -> None:
    target_document["purchaseTime"] = "25:00"

    response = client.post("/receipts/process", json=target_document)

    assert response.status_code == 400
    assert response.json() == {"error": "The receipt is invalid."}


def test_undecodable_body_is_a_client_error(client: TestClient) -> None:
    response = client.post(
        "/receipts/process",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "The receipt is invalid."}


def test_unknown_id_is_not_found(client: TestClient) -> None:
    response = client.get("/receipts/7fb1377b-b223-49d9-a31a-5a02701dd310/points")

    assert response.status_code == 404
    assert response.json() == {"error": "No receipt found for that id."}


def test_unexpected_errors_hide_details(target_document: dict) -> None:
    class BrokenStore:
        def put(self, receipt_id: str, points: int) -> None:
            raise RuntimeError("disk on fire")

        def get(self, receipt_id: str) -> int | None:
            return None

    client = TestClient(create_app(PointsEngine(BrokenStore())), raise_server_exceptions=False)

    response = client.post("/receipts/process", json=target_document)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_create_app_builds_store_from_settings(tmp_path: Path, target_document: dict) -> None:
    settings = Settings(store="json", data_dir=tmp_path)
    client = TestClient(create_app(settings=settings))

    receipt_id = client.post("/receipts/process", json=target_document).json()["id"]

    assert (tmp_path / "points" / f"{receipt_id}.json").exists()
    assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": 28}


def test_run_hands_app_import_path_to_uvicorn(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delitem(sys.modules, "receiptpoints.services.points_service.app", raising=False)
    monkeypatch.delitem(sys.modules, "receiptpoints.services.points_service.main", raising=False)
    main = importlib.import_module("receiptpoints.services.points_service.main")

    calls = {}

    def fake_run(app: object, *, host: str, port: int, log_config: object) -> None:
        calls.update(app=app, host=host, port=port)

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RECEIPTPOINTS_HOST", "127.0.0.1")
    monkeypatch.setenv("RECEIPTPOINTS_PORT", "8123")
    monkeypatch.setenv("RECEIPTPOINTS_STORE", "json")
    monkeypatch.setattr(main.uvicorn, "run", fake_run)

    main.run()

    assert calls == {
        "app": "receiptpoints.services.points_service.app:app",
        "host": "127.0.0.1",
        "port": 8123,
    }
    assert "receiptpoints.services.points_service.app" not in sys.modules
    assert not (tmp_path / "data").exists()


def test_oversized_total_is_a_client_error(client: TestClient, target_document: dict) -> None:
    target_document["total"] = "1" * 29 + ".00"

    response = client.post("/receipts/process", json=target_document)

    assert response.status_code == 400
    assert response.json() == {"error": "The receipt is invalid."}


def test_empty_body_is_a_client_error(client: TestClient) -> None:
    response = client.post("/receipts/process", content=b"", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "The receipt is invalid."}
